"""
snoopy.bot.cogs.text_commands — Text Command Handler
======================================================

Listens for on_message and handles Snoopy's chat commands:
- ``snoopy help`` — list commands
- ``snoopy setchannel`` — send notifications to this text channel
- ``snoopy watchchannel <name>`` — watch a voice channel
- ``snoopy unwatchchannel <name>`` — stop watching a voice channel
- ``snoopy watchlist`` — show the current configuration

Pipeline:
1. on_message fires → gate checks (self, bots, DMs)
2. parse_command matches the literal prefix
3. channel lookups go to Discord via ``Guild.fetch_channels``
4. mutations go through watch_service → ConfigStore.update (saves)
5. every outcome, including failures, gets a reply
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from snoopy.constants import (
    MSG_AMBIGUOUS,
    MSG_LOOKUP_FAILED,
    MSG_MISSING_NAME,
    MSG_NOT_FOUND,
    MSG_NOT_PERSISTED,
    MSG_SETCHANNEL_OK,
    MSG_UNWATCH_ABSENT,
    MSG_UNWATCH_OK,
    MSG_WATCH_DUPLICATE,
    MSG_WATCH_OK,
)
from snoopy.engine.commands import Command, ParsedCommand, parse_command
from snoopy.services.announcement_service import send_safe
from snoopy.services.embeds import build_help_embed, build_watchlist_embed
from snoopy.services.watch_service import (
    ChannelRef,
    LookupStatus,
    find_watched_by_name,
    resolve_voice_channel,
    set_notification_channel,
    unwatch_channel,
    watch_channel,
)

if TYPE_CHECKING:
    from snoopy.bot.core import SnoopyBot

logger = logging.getLogger(__name__)


class ChannelLookupError(Exception):
    """Discord could not give us the guild's channel list."""


def voice_channel_refs(channels: Iterable[object]) -> list[ChannelRef]:
    """Keep voice-capable channels, flattened to :class:`ChannelRef`."""
    return [
        ChannelRef(id=str(ch.id), name=ch.name)
        for ch in channels
        if isinstance(ch, (discord.VoiceChannel, discord.StageChannel))
    ]


class Commands(commands.Cog, name="Commands"):
    """Parses ``snoopy ...`` chat commands and edits the guild config."""

    def __init__(self, bot: SnoopyBot) -> None:
        self.bot = bot

    @property
    def prefix(self) -> str:
        return self.bot.cfg.command_prefix

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Entry point for every message the bot can see."""
        if self.bot.user is not None and message.author.id == self.bot.user.id:
            return
        if message.author.bot or message.guild is None:
            return

        parsed = parse_command(message.content, self.prefix)
        if parsed is None:
            return

        logger.debug(
            "Command %s from %s in guild %s",
            parsed.name, message.author, message.guild.id,
        )
        try:
            await self.dispatch_command(message, parsed)
        except Exception:
            logger.exception(
                "Error handling %r in guild %s", message.content, message.guild.id,
            )

    async def dispatch_command(self, message: discord.Message, parsed: ParsedCommand) -> None:
        if parsed.name is Command.HELP:
            await send_safe(message.channel, embed=build_help_embed(self.prefix))
        elif parsed.name is Command.SET_CHANNEL:
            await self._set_channel(message)
        elif parsed.name is Command.WATCH_CHANNEL:
            await self._watch(message, parsed.argument)
        elif parsed.name is Command.UNWATCH_CHANNEL:
            await self._unwatch(message, parsed.argument)
        elif parsed.name is Command.WATCH_LIST:
            cfg = self.bot.store.get(str(message.guild.id))
            await send_safe(message.channel, embed=build_watchlist_embed(cfg, self.prefix))

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    async def _fetch_voice_channels(self, guild: discord.Guild) -> list[ChannelRef]:
        try:
            channels = await guild.fetch_channels()
        except discord.HTTPException as exc:
            logger.warning("Failed to fetch channels for guild %s: %s", guild.id, exc)
            raise ChannelLookupError(str(exc)) from exc
        return voice_channel_refs(channels)

    async def _reply(self, message: discord.Message, text: str, persisted: bool = True) -> None:
        if not persisted:
            text = f"{text}\n{MSG_NOT_PERSISTED}"
        await send_safe(message.channel, text)

    # -------------------------------------------------------------------
    # snoopy setchannel
    # -------------------------------------------------------------------
    async def _set_channel(self, message: discord.Message) -> None:
        outcome = await set_notification_channel(
            self.bot.store, str(message.guild.id), str(message.channel.id),
        )
        await self._reply(message, MSG_SETCHANNEL_OK, outcome.persisted)

    # -------------------------------------------------------------------
    # snoopy watchchannel <name>
    # -------------------------------------------------------------------
    async def _watch(self, message: discord.Message, name: str) -> None:
        if not name:
            await self._reply(message, MSG_MISSING_NAME.format(action="set"))
            return

        try:
            channels = await self._fetch_voice_channels(message.guild)
        except ChannelLookupError:
            await self._reply(message, MSG_LOOKUP_FAILED)
            return

        lookup = resolve_voice_channel(channels, name)
        if lookup.status is LookupStatus.NOT_FOUND:
            logger.debug("watchchannel: %r not found in guild %s", name, message.guild.id)
            await self._reply(message, MSG_NOT_FOUND.format(name=name))
            return
        if lookup.status is LookupStatus.AMBIGUOUS:
            ids = ", ".join(f"`{ch.id}`" for ch in lookup.candidates)
            await self._reply(message, MSG_AMBIGUOUS.format(name=name, ids=ids))
            return

        channel = lookup.channel
        outcome = await watch_channel(self.bot.store, str(message.guild.id), channel)
        template = MSG_WATCH_OK if outcome.result else MSG_WATCH_DUPLICATE
        await self._reply(message, template.format(mention=f"<#{channel.id}>"), outcome.persisted)

    # -------------------------------------------------------------------
    # snoopy unwatchchannel <name>
    # -------------------------------------------------------------------
    async def _unwatch(self, message: discord.Message, name: str) -> None:
        if not name:
            await self._reply(message, MSG_MISSING_NAME.format(action="remove"))
            return

        guild_id = str(message.guild.id)
        try:
            channels = await self._fetch_voice_channels(message.guild)
        except ChannelLookupError:
            await self._reply(message, MSG_LOOKUP_FAILED)
            return

        lookup = resolve_voice_channel(channels, name)
        if lookup.status is LookupStatus.AMBIGUOUS:
            ids = ", ".join(f"`{ch.id}`" for ch in lookup.candidates)
            await self._reply(message, MSG_AMBIGUOUS.format(name=name, ids=ids))
            return

        if lookup.status is LookupStatus.FOUND:
            channel_id = lookup.channel.id
        else:
            # The channel may have been deleted; fall back to the cached name
            stale = find_watched_by_name(self.bot.store.get(guild_id), name)
            if stale is None:
                await self._reply(message, MSG_NOT_FOUND.format(name=name))
                return
            channel_id = stale.id

        outcome = await unwatch_channel(self.bot.store, guild_id, channel_id)
        template = MSG_UNWATCH_OK if outcome.result else MSG_UNWATCH_ABSENT
        await self._reply(message, template.format(mention=f"<#{channel_id}>"), outcome.persisted)


async def setup(bot: SnoopyBot) -> None:
    await bot.add_cog(Commands(bot))
