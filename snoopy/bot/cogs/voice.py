"""
snoopy.bot.cogs.voice — Voice Join Notifier
============================================

Watches voice-state updates and posts "<user> joined <channel> with N
members" to the guild's notification channel when someone enters a
watched voice channel.  Leaves and same-channel updates (mute, deafen,
streaming) are ignored.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from snoopy.engine.voice import (
    VoiceTransition,
    count_occupancy,
    format_join_message,
    watched_join,
)
from snoopy.services.announcement_service import announce_voice_join

if TYPE_CHECKING:
    from snoopy.bot.core import SnoopyBot

logger = logging.getLogger(__name__)


def _channel_id(state: discord.VoiceState | None) -> str | None:
    if state is None or state.channel is None:
        return None
    return str(state.channel.id)


def voice_state_snapshot(guild: discord.Guild) -> list[tuple[str, str]]:
    """Every ``(user_id, channel_id)`` pair in the guild's live voice states."""
    snapshot: list[tuple[str, str]] = []
    for vc in [*guild.voice_channels, *guild.stage_channels]:
        for user_id in vc.voice_states:
            snapshot.append((str(user_id), str(vc.id)))
    return snapshot


class Voice(commands.Cog, name="Voice"):
    """Posts join notifications for watched voice channels."""

    def __init__(self, bot: SnoopyBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState | None,
        after: discord.VoiceState,
    ) -> None:
        """Track voice join events."""
        logger.debug(
            "Gateway event: VOICE_STATE %s (%s → %s, bot=%s)",
            member.name,
            getattr(getattr(before, "channel", None), "name", "None"),
            getattr(after.channel, "name", "None"),
            member.bot,
        )
        try:
            await self._handle_voice_update(member, before, after)
        except Exception:
            logger.exception("Error processing voice state update for user %s", member.id)

    async def _handle_voice_update(
        self,
        member: discord.Member,
        before: discord.VoiceState | None,
        after: discord.VoiceState,
    ) -> None:
        if member.bot and self.bot.cfg.ignore_bots:
            return

        guild = member.guild
        transition = VoiceTransition(
            before_channel_id=_channel_id(before),
            after_channel_id=_channel_id(after),
        )
        cfg = self.bot.store.get(str(guild.id))
        watched = watched_join(transition, cfg)
        if watched is None:
            return

        # Recount from the live snapshot; the joining member is in it already
        member_count = max(count_occupancy(voice_state_snapshot(guild), watched.id), 1)
        logger.info(
            "User %s joined channel %s with %d members",
            member.display_name, watched.name, member_count,
        )

        content = format_join_message(str(member.id), watched.id, member_count)
        await announce_voice_join(self.bot, cfg.notification_channel_id, content)


async def setup(bot: SnoopyBot) -> None:
    await bot.add_cog(Voice(bot))
