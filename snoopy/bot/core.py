"""
snoopy.bot.core — Bot Instance & Cog Loader
============================================

Defines :class:`SnoopyBot`, a ``commands.Bot`` subclass that:

1. Carries the shared settings (``bot.cfg``) and guild config store
   (``bot.store``) so every Cog can reach them via ``self.bot``.
2. Loads the Cogs in ``snoopy/bot/cogs/``.
3. On ready, migrates a legacy single-guild ``snoopyConfig.json`` to the
   per-guild layout once the owning guild is known.

Text commands are plain chat messages parsed by the ``Commands`` cog, so
discord.py's own prefix-command processing is switched off.
"""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from snoopy.config import SnoopyConfig
from snoopy.services.config_store import ConfigStore

logger = logging.getLogger(__name__)

# Cog modules to load on startup
EXTENSIONS: list[str] = [
    "snoopy.bot.cogs.text_commands",
    "snoopy.bot.cogs.voice",
]


class SnoopyBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    cfg:
        The parsed :class:`SnoopyConfig` from ``config.yaml``.
    store:
        The per-guild :class:`ConfigStore`.
    """

    def __init__(self, cfg: SnoopyConfig, store: ConfigStore) -> None:
        # default() already includes GUILDS and GUILD_VOICE_STATES.
        # MESSAGE_CONTENT is privileged and must be enabled in the
        # Developer Portal, or every command arrives with empty content.
        intents = discord.Intents.default()
        intents.message_content = True
        intents.presences = False

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.cfg = cfg
        self.store = store

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all Cog extensions before connecting.

        A Cog that fails to load is logged and skipped.
        """
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)
        logger.info("Bot is now running in %d guild(s).  Press CTRL-C to exit.", len(self.guilds))

        if self.store.has_pending_legacy:
            await self.store.adopt_legacy(self.guild_id_for_channel)

    async def on_message(self, message: discord.Message) -> None:
        # Handled by the Commands cog listener
        return

    def guild_id_for_channel(self, channel_id: str) -> str | None:
        """Return the id of the guild owning *channel_id*, from the cache."""
        try:
            channel = self.get_channel(int(channel_id))
        except ValueError:
            return None
        guild = getattr(channel, "guild", None)
        return str(guild.id) if guild is not None else None
