"""
snoopy.services.embeds — Discord embed builders for command replies
====================================================================

All embed construction lives here so the cogs only need to supply data.
"""

from __future__ import annotations

import discord

from snoopy.constants import HELP_ENTRIES, MSG_NO_NOTIFICATION_CHANNEL, SNOOPY_COLOR
from snoopy.engine.models import GuildConfig

# Discord rejects embed field values longer than this
MAX_FIELD_LENGTH = 1024


def build_help_embed(prefix: str) -> discord.Embed:
    """List every command with its usage line."""
    embed = discord.Embed(
        title="\U0001f436 Snoopy commands",
        description="Snoopy posts a message whenever someone joins a watched voice channel.",
        color=discord.Color(SNOOPY_COLOR),
    )
    for usage, description in HELP_ENTRIES:
        embed.add_field(name=f"`{prefix} {usage}`", value=description, inline=False)
    return embed


def build_watchlist_embed(cfg: GuildConfig | None, prefix: str) -> discord.Embed:
    """Summarise a guild's notification channel and watch list."""
    embed = discord.Embed(
        title="\U0001f50a Watched voice channels",
        color=discord.Color(SNOOPY_COLOR),
    )

    if cfg is not None and cfg.notification_channel_id:
        notify = f"<#{cfg.notification_channel_id}>"
    else:
        notify = MSG_NO_NOTIFICATION_CHANNEL.format(prefix=prefix)
    embed.add_field(name="Notification channel", value=notify, inline=False)

    watched = cfg.watched_channels if cfg is not None else []
    if watched:
        value = ""
        for i, ch in enumerate(watched):
            line = f"<#{ch.id}> (`{ch.id}`)\n"
            more = f"…and {len(watched) - i} more"
            if len(value) + len(line) + len(more) > MAX_FIELD_LENGTH:
                value += more
                break
            value += line
        embed.add_field(name=f"Watching ({len(watched)})", value=value.rstrip(), inline=False)
    else:
        embed.add_field(
            name="Watching (0)",
            value=f"Nothing yet, add one with `{prefix} watchchannel <channel name>`.",
            inline=False,
        )
    return embed
