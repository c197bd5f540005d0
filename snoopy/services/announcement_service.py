"""
snoopy.services.announcement_service — Outbound message delivery
=================================================================

Owns channel resolution and send-failure handling for everything Snoopy
posts: command replies and voice join notifications.  A failed send is
logged and dropped; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.abc import Messageable

if TYPE_CHECKING:
    from snoopy.bot.core import SnoopyBot

logger = logging.getLogger(__name__)


async def send_safe(
    channel: Messageable,
    content: str | None = None,
    *,
    embed: discord.Embed | None = None,
) -> bool:
    """Send to *channel*, logging instead of raising on Discord errors."""
    try:
        await channel.send(content=content, embed=embed)
        return True
    except discord.Forbidden:
        logger.warning(
            "Missing permissions to send in channel %s",
            getattr(channel, "id", "?"),
        )
    except discord.HTTPException:
        logger.exception("Failed to send message to channel %s", getattr(channel, "id", "?"))
    return False


async def resolve_notification_channel(
    bot: SnoopyBot, channel_id: str,
) -> Messageable | None:
    """Find the configured notification channel (cache first, then REST)."""
    try:
        snowflake = int(channel_id)
    except ValueError:
        logger.warning("Configured notification channel %r is not a valid id", channel_id)
        return None

    channel = bot.get_channel(snowflake)
    if channel is None:
        try:
            channel = await bot.fetch_channel(snowflake)
        except (discord.NotFound, discord.Forbidden):
            logger.warning("Notification channel %s is missing or not visible", channel_id)
            return None
        except discord.HTTPException:
            logger.exception("Failed to fetch notification channel %s", channel_id)
            return None

    if not isinstance(channel, Messageable):
        logger.warning("Notification channel %s cannot receive messages", channel_id)
        return None
    return channel


async def announce_voice_join(
    bot: SnoopyBot, notification_channel_id: str, content: str,
) -> bool:
    """Post a voice join notification.  Returns True if it was delivered."""
    channel = await resolve_notification_channel(bot, notification_channel_id)
    if channel is None:
        return False
    return await send_safe(channel, content)
