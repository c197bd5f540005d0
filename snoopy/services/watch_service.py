"""
snoopy.services.watch_service — Watch-list mutations & channel lookup
======================================================================

The command cog does the Discord I/O; everything it decides lives here:

- resolving a user-typed voice channel name (or id) against the guild's
  channel list,
- applying ``setchannel`` / ``watchchannel`` / ``unwatchchannel`` to the
  :class:`ConfigStore` through its serialised ``update`` path.

Name matching is exact and case-sensitive.  If several voice channels
share the requested name the lookup is rejected as ambiguous instead of
silently picking one; the user can retry with the channel id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from snoopy.engine.models import GuildConfig, WatchedChannel
from snoopy.services.config_store import ConfigStore, UpdateOutcome

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Channel lookup
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ChannelRef:
    """Minimal view of a guild voice channel."""
    id: str
    name: str


class LookupStatus(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"


@dataclass
class ChannelLookup:
    status: LookupStatus
    channel: ChannelRef | None = None
    candidates: list[ChannelRef] = field(default_factory=list)


def resolve_voice_channel(channels: Iterable[ChannelRef], query: str) -> ChannelLookup:
    """Find the voice channel named (or identified by) *query*.

    A purely numeric query that equals a channel id wins over name
    matching, which lets users disambiguate duplicate names.
    """
    channels = list(channels)
    if query.isdigit():
        for ch in channels:
            if ch.id == query:
                return ChannelLookup(LookupStatus.FOUND, channel=ch)

    matches = [ch for ch in channels if ch.name == query]
    if not matches:
        return ChannelLookup(LookupStatus.NOT_FOUND)
    if len(matches) > 1:
        return ChannelLookup(LookupStatus.AMBIGUOUS, candidates=matches)
    return ChannelLookup(LookupStatus.FOUND, channel=matches[0])


def find_watched_by_name(cfg: GuildConfig | None, name: str) -> WatchedChannel | None:
    """Look up a watch-list entry by its cached display name."""
    if cfg is None:
        return None
    for ch in cfg.watched_channels:
        if ch.name == name:
            return ch
    return None


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------
async def set_notification_channel(
    store: ConfigStore, guild_id: str, channel_id: str,
) -> UpdateOutcome[bool]:
    """Point the guild's notifications at *channel_id*."""

    def _apply(cfg: GuildConfig) -> bool:
        changed = cfg.notification_channel_id != channel_id
        cfg.notification_channel_id = channel_id
        return changed

    outcome = await store.update(guild_id, _apply)
    logger.info("setchannel: guild %s → channel %s", guild_id, channel_id)
    return outcome


async def watch_channel(
    store: ConfigStore, guild_id: str, channel: ChannelRef,
) -> UpdateOutcome[bool]:
    """Add *channel* to the guild's watch list (idempotent on id)."""
    outcome = await store.update(
        guild_id, lambda cfg: cfg.add_watched(channel.name, channel.id),
    )
    if outcome.result:
        logger.info("watchchannel: %s (%s) in guild %s", channel.name, channel.id, guild_id)
    else:
        logger.info(
            "watchchannel: %s (%s) already watched in guild %s",
            channel.name, channel.id, guild_id,
        )
    return outcome


async def unwatch_channel(
    store: ConfigStore, guild_id: str, channel_id: str,
) -> UpdateOutcome[bool]:
    """Remove *channel_id* from the guild's watch list; absent is a no-op."""
    outcome = await store.update(guild_id, lambda cfg: cfg.remove_watched(channel_id))
    if outcome.result:
        logger.info("unwatchchannel: %s in guild %s", channel_id, guild_id)
    else:
        logger.debug("unwatchchannel: %s was not watched in guild %s", channel_id, guild_id)
    return outcome
