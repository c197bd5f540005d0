"""
snoopy.engine.voice — Voice join decision logic
================================================

Pure functions behind the voice cog: decide whether a voice-state
transition is a join of a watched channel, recount the channel's
occupancy from a snapshot, and phrase the notification.

Occupancy is always recomputed from the platform's live voice-state list
rather than tracked incrementally; the gateway does not reliably tell us
about every membership change, so a running counter would drift.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from snoopy.engine.models import GuildConfig, WatchedChannel


@dataclass(frozen=True, slots=True)
class VoiceTransition:
    """Channel ids before and after a voice-state update (None = no channel)."""
    before_channel_id: str | None
    after_channel_id: str | None

    @property
    def channel_unchanged(self) -> bool:
        # Mute/deafen toggles and similar arrive with the same channel
        return self.before_channel_id == self.after_channel_id


def watched_join(
    transition: VoiceTransition,
    cfg: GuildConfig | None,
) -> WatchedChannel | None:
    """Return the watched channel the user just entered, if any.

    Only entries are notified; a move between two watched channels counts
    as a join of the new one.
    """
    if cfg is None or transition.channel_unchanged:
        return None
    if not cfg.notification_channel_id:
        return None
    if transition.after_channel_id is None:
        return None
    return cfg.find_watched(transition.after_channel_id)


def count_occupancy(
    voice_states: Iterable[tuple[str, str | None]],
    channel_id: str,
) -> int:
    """Count ``(user_id, channel_id)`` pairs currently in *channel_id*."""
    return sum(1 for _, current in voice_states if current == channel_id)


def format_join_message(user_id: str, channel_id: str, member_count: int) -> str:
    """Phrase the notification; a lone member "started" the chat."""
    if member_count <= 1:
        return f"<@{user_id}> started a voice chat in <#{channel_id}>"
    return f"<@{user_id}> joined <#{channel_id}> with {member_count} members"
