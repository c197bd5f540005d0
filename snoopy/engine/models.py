"""
snoopy.engine.models — Per-guild configuration records
=======================================================

Plain dataclasses for the two records Snoopy persists, plus their JSON
shape.  The on-disk keys (``notificationChannel`` and
``WatchedVoiceChannels``) are kept as they have always been so existing
``snoopyConfig.json`` files keep loading.

Snowflakes are stored as strings, exactly as they appear in the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field

NOTIFICATION_KEY = "notificationChannel"
WATCHED_KEY = "WatchedVoiceChannels"


@dataclass
class WatchedChannel:
    """A voice channel opted into join notifications.

    ``id`` is the identity; ``name`` is a display cache and may go stale
    if the channel is renamed.
    """
    name: str
    id: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "id": self.id}

    @classmethod
    def from_dict(cls, data: dict) -> WatchedChannel:
        return cls(name=str(data.get("name", "")), id=str(data["id"]))


@dataclass
class GuildConfig:
    """Notification settings for one guild."""
    notification_channel_id: str = ""
    watched_channels: list[WatchedChannel] = field(default_factory=list)

    # -------------------------------------------------------------------
    # Watch list
    # -------------------------------------------------------------------
    def find_watched(self, channel_id: str) -> WatchedChannel | None:
        for ch in self.watched_channels:
            if ch.id == channel_id:
                return ch
        return None

    def is_watched(self, channel_id: str) -> bool:
        return self.find_watched(channel_id) is not None

    def add_watched(self, name: str, channel_id: str) -> bool:
        """Append a channel unless its id is already watched.

        Returns True if the list changed.
        """
        if self.is_watched(channel_id):
            return False
        self.watched_channels.append(WatchedChannel(name=name, id=channel_id))
        return True

    def remove_watched(self, channel_id: str) -> bool:
        """Drop the entry with *channel_id*.  Returns True if one was removed."""
        before = len(self.watched_channels)
        self.watched_channels = [
            ch for ch in self.watched_channels if ch.id != channel_id
        ]
        return len(self.watched_channels) != before

    def is_empty(self) -> bool:
        return not self.notification_channel_id and not self.watched_channels

    # -------------------------------------------------------------------
    # JSON
    # -------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            NOTIFICATION_KEY: self.notification_channel_id,
            WATCHED_KEY: [ch.to_dict() for ch in self.watched_channels],
        }

    @classmethod
    def from_dict(cls, data: dict) -> GuildConfig:
        """Build a config from its JSON object.

        Duplicate ids in the file collapse to their first occurrence.
        """
        cfg = cls(notification_channel_id=str(data.get(NOTIFICATION_KEY) or ""))
        for raw in data.get(WATCHED_KEY) or []:
            ch = WatchedChannel.from_dict(raw)
            cfg.add_watched(ch.name, ch.id)
        return cfg


def is_legacy_document(data: dict) -> bool:
    """True if *data* is the old single-guild layout rather than a guild map."""
    return NOTIFICATION_KEY in data or WATCHED_KEY in data
