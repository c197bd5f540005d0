"""
tests/test_voice.py — Voice Join Notification Tests
====================================================
Covers the pure join decision / occupancy / wording functions and the
``Voice`` cog end-to-end with mock guild state.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from conftest import (
    GAMING_ID,
    GENERAL_ID,
    GUILD_ID,
    NOTIFY_CHANNEL_ID,
    make_bot,
    make_guild,
    make_text_channel,
    make_voice_channel,
    run_async,
)
from snoopy.bot.cogs.voice import Voice, voice_state_snapshot
from snoopy.engine.models import GuildConfig, WatchedChannel
from snoopy.engine.voice import (
    VoiceTransition,
    count_occupancy,
    format_join_message,
    watched_join,
)

WATCHED_CFG = GuildConfig("500", [WatchedChannel("General", "1001")])


# ---------------------------------------------------------------------------
# Pure logic
# ---------------------------------------------------------------------------
class TestWatchedJoin:

    def test_join_from_nowhere(self):
        hit = watched_join(VoiceTransition(None, "1001"), WATCHED_CFG)
        assert hit == WatchedChannel("General", "1001")

    def test_move_between_watched_channels_counts_as_join(self):
        cfg = GuildConfig("500", [WatchedChannel("General", "1001"), WatchedChannel("Gaming", "1002")])
        assert watched_join(VoiceTransition("1002", "1001"), cfg).id == "1001"

    @pytest.mark.parametrize("channel", [None, "1001", "1002"])
    def test_unchanged_channel_never_notifies(self, channel):
        assert watched_join(VoiceTransition(channel, channel), WATCHED_CFG) is None

    def test_leave_never_notifies(self):
        assert watched_join(VoiceTransition("1001", None), WATCHED_CFG) is None

    def test_unwatched_channel(self):
        assert watched_join(VoiceTransition(None, "1002"), WATCHED_CFG) is None

    def test_no_notification_channel(self):
        cfg = GuildConfig("", [WatchedChannel("General", "1001")])
        assert watched_join(VoiceTransition(None, "1001"), cfg) is None

    def test_unknown_guild(self):
        assert watched_join(VoiceTransition(None, "1001"), None) is None


class TestOccupancy:

    def test_counts_only_matching_channel(self):
        states = [("1", "1001"), ("2", "1001"), ("3", "1002"), ("4", None)]
        assert count_occupancy(states, "1001") == 2
        assert count_occupancy(states, "1003") == 0

    def test_snapshot_from_guild(self):
        guild = make_guild(voice_channels=[
            make_voice_channel(GENERAL_ID, "General", members=(7, 8)),
            make_voice_channel(GAMING_ID, "Gaming", members=(9,)),
        ])
        assert sorted(voice_state_snapshot(guild)) == [
            ("7", "1001"), ("8", "1001"), ("9", "1002"),
        ]


class TestFormatJoinMessage:

    def test_single_member_started(self):
        assert format_join_message("7", "1001", 1) == "<@7> started a voice chat in <#1001>"

    def test_multiple_members(self):
        assert format_join_message("7", "1001", 3) == "<@7> joined <#1001> with 3 members"


# ---------------------------------------------------------------------------
# Cog
# ---------------------------------------------------------------------------
def _member(user_id: int, guild, bot: bool = False):
    member = MagicMock()
    member.id = user_id
    member.bot = bot
    member.name = f"user{user_id}"
    member.display_name = f"User {user_id}"
    member.guild = guild
    return member


def _state(channel_id: int | None):
    if channel_id is None:
        return SimpleNamespace(channel=None)
    return SimpleNamespace(channel=SimpleNamespace(id=channel_id, name=f"vc{channel_id}"))


class TestVoiceCog:

    def _setup(self, store, occupants: tuple[int, ...], **cfg):
        run_async(store.update(str(GUILD_ID), lambda c: _apply_watched(c)))
        notify = make_text_channel(NOTIFY_CHANNEL_ID)
        guild = make_guild(voice_channels=[
            make_voice_channel(GENERAL_ID, "General", members=occupants),
            make_voice_channel(GAMING_ID, "Gaming"),
        ])
        cog = Voice(make_bot(store, text_channels=[notify], **cfg))
        return cog, guild, notify

    def test_first_joiner_started_voice_chat(self, store):
        cog, guild, notify = self._setup(store, occupants=(7,))
        run_async(cog.on_voice_state_update(_member(7, guild), None, _state(GENERAL_ID)))
        notify.send.assert_called_once()
        text = notify.send.call_args.kwargs["content"]
        assert "started a voice chat" in text
        assert f"<#{GENERAL_ID}>" in text

    def test_second_joiner_reports_count(self, store):
        cog, guild, notify = self._setup(store, occupants=(7, 8))
        run_async(cog.on_voice_state_update(_member(8, guild), _state(None), _state(GENERAL_ID)))
        text = notify.send.call_args.kwargs["content"]
        assert text == f"<@8> joined <#{GENERAL_ID}> with 2 members"

    def test_mute_toggle_is_ignored(self, store):
        cog, guild, notify = self._setup(store, occupants=(7,))
        run_async(cog.on_voice_state_update(_member(7, guild), _state(GENERAL_ID), _state(GENERAL_ID)))
        notify.send.assert_not_called()

    def test_unwatched_channel_is_ignored(self, store):
        cog, guild, notify = self._setup(store, occupants=())
        run_async(cog.on_voice_state_update(_member(7, guild), None, _state(GAMING_ID)))
        notify.send.assert_not_called()

    def test_leave_is_ignored(self, store):
        cog, guild, notify = self._setup(store, occupants=())
        run_async(cog.on_voice_state_update(_member(7, guild), _state(GENERAL_ID), _state(None)))
        notify.send.assert_not_called()

    def test_bots_ignored_by_default(self, store):
        cog, guild, notify = self._setup(store, occupants=(7,))
        run_async(cog.on_voice_state_update(_member(7, guild, bot=True), None, _state(GENERAL_ID)))
        notify.send.assert_not_called()

    def test_bots_announced_when_enabled(self, store):
        cog, guild, notify = self._setup(store, occupants=(7,), ignore_bots=False)
        run_async(cog.on_voice_state_update(_member(7, guild, bot=True), None, _state(GENERAL_ID)))
        notify.send.assert_called_once()

    def test_stale_snapshot_still_counts_joiner(self, store):
        cog, guild, notify = self._setup(store, occupants=())
        run_async(cog.on_voice_state_update(_member(7, guild), None, _state(GENERAL_ID)))
        assert "started a voice chat" in notify.send.call_args.kwargs["content"]

    def test_missing_notification_channel_is_logged_not_raised(self, store):
        run_async(store.update(str(GUILD_ID), lambda c: _apply_watched(c)))
        guild = make_guild(voice_channels=[make_voice_channel(GENERAL_ID, "General", members=(7,))])
        cog = Voice(make_bot(store))  # notification channel not in cache, fetch → NotFound
        run_async(cog.on_voice_state_update(_member(7, guild), None, _state(GENERAL_ID)))


def _apply_watched(cfg: GuildConfig) -> None:
    cfg.notification_channel_id = str(NOTIFY_CHANNEL_ID)
    cfg.add_watched("General", str(GENERAL_ID))
