"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from snoopy.config import SnoopyConfig
from snoopy.services.config_store import ConfigStore

GUILD_ID = 111222333
NOTIFY_CHANNEL_ID = 500
GENERAL_ID = 1001
GAMING_ID = 1002


def run_async(coro):
    """Run an async coroutine without pytest-asyncio."""
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "snoopyConfig.json"


@pytest.fixture
def store(store_path: Path) -> ConfigStore:
    """An empty store backed by a file in tmp_path (not yet written)."""
    return ConfigStore(store_path)


def write_json(path: Path, data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# Discord doubles
# ---------------------------------------------------------------------------
def make_voice_channel(channel_id: int, name: str, members: tuple[int, ...] = ()) -> MagicMock:
    """A mock VoiceChannel that passes ``isinstance`` checks."""
    ch = MagicMock(spec=discord.VoiceChannel)
    ch.id = channel_id
    ch.name = name
    ch.voice_states = {user_id: MagicMock() for user_id in members}
    return ch


def make_text_channel(channel_id: int = NOTIFY_CHANNEL_ID, name: str = "general") -> MagicMock:
    ch = MagicMock(spec=discord.TextChannel)
    ch.id = channel_id
    ch.name = name
    ch.send = AsyncMock()
    return ch


def make_guild(
    guild_id: int = GUILD_ID,
    voice_channels: list[MagicMock] | None = None,
    extra_channels: list[MagicMock] | None = None,
) -> MagicMock:
    guild = MagicMock()
    guild.id = guild_id
    guild.voice_channels = list(voice_channels or [])
    guild.stage_channels = []
    guild.fetch_channels = AsyncMock(
        return_value=list(extra_channels or []) + list(voice_channels or []),
    )
    return guild


def make_bot(store: ConfigStore, text_channels: list[MagicMock] | None = None, **cfg) -> MagicMock:
    """A lightweight stand-in for SnoopyBot."""
    by_id = {ch.id: ch for ch in text_channels or []}
    bot = MagicMock()
    bot.user = SimpleNamespace(id=999)
    bot.cfg = SnoopyConfig(**cfg)
    bot.store = store
    bot.get_channel = lambda ch_id: by_id.get(ch_id)
    bot.fetch_channel = AsyncMock(side_effect=discord.NotFound(MagicMock(status=404), "gone"))
    return bot
