"""
snoopy.services.config_store — JSON-backed per-guild configuration
===================================================================

**Why this file exists:**
Snoopy's whole persistent state is one small JSON document mapping guild
ids to :class:`GuildConfig`.  It is loaded once at startup and rewritten
in full after every change.

Rules:

- **Loading never fails.**  A missing or corrupt file yields an empty
  mapping and a log line; the bot keeps running.
- **Saving never crashes the bot on I/O errors.**  The in-memory mapping
  stays authoritative and the failure is logged.  Serialisation errors do
  propagate, since they mean the in-memory state itself is broken.
- **Writes are atomic.**  The document is written to a temp file in the
  same directory and moved into place with :func:`os.replace`.
- **Mutations are serialised.**  :meth:`ConfigStore.update` holds an
  :class:`asyncio.Lock` across read-modify-write-save, and ships the disk
  write to a worker thread so the event loop stays free.

Usage::

    store = ConfigStore.load("snoopyConfig.json")

    # Inside a cog:
    outcome = await store.update(guild_id, lambda cfg: cfg.add_watched(name, ch_id))
    if not outcome.persisted:
        ...  # in memory only until the next successful save
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

from snoopy.engine.models import GuildConfig, is_legacy_document

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORE_PATH = "snoopyConfig.json"

# Holds a not-yet-adopted legacy config inside the keyed document; guild ids
# are numeric snowflakes, so this can never collide with one
PENDING_LEGACY_KEY = "__legacy__"


@dataclass(frozen=True)
class UpdateOutcome(Generic[T]):
    """What a call to :meth:`ConfigStore.update` did."""
    result: T
    changed: bool
    persisted: bool  # False only if a write was attempted and failed


# ---------------------------------------------------------------------------
# File-level helpers
# ---------------------------------------------------------------------------
def load_guild_configs(
    path: str | Path,
) -> tuple[dict[str, GuildConfig], GuildConfig | None]:
    """Read *path* and return ``(guild_map, legacy_config)``.

    ``legacy_config`` is set when the file uses the old single-guild layout
    (the guild map is then empty) or carries a not-yet-adopted legacy config
    under :data:`PENDING_LEGACY_KEY`.  Malformed or empty legacy configs are
    dropped with a log line.
    """
    store_path = Path(path)
    logger.info("Reading %s", store_path)
    try:
        with open(store_path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except FileNotFoundError:
        logger.info("No config file at %s — starting with an empty config", store_path)
        return {}, None
    except (OSError, ValueError) as exc:
        logger.warning(
            "Unable to read config file %s (%s) — using an empty config",
            store_path, exc,
        )
        return {}, None

    if not isinstance(raw, dict):
        logger.warning("Config file %s is not a JSON object — ignoring it", store_path)
        return {}, None

    if is_legacy_document(raw):
        logger.info("Config file %s uses the legacy single-guild layout", store_path)
        return {}, _parse_legacy(raw, store_path)

    legacy = None
    if PENDING_LEGACY_KEY in raw:
        legacy = _parse_legacy(raw.pop(PENDING_LEGACY_KEY), store_path)

    guilds: dict[str, GuildConfig] = {}
    for guild_id, data in raw.items():
        try:
            guilds[str(guild_id)] = GuildConfig.from_dict(data)
        except (AttributeError, KeyError, TypeError) as exc:
            logger.warning("Skipping malformed config for guild %s: %s", guild_id, exc)
    logger.info("Loaded config for %d guild(s)", len(guilds))
    return guilds, legacy


def _parse_legacy(data, store_path: Path) -> GuildConfig | None:
    """Parse a legacy single-guild config; empty or malformed ones yield None."""
    try:
        legacy = GuildConfig.from_dict(data)
    except (AttributeError, KeyError, TypeError) as exc:
        logger.warning("Ignoring malformed legacy config in %s: %s", store_path, exc)
        return None
    if legacy.is_empty():
        logger.info("Legacy config in %s is empty — nothing to migrate", store_path)
        return None
    return legacy


def save_guild_configs(
    path: str | Path,
    guilds: dict[str, GuildConfig],
    legacy: GuildConfig | None = None,
) -> bool:
    """Overwrite *path* with *guilds*.  Returns False if the write failed.

    A pending *legacy* config is kept in the document under
    :data:`PENDING_LEGACY_KEY` so it survives restarts until adopted.

    Raises
    ------
    TypeError / ValueError
        If the mapping cannot be serialised.
    """
    store_path = Path(path)
    document = {guild_id: cfg.to_dict() for guild_id, cfg in guilds.items()}
    if legacy is not None:
        document[PENDING_LEGACY_KEY] = legacy.to_dict()
    payload = json.dumps(document, indent=2)

    logger.info("Writing %s", store_path)
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{store_path.name}.", suffix=".tmp", dir=store_path.parent,
        )
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp_name, store_path)
        tmp_name = None
    except OSError:
        logger.exception("Failed to write config file %s", store_path)
        return False
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_name)
    return True


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
class ConfigStore:
    """Process-wide guild configuration, persisted to a JSON file."""

    def __init__(
        self,
        path: str | Path = DEFAULT_STORE_PATH,
        guilds: dict[str, GuildConfig] | None = None,
        legacy: GuildConfig | None = None,
    ) -> None:
        self.path = Path(path)
        self._guilds: dict[str, GuildConfig] = guilds or {}
        self._legacy = legacy
        self._lock = asyncio.Lock()

    @classmethod
    def load(cls, path: str | Path = DEFAULT_STORE_PATH) -> ConfigStore:
        guilds, legacy = load_guild_configs(path)
        return cls(path, guilds, legacy)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self, guild_id: str) -> GuildConfig | None:
        return self._guilds.get(guild_id)

    @property
    def guilds(self) -> dict[str, GuildConfig]:
        return self._guilds

    @property
    def has_pending_legacy(self) -> bool:
        return self._legacy is not None

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def save(self) -> bool:
        return save_guild_configs(self.path, self._guilds, self._legacy)

    async def update(
        self, guild_id: str, mutator: Callable[[GuildConfig], T],
    ) -> UpdateOutcome[T]:
        """Apply *mutator* to the guild's config and persist if it changed.

        The guild entry is created on demand; an entry the mutator left
        empty and unchanged is discarded again, so failed lookups never
        leave traces in the file.
        """
        async with self._lock:
            created = guild_id not in self._guilds
            cfg = self._guilds.setdefault(guild_id, GuildConfig())
            before = cfg.to_dict()
            try:
                result = mutator(cfg)
            except Exception:
                if created:
                    del self._guilds[guild_id]
                raise
            if cfg.to_dict() == before:
                if created:
                    del self._guilds[guild_id]
                return UpdateOutcome(result=result, changed=False, persisted=True)
            persisted = await asyncio.to_thread(self.save)
            return UpdateOutcome(result=result, changed=True, persisted=persisted)

    async def adopt_legacy(self, resolve_guild: Callable[[str], str | None]) -> str | None:
        """Key a legacy single-guild config under its owning guild.

        *resolve_guild* maps a channel id to its guild id (or None if the
        channel is unknown).  The notification channel is tried first, then
        the watched channels in order.  Returns the adopting guild id.
        """
        if self._legacy is None:
            return None

        legacy = self._legacy
        candidates = [legacy.notification_channel_id] + [
            ch.id for ch in legacy.watched_channels
        ]
        for channel_id in candidates:
            if not channel_id:
                continue
            guild_id = resolve_guild(channel_id)
            if guild_id is None:
                continue
            async with self._lock:
                if guild_id in self._guilds:
                    logger.warning(
                        "Guild %s already has a config — legacy config discarded",
                        guild_id,
                    )
                else:
                    self._guilds[guild_id] = legacy
                self._legacy = None
                await asyncio.to_thread(self.save)
            logger.info("Migrated legacy config to guild %s", guild_id)
            return guild_id

        logger.warning(
            "Could not find the guild owning the legacy config — keeping it pending",
        )
        return None
