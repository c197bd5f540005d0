"""
snoopy.config — YAML Configuration Loader
==========================================

**Why this file exists:**
This module reads ``config.yaml`` for soft, non-secret settings (command
prefix, where the guild config JSON lives, log level).  The bot token is a
secret and never lives here; it comes from ``-t`` or ``DISCORD_TOKEN``.

Per-guild state (notification channel, watch list) is *not* in this file;
it is managed at runtime by :mod:`snoopy.services.config_store`.

Usage::

    from snoopy.config import load_config

    cfg = load_config()          # reads ./config.yaml, defaults if absent
    print(cfg.command_prefix)    # "snoopy"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from snoopy.engine.commands import DEFAULT_PREFIX
from snoopy.services.config_store import DEFAULT_STORE_PATH

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class SnoopyConfig:
    """Immutable settings loaded from ``config.yaml``."""

    # Text command prefix; commands look like "<prefix> watchchannel General"
    command_prefix: str = DEFAULT_PREFIX

    # JSON file holding per-guild notification settings
    store_path: str = DEFAULT_STORE_PATH

    # Skip notifications when a bot account joins a watched channel
    ignore_bots: bool = True

    log_level: str = "INFO"


def load_config(path: str | Path = "config.yaml") -> SnoopyConfig:
    """Read *path* and return a :class:`SnoopyConfig`.

    A missing file is not an error: every setting has a default.

    Raises
    ------
    ValueError
        If the file is not valid YAML, is not a mapping, or holds an
        invalid value.
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.info("No %s found — using default settings", config_path)
        return SnoopyConfig()

    try:
        with open(config_path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"{config_path} must contain a mapping of settings")

    defaults = SnoopyConfig()
    prefix = str(raw.get("command_prefix", defaults.command_prefix)).strip()
    if not prefix:
        raise ValueError("command_prefix must not be empty")

    log_level = str(raw.get("log_level", defaults.log_level)).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ValueError(
            f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}, got {log_level!r}"
        )

    return SnoopyConfig(
        command_prefix=prefix,
        store_path=str(raw.get("store_path", defaults.store_path)),
        ignore_bots=bool(raw.get("ignore_bots", defaults.ignore_bots)),
        log_level=log_level,
    )
