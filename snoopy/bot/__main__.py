"""
snoopy.bot.__main__ — Entry point for ``python -m snoopy.bot``
==============================================================

Wiring:
1. Parse the command line (``-t`` token, ``--config`` settings file).
2. Load .env (fallback for the token).
3. Load config.yaml (soft settings) and configure logging.
4. Load the per-guild config store from JSON.
5. Create the SnoopyBot and run it (blocks until Ctrl+C or SIGTERM).

Run with::

    python -m snoopy.bot -t <bot token>
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

import discord
from dotenv import load_dotenv

from snoopy.bot.core import SnoopyBot
from snoopy.config import load_config
from snoopy.services.config_store import ConfigStore

logger = logging.getLogger("snoopy")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snoopy",
        description="Posts a message when someone joins a watched voice channel.",
    )
    parser.add_argument("-t", "--token", default="", help="Bot Token")
    parser.add_argument(
        "--config", default="config.yaml", help="Path to the YAML settings file",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Bootstrap and run the Snoopy bot."""
    args = build_parser().parse_args(argv)

    # 1. Secrets.  The -t flag wins over the environment.
    load_dotenv()
    token = args.token or os.getenv("DISCORD_TOKEN", "")

    # 2. Soft configuration.
    try:
        cfg = load_config(args.config)
    except ValueError as exc:
        _configure_logging("INFO")
        logger.critical("Invalid settings file: %s", exc)
        sys.exit(1)

    _configure_logging(cfg.log_level)

    if not token:
        logger.critical(
            "No bot token given.  Pass -t <token> or set DISCORD_TOKEN in .env."
        )
        sys.exit(1)

    # 3. Per-guild config.
    store = ConfigStore.load(cfg.store_path)

    # 4. Bot.
    bot = SnoopyBot(cfg=cfg, store=store)

    logger.info("Starting Snoopy bot…")
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")
    except discord.LoginFailure:
        logger.critical("Discord rejected the bot token.")
        sys.exit(1)


if __name__ == "__main__":
    main()
