"""
Snoopy — Voice Channel Join Notifier for Discord
=================================================
Posts a message to a chosen text channel whenever someone joins one of the
server's watched voice channels, with a live count of who is already there.
Configured entirely from chat with ``snoopy ...`` commands.

Package layout::

    snoopy/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Reply texts, help entries
    ├── bot/
    │   ├── core.py        # Bot subclass, cog loader, legacy config migration
    │   ├── __main__.py    # CLI entry point (python -m snoopy.bot -t TOKEN)
    │   └── cogs/
    │       ├── text_commands.py  # snoopy help/setchannel/watchchannel/...
    │       └── voice.py          # Voice join notifications
    ├── engine/
    │   ├── models.py      # WatchedChannel / GuildConfig + JSON shape
    │   ├── commands.py    # Prefix command parser
    │   └── voice.py       # Join detection, occupancy recount, wording
    └── services/
        ├── config_store.py         # JSON file persistence + locking
        ├── watch_service.py        # Channel lookup + watch-list mutations
        ├── announcement_service.py # Channel resolution + safe sends
        └── embeds.py               # Help / watch-list embeds
"""

__version__ = "0.1.0"
