"""
snoopy.constants — Reply texts shared by the cogs and embeds
=============================================================
"""

from __future__ import annotations

# Embed colour for Snoopy's own replies (a friendly beagle-ish brown)
SNOOPY_COLOR = 0xA0522D

# (usage, description) pairs rendered by ``snoopy help``
HELP_ENTRIES: list[tuple[str, str]] = [
    ("setchannel", "Sets this text channel as the place voice chat notifications are sent."),
    ("watchchannel <channel name>", "Adds a voice channel to the list of watched voice channels."),
    ("unwatchchannel <channel name>", "Removes a voice channel from the watch list."),
    ("watchlist", "Shows the notification channel and every watched voice channel."),
    ("help", "Shows this message."),
]

# ---------------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------------
MSG_SETCHANNEL_OK = "Using this channel for voice chat notifications!"
MSG_MISSING_NAME = "Unable to {action} watch channel, please specify a voice channel name"
MSG_NOT_FOUND = "Requested channel ({name}) not found"
MSG_AMBIGUOUS = (
    "More than one voice channel is called **{name}**. "
    "Try again with one of these ids instead: {ids}"
)
MSG_WATCH_OK = "Now watching {mention} for voice chat notifications."
MSG_WATCH_DUPLICATE = "{mention} is already being watched."
MSG_UNWATCH_OK = "No longer watching {mention}."
MSG_UNWATCH_ABSENT = "{mention} wasn't being watched."
MSG_LOOKUP_FAILED = "Couldn't fetch this server's channel list from Discord, please try again later."
MSG_NOT_PERSISTED = "⚠️ The change is active but could not be saved to disk; it will be lost on restart."
MSG_NO_NOTIFICATION_CHANNEL = (
    "No notification channel is set yet. "
    "Run `{prefix} setchannel` in the channel that should receive notifications."
)
