"""
snoopy.engine.commands — Text command parser
=============================================

Snoopy's commands are ordinary chat messages that start with a literal
prefix (``snoopy`` by default).  There is no tokenizer: argument-less
commands must match exactly and argument commands take the rest of the
message verbatim, so channel names may contain spaces.

Usage::

    parse_command("snoopy watchchannel Gaming Room")
    # ParsedCommand(name="watchchannel", argument="Gaming Room")
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Command(StrEnum):
    HELP = "help"
    SET_CHANNEL = "setchannel"
    WATCH_CHANNEL = "watchchannel"
    UNWATCH_CHANNEL = "unwatchchannel"
    WATCH_LIST = "watchlist"


# Commands that take a channel-name argument
ARGUMENT_COMMANDS = frozenset({Command.WATCH_CHANNEL, Command.UNWATCH_CHANNEL})

DEFAULT_PREFIX = "snoopy"


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    """A recognised command and its (possibly empty) argument."""
    name: Command
    argument: str = ""


def parse_command(content: str, prefix: str = DEFAULT_PREFIX) -> ParsedCommand | None:
    """Match *content* against the known commands.

    Returns ``None`` for anything that is not a Snoopy command.  Matching is
    case-sensitive.  An argument command with nothing after it parses with
    an empty argument so the caller can reply with a usage error.
    """
    for name in Command:
        head = f"{prefix} {name.value}"
        if content == head:
            return ParsedCommand(name=name)
        if name in ARGUMENT_COMMANDS and content.startswith(head + " "):
            return ParsedCommand(name=name, argument=content[len(head) + 1:].strip())
    return None
