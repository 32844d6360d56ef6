"""Base classes for the command framework.

Commands are registered against a regular expression in a
CommandRegistry. The registry keeps insertion order and the first
pattern that matches a command string wins, so earlier registrations
shadow later ones.

Key classes:
    Command: Base class every command handler extends.
    SimpleCommand: Command built from a name, fixed help text and a
        respond callable.
    CommandEntry: A (pattern, command) pair held by the registry.
    CommandRegistry: Ordered, append-only list of CommandEntry.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, List, Optional, Pattern, Union

import structlog

if TYPE_CHECKING:
    from ..transport import ChatTransport

logger = structlog.get_logger("ircbot.commands")

# respond(transport, sender, target, args, raw_text) -> optional success flag
RespondFn = Callable[["ChatTransport", str, str, List[str], str], Optional[bool]]


class Command(ABC):
    """A bot command.

    Subclasses set ``name`` and implement respond(). Commands that can
    describe themselves set ``has_help = True`` and override help().
    The help command reads the flag, never the method.
    """

    name: str = ""
    has_help: bool = False

    def help(self) -> str:
        """Return a one-line description, or "" when ``has_help`` is False."""
        return ""

    @abstractmethod
    def respond(
        self,
        transport: "ChatTransport",
        sender: str,
        target: str,
        args: List[str],
        raw_text: str,
    ) -> Optional[bool]:
        """Answer a matched command string.

        Args:
            transport: Where replies are sent (say/act).
            sender: Nick of the user who sent the command.
            target: Channel the command arrived on, or the sender's nick
                for private messages.
            args: Command string split into words; args[0] is the word
                that triggered the command.
            raw_text: The trimmed command string.
        """


class SimpleCommand(Command):
    """Command with fixed help text and a plain respond callable."""

    has_help = True

    def __init__(self, name: str, help_text: str, respond_fn: RespondFn):
        self.name = name
        self._help_text = help_text
        self._respond_fn = respond_fn

    def help(self) -> str:
        return self._help_text

    def respond(self, transport, sender, target, args, raw_text):
        return self._respond_fn(transport, sender, target, args, raw_text)

    def __repr__(self) -> str:
        return f"SimpleCommand(name={self.name!r})"


@dataclass(frozen=True)
class CommandEntry:
    """A registered command and the pattern that selects it."""

    pattern: Pattern[str]
    command: Command

    def matches(self, command_text: str) -> bool:
        return self.pattern.search(command_text) is not None


class CommandRegistry:
    """Ordered list of (pattern, command) entries.

    Append-only: there is no unregistration. Overlapping and duplicate
    patterns are accepted.
    """

    def __init__(self):
        self._entries: List[CommandEntry] = []

    def register(self, pattern: Union[str, Pattern[str]], command: Command) -> CommandEntry:
        """Append a command.

        Args:
            pattern: Regular expression tested with ``search`` against the
                trimmed command string. Strings are compiled without flags.
            command: Handler invoked when the pattern matches.

        Raises:
            re.error: If ``pattern`` is a string that does not compile.
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        entry = CommandEntry(pattern=pattern, command=command)
        self._entries.append(entry)
        logger.debug(
            "command_registered",
            command=command.name,
            pattern=pattern.pattern,
            position=len(self._entries) - 1,
        )
        return entry

    def register_simple(
        self, name: str, help_text: str, respond_fn: RespondFn
    ) -> CommandEntry:
        """Register a SimpleCommand matched case-insensitively by its name."""
        pattern = re.compile(re.escape(name), re.IGNORECASE)
        return self.register(pattern, SimpleCommand(name, help_text, respond_fn))

    def find_by_name(self, name: str) -> Optional[Command]:
        """Return the first command whose name is exactly ``name``."""
        for entry in self._entries:
            if entry.command.name == name:
                return entry.command
        return None

    def names(self) -> List[str]:
        """Command names in registration order."""
        return [entry.command.name for entry in self._entries]

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
