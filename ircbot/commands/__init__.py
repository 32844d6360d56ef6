"""Command framework for ircbot.

Provides the Command base class, the ordered CommandRegistry, and the
built-in HelpCommand.
"""

from .base import Command, CommandEntry, CommandRegistry, SimpleCommand
from .help import HELP_PATTERN, HelpCommand

__all__ = [
    "Command",
    "CommandEntry",
    "CommandRegistry",
    "SimpleCommand",
    "HelpCommand",
    "HELP_PATTERN",
]
