"""Built-in help command.

Lists whatever is registered at the moment help is asked for, so
commands registered after the help command still show up.
"""

from __future__ import annotations

import re
from typing import List, Optional

import structlog

from .base import Command, CommandRegistry

logger = structlog.get_logger("ircbot.commands")

HELP_PATTERN = re.compile(r"help", re.IGNORECASE)
HELP_TEXT = "<noargs> displays helpful information about bot capabilities"


class HelpCommand(Command):
    """Answers "help" and "help <cmd>".

    Args:
        registry: The live registry to enumerate.
    """

    name = "help"
    has_help = True

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def help(self) -> str:
        return HELP_TEXT

    def respond(self, transport, sender: str, target: str, args: List[str], raw_text: str) -> Optional[bool]:
        if len(args) > 1:
            wanted = self.registry.find_by_name(args[1])
            if wanted is not None:
                if not wanted.has_help:
                    logger.debug("help_unavailable", command=wanted.name)
                    return False
                transport.say(target, f"{wanted.name}: {wanted.help()}")
                return True
            logger.debug("help_unknown_command", command=args[1])

        self.respond_no_command(transport, sender, target)
        return None

    def respond_no_command(self, transport, sender: str, target: str) -> None:
        """Point the channel at a private message and list every command."""
        transport.say(target, f"{sender}: I sent some help to you in a private message.")
        transport.say(sender, "Sorry, I didn't understand your command for me.")
        transport.say(sender, "I do understand the following commands:")
        transport.say(sender, ", ".join(self.registry.names()))
        transport.say(sender, 'For more help on one of these commands, try "help [cmd]"')
