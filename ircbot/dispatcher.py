"""Inbound message dispatch.

Turns channel and private messages into command invocations against a
CommandRegistry. Resolution walks the registry in registration order
and stops at the first pattern that matches. When nothing matches, the
dispatcher retries once with the literal command "help" (unless the
input already asked for help), so users get the command listing
instead of silence whenever a help command is registered.

Key classes:
    CommandDispatcher: Routes messages for one bot nick.

Key functions:
    split_args: Split a command string into non-empty words.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional

import structlog

from .commands.base import CommandRegistry

if TYPE_CHECKING:
    from .transport import ChatTransport

logger = structlog.get_logger("ircbot.bot")

HELP_COMMAND = "help"
_HELP_REQUEST = re.compile(r"help", re.IGNORECASE)

# "help" itself contains "help", so a second miss always ends the loop.
MAX_HELP_FALLBACKS = 1


def split_args(command: str) -> List[str]:
    """Split on single spaces, dropping the empty words runs of spaces leave."""
    return [arg for arg in command.split(" ") if arg.strip() != ""]


class CommandDispatcher:
    """Routes inbound messages for the bot named ``nick``.

    Args:
        registry: Commands to resolve against. Read on every message,
            so later registrations take effect immediately.
        nick: The bot's own nickname.
    """

    def __init__(self, registry: CommandRegistry, nick: str):
        self.registry = registry
        self.nick = nick

    def handle_message(self, transport: "ChatTransport", sender: str, target: str, text: str) -> None:
        """Handle a channel message.

        Messages addressed to the bot ("<nick> cmd ...") are resolved as
        commands. Any other line from someone else is taken as an
        untargeted mention and gets an action back. The bot's own lines
        are ignored.
        """
        logger.info("message_received", sender=sender, target=target, text=text)
        if sender == self.nick:
            return

        if text.startswith(self.nick):
            space = text.find(" ")
            command = text[space:] if space != -1 else ""
            self.handle_potential_command(transport, sender, target, command)
        else:
            self.handle_mention(transport, sender, target)

    def handle_private_message(self, transport: "ChatTransport", sender: str, text: str) -> None:
        """Handle a private message; the whole text is the command."""
        logger.info("private_message_received", sender=sender, text=text)
        self.handle_potential_command(transport, sender, sender, text)

    def handle_mention(self, transport: "ChatTransport", sender: str, target: str) -> None:
        transport.act(
            target,
            f"thinks {sender} was talking to me, but doesn't understand what {sender} said",
        )

    def handle_potential_command(
        self, transport: "ChatTransport", sender: str, target: str, command: str
    ) -> bool:
        """Resolve a command string and invoke the first matching command.

        Returns:
            True if a command was invoked (whatever it returned), False if
            the input was dropped.
        """
        command = command.strip()
        for _ in range(MAX_HELP_FALLBACKS + 1):
            logger.debug("user_command", sender=sender, target=target, command=command)
            for entry in self.registry:
                if entry.matches(command):
                    logger.debug(
                        "command_matched",
                        command=entry.command.name,
                        pattern=entry.pattern.pattern,
                    )
                    entry.command.respond(
                        transport, sender, target, split_args(command), command
                    )
                    return True

            fallback = self.handle_no_command_found(sender, target, command)
            if fallback is None:
                break
            command = fallback

        logger.debug("command_unhandled", sender=sender, target=target, command=command)
        return False

    def handle_no_command_found(self, sender: str, target: str, command: str) -> Optional[str]:
        """Pick the command to retry with after a miss.

        Returns:
            "help" unless ``command`` already asks for help, in which case
            None (give up silently).
        """
        if _HELP_REQUEST.search(command):
            return None
        logger.debug("command_not_found", sender=sender, target=target, command=command)
        return HELP_COMMAND
