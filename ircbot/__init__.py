"""Command dispatch for IRC bots.

Register commands against regular expressions, and the bot routes
channel and private messages to the first one that matches.
"""

from .bot import Bot
from .commands import Command, CommandRegistry, HelpCommand, SimpleCommand
from .exceptions import ConfigurationError, TransportError
from .models import BotConfig

__version__ = "0.1.0"

__all__ = [
    "Bot",
    "BotConfig",
    "Command",
    "CommandRegistry",
    "ConfigurationError",
    "HelpCommand",
    "SimpleCommand",
    "TransportError",
]
