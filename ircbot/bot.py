"""IRC bot implementation for ircbot.

Owns the validated configuration, the command registry and the
transport. Transport events are forwarded to a CommandDispatcher;
commands are registered by the application before start().

Key classes:
    Bot: Configuration gate, registration helpers and lifecycle.
"""

from typing import Any, Callable, Mapping, Optional, Pattern, Union

import structlog

from .commands.base import Command, CommandEntry, CommandRegistry, RespondFn
from .commands.help import HELP_PATTERN, HelpCommand
from .dispatcher import CommandDispatcher
from .exceptions import IrcBotError
from .models import BotConfig
from .transport import ChatTransport, IrcTransport

logger = structlog.get_logger("ircbot.bot")

TransportFactory = Callable[[BotConfig], ChatTransport]


class Bot:
    """Command-dispatching IRC bot.

    Args:
        config: BotConfig, or a mapping with at least host, nick and
            channels.
        transport_factory: Builds the transport on start(). Defaults to
            IrcTransport.from_config.

    Raises:
        ConfigurationError: If the config is missing or any of host,
            nick and channels is absent or empty.
    """

    def __init__(
        self,
        config: Union[BotConfig, Mapping[str, Any], None],
        transport_factory: Optional[TransportFactory] = None,
    ):
        if not isinstance(config, BotConfig):
            config = BotConfig.from_settings(config)
        self.config = config
        self.transport_factory = transport_factory or IrcTransport.from_config
        self.transport: Optional[ChatTransport] = None
        self.running = False

        self.commands = CommandRegistry()
        self.dispatcher = CommandDispatcher(self.commands, config.nick)

    # --- Registration ---

    def command(self, pattern: Union[str, Pattern[str]], cmd: Command) -> CommandEntry:
        """Register ``cmd`` under a regular expression."""
        return self.commands.register(pattern, cmd)

    def simple_command(self, name: str, help_text: str, respond_fn: RespondFn) -> CommandEntry:
        """Register a command matched case-insensitively by its name."""
        return self.commands.register_simple(name, help_text, respond_fn)

    def add_standard_help_command(self) -> CommandEntry:
        """Register the built-in help command at the current position."""
        return self.commands.register(HELP_PATTERN, HelpCommand(self.commands))

    # --- Lifecycle ---

    def start(self) -> bool:
        """Create the transport, connect and wire listeners.

        Can only happen once per instance; later calls are logged and
        ignored.

        Returns:
            True if the bot was started, False if it was already running.

        Raises:
            TransportError: If the transport cannot connect. The bot keeps
                no transport and stays stopped.
        """
        if self.running:
            logger.warning("bot_restart_rejected", nick=self.config.nick)
            return False

        transport = self.transport_factory(self.config)
        transport.connect()
        self.transport = transport
        self._listeners()
        self.running = True
        logger.info(
            "bot_started",
            host=self.config.host,
            nick=self.config.nick,
            channels=self.config.channels,
            commands=self.commands.names(),
        )
        return True

    def run(self) -> None:
        """Start the bot and hand control to the transport's event loop.

        Does nothing if the bot is already running.
        """
        if not self.start():
            return
        self.transport.process_forever()

    def _listeners(self) -> None:
        self.transport.add_listener("message", self.on_message)
        self.transport.add_listener("pm", self.on_private_message)
        self.transport.add_listener("error", self.on_error)

    # --- Transport events ---

    def on_message(self, sender: str, target: str, text: str) -> None:
        self.dispatcher.handle_message(self.transport, sender, target, text)

    def on_private_message(self, sender: str, text: str) -> None:
        self.dispatcher.handle_private_message(self.transport, sender, text)

    def on_error(self, err: Any) -> None:
        if isinstance(err, IrcBotError):
            logger.error("irc_error", **err.log_fields())
        else:
            logger.error("irc_error", error=repr(err))

    def handle_potential_command(self, sender: str, target: str, command: str) -> bool:
        """Resolve ``command`` as if it had arrived from ``sender`` on ``target``."""
        return self.dispatcher.handle_potential_command(self.transport, sender, target, command)
