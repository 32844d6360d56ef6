"""Chat transport seam.

The bot core only needs a transport that delivers three events and can
send two kinds of message:

    message(sender, target, text)  channel message
    pm(sender, text)               private message
    error(err)                     transport-level failure

    say(target, text)              plain PRIVMSG
    act(target, text)              CTCP ACTION ("/me")

IrcTransport implements this on top of the ``irc`` library's reactor.
Connection retries and rate limiting are left to that library and to
whoever runs the process.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

import irc.client
import structlog

from .exceptions import TransportError

logger = structlog.get_logger("ircbot.transport")

EVENTS = ("message", "pm", "error")


class ChatTransport(Protocol):
    """What the bot core consumes from a chat network connection."""

    def add_listener(self, event: str, callback: Callable[..., Any]) -> None: ...

    def connect(self) -> None: ...

    def say(self, target: str, text: str) -> None: ...

    def act(self, target: str, text: str) -> None: ...

    def process_forever(self) -> None: ...


class IrcTransport:
    """Single-server IRC connection driven by ``irc.client.Reactor``.

    Joins the configured channels once the server welcomes us and
    forwards channel/private messages and server errors to listeners.
    Everything runs on the reactor's thread, one event at a time.

    Args:
        host: Server hostname.
        nick: Nickname to register with.
        channels: Channels to join after the welcome numeric.
        port: Server port.
        realname: IRC "real name"; defaults to the nick.
        reactor: Reactor to use; a new one is created if omitted.
    """

    def __init__(
        self,
        host: str,
        nick: str,
        channels: Sequence[str],
        port: int = 6667,
        realname: Optional[str] = None,
        reactor: Optional[irc.client.Reactor] = None,
    ):
        self.host = host
        self.nick = nick
        self.channels = list(channels)
        self.port = port
        self.realname = realname or nick
        self.reactor = reactor or irc.client.Reactor()
        self.connection = self.reactor.server()
        self._listeners: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

        self.reactor.add_global_handler("welcome", self._on_welcome)
        self.reactor.add_global_handler("pubmsg", self._on_pubmsg)
        self.reactor.add_global_handler("privmsg", self._on_privmsg)
        self.reactor.add_global_handler("error", self._on_error)
        self.reactor.add_global_handler("disconnect", self._on_disconnect)

    @classmethod
    def from_config(cls, config) -> "IrcTransport":
        """Build a transport from a BotConfig."""
        return cls(
            host=config.host,
            nick=config.nick,
            channels=config.channels,
            port=config.port,
            realname=config.realname,
        )

    def add_listener(self, event: str, callback: Callable[..., Any]) -> None:
        if event not in EVENTS:
            raise ValueError(f"unknown transport event {event!r}; expected one of {EVENTS}")
        self._listeners[event].append(callback)

    def _emit(self, event: str, *args: Any) -> None:
        for callback in self._listeners[event]:
            callback(*args)

    def connect(self) -> None:
        """Open the server connection.

        Raises:
            TransportError: If the server cannot be reached.
        """
        logger.info("irc_connecting", host=self.host, port=self.port, nick=self.nick)
        try:
            self.connection.connect(self.host, self.port, self.nick, ircname=self.realname)
        except irc.client.ServerConnectionError as e:
            raise TransportError(
                f"could not connect to {self.host}:{self.port}",
                host=self.host,
                reason=str(e),
            ) from e

    def process_forever(self) -> None:
        self.reactor.process_forever()

    def say(self, target: str, text: str) -> None:
        self.connection.privmsg(target, text)

    def act(self, target: str, text: str) -> None:
        self.connection.action(target, text)

    # --- reactor handlers ---

    def _on_welcome(self, connection, event) -> None:
        logger.info("irc_registered", host=self.host, channels=self.channels)
        for channel in self.channels:
            connection.join(channel)

    def _on_pubmsg(self, connection, event) -> None:
        self._emit("message", event.source.nick, event.target, event.arguments[0])

    def _on_privmsg(self, connection, event) -> None:
        self._emit("pm", event.source.nick, event.arguments[0])

    def _on_error(self, connection, event) -> None:
        reason = " ".join(event.arguments)
        self._emit("error", TransportError(reason or "server error", host=self.host))

    def _on_disconnect(self, connection, event) -> None:
        logger.warning(
            "irc_disconnected",
            host=self.host,
            reason=event.arguments[0] if event.arguments else "",
        )
