"""Tests for the irc-library transport adapter."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import irc.client
import pytest

from ircbot.exceptions import TransportError
from ircbot.models import BotConfig
from ircbot.transport import IrcTransport


def _make_transport(**overrides):
    """Create an IrcTransport on a mocked reactor."""
    kwargs = {
        "host": "irc.example.net",
        "nick": "mybot",
        "channels": ["#test", "#dev"],
        "reactor": MagicMock(),
    }
    kwargs.update(overrides)
    return IrcTransport(**kwargs)


def _event(source="alice!alice@example.net", target="#test", arguments=("hello",)):
    return SimpleNamespace(
        source=irc.client.NickMask(source),
        target=target,
        arguments=list(arguments),
    )


def test_registers_reactor_handlers():
    transport = _make_transport()
    registered = {c.args[0] for c in transport.reactor.add_global_handler.call_args_list}
    assert registered == {"welcome", "pubmsg", "privmsg", "error", "disconnect"}


def test_from_config_copies_connection_settings():
    config = BotConfig(host="irc.example.net", nick="mybot", channels=["#test"], port=6697)
    transport = IrcTransport.from_config(config)
    assert transport.host == "irc.example.net"
    assert transport.port == 6697
    assert transport.channels == ["#test"]
    assert transport.realname == "mybot"


def test_connect_uses_configured_server():
    transport = _make_transport(port=6697, realname="Friendly Bot")
    transport.connect()
    transport.connection.connect.assert_called_once_with(
        "irc.example.net", 6697, "mybot", ircname="Friendly Bot"
    )


def test_connect_failure_raises_transport_error():
    transport = _make_transport()
    transport.connection.connect.side_effect = irc.client.ServerConnectionError("refused")

    with pytest.raises(TransportError) as exc_info:
        transport.connect()

    assert exc_info.value.host == "irc.example.net"
    assert exc_info.value.context["reason"] == "refused"


def test_welcome_joins_channels_in_order():
    transport = _make_transport()
    connection = MagicMock()

    transport._on_welcome(connection, _event(target="mybot", arguments=("Welcome",)))

    assert [c.args[0] for c in connection.join.call_args_list] == ["#test", "#dev"]


def test_pubmsg_is_forwarded_as_message():
    transport = _make_transport()
    received = []
    transport.add_listener("message", lambda *args: received.append(args))

    transport._on_pubmsg(transport.connection, _event(arguments=("mybot ping",)))

    assert received == [("alice", "#test", "mybot ping")]


def test_privmsg_is_forwarded_as_pm():
    transport = _make_transport()
    received = []
    transport.add_listener("pm", lambda *args: received.append(args))

    transport._on_privmsg(transport.connection, _event(target="mybot", arguments=("ping",)))

    assert received == [("alice", "ping")]


def test_server_error_is_forwarded_as_transport_error():
    transport = _make_transport()
    received = []
    transport.add_listener("error", received.append)

    transport._on_error(transport.connection, _event(source="irc.example.net", target=None, arguments=("Closing Link",)))

    assert len(received) == 1
    assert isinstance(received[0], TransportError)
    assert received[0].message == "Closing Link"


def test_unknown_event_is_rejected():
    transport = _make_transport()
    with pytest.raises(ValueError, match="unknown transport event"):
        transport.add_listener("join", lambda *args: None)


def test_say_and_act_send_privmsg_and_action():
    transport = _make_transport()

    transport.say("#test", "hello")
    transport.act("#test", "waves")

    transport.connection.privmsg.assert_called_once_with("#test", "hello")
    transport.connection.action.assert_called_once_with("#test", "waves")


def test_process_forever_runs_reactor():
    transport = _make_transport()
    transport.process_forever()
    transport.reactor.process_forever.assert_called_once_with()
