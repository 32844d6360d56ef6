"""Tests for command resolution and the help fallback."""

import re
from unittest.mock import MagicMock

import pytest

from ircbot.commands import Command, CommandRegistry, HelpCommand, HELP_PATTERN
from ircbot.dispatcher import CommandDispatcher, split_args

NICK = "mybot"


def _make_command(name="ping", has_help=True):
    cmd = MagicMock(spec=Command)
    cmd.name = name
    cmd.has_help = has_help
    return cmd


def _make_dispatcher(*entries):
    registry = CommandRegistry()
    for pattern, cmd in entries:
        registry.register(pattern, cmd)
    return CommandDispatcher(registry, NICK), registry


class TestSplitArgs:
    def test_collapses_irregular_spacing(self):
        assert split_args("  ping   now  ") == ["ping", "now"]

    def test_empty_string_has_no_args(self):
        assert split_args("") == []

    def test_single_word(self):
        assert split_args("help") == ["help"]


class TestHandlePotentialCommand:
    def test_first_match_receives_args_and_raw_text(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("^ping", ping))

        assert dispatcher.handle_potential_command(transport, "alice", "#test", "ping now") is True

        ping.respond.assert_called_once_with(transport, "alice", "#test", ["ping", "now"], "ping now")

    def test_command_string_is_trimmed(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("^ping", ping))

        dispatcher.handle_potential_command(transport, "alice", "#test", "  ping   now  ")

        ping.respond.assert_called_once_with(transport, "alice", "#test", ["ping", "now"], "ping   now")

    def test_earlier_registration_shadows_later(self, transport):
        first = _make_command("first")
        second = _make_command("second")
        dispatcher, _ = _make_dispatcher(("ping", first), ("ping", second))

        dispatcher.handle_potential_command(transport, "alice", "#test", "ping")

        first.respond.assert_called_once()
        second.respond.assert_not_called()

    def test_pattern_is_searched_not_anchored(self, transport):
        echo = _make_command("echo")
        dispatcher, _ = _make_dispatcher((re.compile("echo"), echo))

        assert dispatcher.handle_potential_command(transport, "alice", "#test", "please echo this")
        echo.respond.assert_called_once()

    def test_handler_result_does_not_change_outcome(self, transport):
        ping = _make_command()
        ping.respond.return_value = False
        dispatcher, _ = _make_dispatcher(("^ping", ping))

        assert dispatcher.handle_potential_command(transport, "alice", "#test", "ping") is True

    def test_handler_errors_propagate(self, transport):
        ping = _make_command()
        ping.respond.side_effect = RuntimeError("boom")
        dispatcher, _ = _make_dispatcher(("^ping", ping))

        with pytest.raises(RuntimeError, match="boom"):
            dispatcher.handle_potential_command(transport, "alice", "#test", "ping")

    def test_empty_registry_drops_input_silently(self, transport):
        dispatcher, _ = _make_dispatcher()

        assert dispatcher.handle_potential_command(transport, "alice", "#test", "foo") is False
        assert transport.said == []
        assert transport.acted == []

    def test_help_request_without_help_command_is_not_retried(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("^ping", ping))
        dispatcher.handle_no_command_found = MagicMock(wraps=dispatcher.handle_no_command_found)

        assert dispatcher.handle_potential_command(transport, "alice", "#test", "HELP please") is False

        dispatcher.handle_no_command_found.assert_called_once_with("alice", "#test", "HELP please")
        ping.respond.assert_not_called()

    def test_fallback_retries_with_help_exactly_once(self, transport):
        other = _make_command("other")
        dispatcher, _ = _make_dispatcher(("^other$", other))
        dispatcher.handle_no_command_found = MagicMock(wraps=dispatcher.handle_no_command_found)

        assert dispatcher.handle_potential_command(transport, "alice", "#test", "foo") is False

        calls = dispatcher.handle_no_command_found.call_args_list
        assert [c.args[2] for c in calls] == ["foo", "help"]
        other.respond.assert_not_called()

    def test_unmatched_input_falls_back_to_help(self, transport):
        ping = _make_command()
        dispatcher, registry = _make_dispatcher(("^ping", ping))
        registry.register(HELP_PATTERN, HelpCommand(registry))

        assert dispatcher.handle_potential_command(transport, "alice", "#test", "foo") is True

        public = [m for m in transport.said if m[0] == "#test"]
        private = [m for m in transport.said if m[0] == "alice"]
        assert public == [("#test", "alice: I sent some help to you in a private message.")]
        assert [text for _, text in private] == [
            "Sorry, I didn't understand your command for me.",
            "I do understand the following commands:",
            "ping, help",
            'For more help on one of these commands, try "help [cmd]"',
        ]
        ping.respond.assert_not_called()


class TestChannelMessages:
    def test_own_messages_are_ignored(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("ping", ping))

        dispatcher.handle_message(transport, NICK, "#test", "mybot ping")

        ping.respond.assert_not_called()
        assert transport.acted == []

    def test_addressed_message_strips_nick(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("^ping", ping))

        dispatcher.handle_message(transport, "alice", "#test", "mybot: ping now")

        # the "mybot:" token goes with the nick, everything after the first space is the command
        ping.respond.assert_called_once_with(transport, "alice", "#test", ["ping", "now"], "ping now")

    def test_nick_prefix_is_case_sensitive(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("ping", ping))

        dispatcher.handle_message(transport, "alice", "#test", "MyBot ping")

        ping.respond.assert_not_called()
        assert transport.acted == [
            ("#test", "thinks alice was talking to me, but doesn't understand what alice said")
        ]

    def test_bare_nick_falls_back_to_help(self, transport):
        registry = CommandRegistry()
        registry.register(HELP_PATTERN, HelpCommand(registry))
        dispatcher = CommandDispatcher(registry, NICK)

        dispatcher.handle_message(transport, "alice", "#test", "mybot")

        assert transport.said[0] == ("#test", "alice: I sent some help to you in a private message.")
        assert len(transport.said) == 5

    def test_mention_gets_an_action(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("ping", ping))

        dispatcher.handle_message(transport, "alice", "#test", "ping mybot when you can")

        ping.respond.assert_not_called()
        assert transport.acted == [
            ("#test", "thinks alice was talking to me, but doesn't understand what alice said")
        ]
        assert transport.said == []

    def test_unaddressed_lines_get_an_action_each(self, transport):
        dispatcher, _ = _make_dispatcher()

        dispatcher.handle_message(transport, "alice", "#test", "MyBot ping")
        dispatcher.handle_message(transport, "bob", "#dev", "hello all")

        assert transport.acted == [
            ("#test", "thinks alice was talking to me, but doesn't understand what alice said"),
            ("#dev", "thinks bob was talking to me, but doesn't understand what bob said"),
        ]
        assert transport.said == []


class TestPrivateMessages:
    def test_whole_text_is_the_command(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("^ping", ping))

        dispatcher.handle_private_message(transport, "alice", " ping now ")

        ping.respond.assert_called_once_with(transport, "alice", "alice", ["ping", "now"], "ping now")

    def test_nick_is_not_stripped(self, transport):
        ping = _make_command()
        dispatcher, _ = _make_dispatcher(("^ping", ping))

        dispatcher.handle_private_message(transport, "alice", "mybot ping")

        ping.respond.assert_not_called()
