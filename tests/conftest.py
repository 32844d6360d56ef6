"""Shared fixtures for ircbot tests."""

import pytest


class FakeTransport:
    """Records say/act calls and exposes registered listeners."""

    def __init__(self, config=None):
        self.config = config
        self.said = []
        self.acted = []
        self.listeners = {}
        self.connected = 0
        self.processed = 0

    def add_listener(self, event, callback):
        self.listeners.setdefault(event, []).append(callback)

    def connect(self):
        self.connected += 1

    def process_forever(self):
        self.processed += 1

    def say(self, target, text):
        self.said.append((target, text))

    def act(self, target, text):
        self.acted.append((target, text))

    def emit(self, event, *args):
        for callback in self.listeners.get(event, []):
            callback(*args)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def bot_settings():
    return {"host": "irc.example.net", "nick": "mybot", "channels": ["#test", "#dev"]}
