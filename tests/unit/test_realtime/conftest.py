"""Fixtures for realtime tests."""

import pytest

from socialhub.core.realtime.connection import Connection
from socialhub.core.realtime.registry import InMemoryConnectionRegistry


class FakeConnection(Connection):
    """Connection recording every frame it is asked to send."""

    def __init__(self, account_id: int, fail: bool = False):
        super().__init__(account_id)
        self.sent = []
        self.closed_with = None
        self._fail = fail

    async def send(self, event, data):
        if self._fail:
            raise RuntimeError("socket is gone")
        self.sent.append((event, data))

    async def close(self, code=1000):
        if self._fail:
            raise RuntimeError("socket is gone")
        self.closed_with = code


@pytest.fixture
def make_connection():
    return FakeConnection


@pytest.fixture
def registry():
    return InMemoryConnectionRegistry()
