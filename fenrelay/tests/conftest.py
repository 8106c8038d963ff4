"""
Pytest fixtures for fenrelay tests.
"""

import pytest

from ..api.service import RelayService
from ..session import SessionRegistry, WebSocketChannel, ConnectionLifecycle
from ..vision import StaticCollaborator


START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


class RecordingSink:
    """Stand-in for a WebSocket that records every message sent to it."""

    def __init__(self):
        self.messages = []

    async def send_json(self, data):
        self.messages.append(data)

    def of_type(self, event_type):
        return [m for m in self.messages if m.get("type") == event_type]


class BrokenSink:
    """Stand-in for a WebSocket whose peer has gone away."""

    async def send_json(self, data):
        raise RuntimeError("connection closed")


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def channel() -> WebSocketChannel:
    return WebSocketChannel()


@pytest.fixture
def lifecycle(registry, channel) -> ConnectionLifecycle:
    return ConnectionLifecycle(registry, channel)


@pytest.fixture
def structured_reply() -> dict:
    """A well-formed structured reply reporting black to move."""
    return {"fen": START_FEN, "sideToMove": "b"}


@pytest.fixture
def collaborator(structured_reply) -> StaticCollaborator:
    return StaticCollaborator(reply=structured_reply)


@pytest.fixture
def service(collaborator) -> RelayService:
    """A relay service wired to a canned collaborator."""
    return RelayService(collaborator=collaborator)
