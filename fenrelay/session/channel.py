"""
Pairing Channel - Publish/subscribe keyed by pairing code.

A message published to a code reaches every connection subscribed to it.
Delivery is fire-and-forget:
- Zero subscribers is not an error, the message is dropped
- Nothing is queued for receivers that join later
- Order across subscribers is unspecified
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Protocol
import logging

logger = logging.getLogger(__name__)


class MessageSink(Protocol):
    """Anything that can push a JSON message to one client (e.g. a WebSocket)."""

    async def send_json(self, data: Any) -> None: ...


class PairingChannel(ABC):
    """
    Transport-agnostic broadcast groups.

    Implementations:
    - WebSocketChannel: In-process groups of live WebSocket sinks
    """

    @abstractmethod
    def attach(self, connection_id: str, sink: MessageSink):
        """Register a live connection."""
        pass

    @abstractmethod
    def subscribe(self, connection_id: str, code: str):
        """Add a connection to the group named by `code`."""
        pass

    @abstractmethod
    async def publish(self, code: str, message: dict[str, Any]) -> int:
        """Deliver to every subscriber of `code`; returns how many received it."""
        pass

    @abstractmethod
    async def send(self, connection_id: str, message: dict[str, Any]) -> bool:
        """Deliver to a single connection; returns False if it is gone."""
        pass

    @abstractmethod
    def detach(self, connection_id: str):
        """Forget a connection and all of its subscriptions."""
        pass


class WebSocketChannel(PairingChannel):
    """
    Pairing channel over in-process WebSocket connections.

    Sinks whose send fails are treated as dead and detached.
    """

    def __init__(self):
        self._sinks: dict[str, MessageSink] = {}
        self._groups: dict[str, set[str]] = {}

    def attach(self, connection_id: str, sink: MessageSink):
        self._sinks[connection_id] = sink

    def subscribe(self, connection_id: str, code: str):
        self._groups.setdefault(code, set()).add(connection_id)

    def subscribers(self, code: str) -> set[str]:
        """Connection ids currently subscribed to a code."""
        return set(self._groups.get(code, ()))

    async def publish(self, code: str, message: dict[str, Any]) -> int:
        # Snapshot before the first await; joins and leaves may run while sending.
        targets = [
            (connection_id, self._sinks[connection_id])
            for connection_id in self._groups.get(code, ())
            if connection_id in self._sinks
        ]
        if not targets:
            logger.info("No receivers subscribed to %s, message dropped", code)
            return 0

        delivered = 0
        dead_connections = []
        for connection_id, sink in targets:
            try:
                await sink.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning("Dropping connection %s after failed send: %s", connection_id, e)
                dead_connections.append(connection_id)
        for connection_id in dead_connections:
            self.detach(connection_id)
        return delivered

    async def send(self, connection_id: str, message: dict[str, Any]) -> bool:
        sink = self._sinks.get(connection_id)
        if sink is None:
            return False
        try:
            await sink.send_json(message)
        except Exception as e:
            logger.warning("Dropping connection %s after failed send: %s", connection_id, e)
            self.detach(connection_id)
            return False
        return True

    def detach(self, connection_id: str):
        self._sinks.pop(connection_id, None)
        for code in list(self._groups):
            members = self._groups[code]
            members.discard(connection_id)
            if not members:
                del self._groups[code]
