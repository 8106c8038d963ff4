"""
Connection Lifecycle - Connect, join and disconnect handling.

LIFECYCLE:
1. Client connects -> gets a connection id, nothing joined yet
2. Client sends join-session(code) -> registry join, channel subscribe, ack
3. Client disconnects -> registry leave (always), channel detach

There is no authentication and no ownership of codes: any connection may
join any code, and any number of connections may share one.
"""

from __future__ import annotations
from typing import Any
import json
import logging
import uuid

from .channel import MessageSink, PairingChannel
from .registry import SessionRegistry

logger = logging.getLogger(__name__)

# Realtime event names
JOIN_SESSION = "join-session"
SESSION_JOINED = "session-joined"
POSITION_DETECTED = "position-detected"
PING = "ping"
PONG = "pong"


def make_event(event_type: str, payload: Any = None) -> dict[str, Any]:
    """Build a realtime frame."""
    event = {"type": event_type}
    if payload is not None:
        event["payload"] = payload
    return event


class ConnectionLifecycle:
    """
    Owns every mutation of the session registry.

    Usage:
        lifecycle = ConnectionLifecycle(registry, channel)
        connection_id = lifecycle.connect(websocket)
        await lifecycle.handle_message(connection_id, raw_text)
        lifecycle.disconnect(connection_id)
    """

    def __init__(self, registry: SessionRegistry, channel: PairingChannel):
        self.registry = registry
        self.channel = channel

    def connect(self, sink: MessageSink) -> str:
        """Register a new connection and return its id."""
        connection_id = str(uuid.uuid4())
        self.channel.attach(connection_id, sink)
        logger.info("Client connected: %s", connection_id)
        return connection_id

    async def join_session(self, connection_id: str, code: str):
        """Join a connection to a pairing code and acknowledge it."""
        self.registry.join(code, connection_id)
        self.channel.subscribe(connection_id, code)
        logger.info("Client %s joined session: %s", connection_id, code)
        await self.channel.send(
            connection_id,
            make_event(SESSION_JOINED, {"pairingCode": code}),
        )

    def disconnect(self, connection_id: str):
        """Remove a connection from the registry and the channel."""
        logger.info("Client disconnected: %s", connection_id)
        self.registry.leave(connection_id)
        self.channel.detach(connection_id)

    async def handle_message(self, connection_id: str, data: str | dict[str, Any]):
        """
        Dispatch one client frame.

        Frames that are not valid JSON objects, have an unknown type, or
        carry an unusable code are ignored.
        """
        if isinstance(data, str):
            try:
                message = json.loads(data)
            except (ValueError, RecursionError):
                logger.debug("Ignoring non-JSON frame from %s", connection_id)
                return
        else:
            message = data

        if not isinstance(message, dict):
            logger.debug("Ignoring malformed frame from %s", connection_id)
            return

        event_type = message.get("type")
        if event_type == JOIN_SESSION:
            code = message.get("payload")
            if not isinstance(code, str) or not code:
                logger.debug("Ignoring join-session without a code from %s", connection_id)
                return
            await self.join_session(connection_id, code)
        elif event_type == PING:
            await self.channel.send(connection_id, make_event(PONG))
        else:
            logger.debug("Ignoring unknown event %r from %s", event_type, connection_id)
