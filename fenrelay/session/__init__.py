"""
Session Module - Pairing codes and the connections joined to them.

Sessions are EPHEMERAL:
- No persistence
- A session exists while someone is joined to its code
- All sessions are lost on restart
"""

from .registry import SessionRegistry
from .channel import PairingChannel, WebSocketChannel, MessageSink
from .lifecycle import (
    ConnectionLifecycle,
    make_event,
    JOIN_SESSION,
    SESSION_JOINED,
    POSITION_DETECTED,
)

__all__ = [
    "SessionRegistry",
    "PairingChannel",
    "WebSocketChannel",
    "MessageSink",
    "ConnectionLifecycle",
    "make_event",
    "JOIN_SESSION",
    "SESSION_JOINED",
    "POSITION_DETECTED",
]
