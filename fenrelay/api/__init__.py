"""
API Module - HTTP and realtime interface.

The phone:
1. Uploads a diagram photo with a pairing code

The desktop:
1. Opens the realtime socket
2. Joins the same pairing code
3. Receives every position detected for that code

All state is process-local. No accounts, no persistence.
"""

from .schemas import (
    ErrorCode,
    ErrorResponse,
    UploadResponse,
    SessionInfo,
    SessionListResponse,
    HealthResponse,
)
from .service import RelayService, UploadResult
from .app import create_app

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "UploadResponse",
    "SessionInfo",
    "SessionListResponse",
    "HealthResponse",
    "RelayService",
    "UploadResult",
    "create_app",
]
