"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Field names follow the wire format the mobile and desktop pages expect
(camelCase where the clients use it).

Error Codes:
- VALIDATION_ERROR: pairing code or image missing
- DETECTION_FAILED: model answered but no position could be read
- UPSTREAM_ERROR: the vision model call failed
- CONFIGURATION_ERROR: the relay has no vision credential
- INTERNAL_ERROR: anything else
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DETECTION_FAILED = "DETECTION_FAILED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# HTTP Responses
# =============================================================================

class UploadResponse(BaseModel):
    """Response for POST /upload."""
    success: bool = True
    fen: str = Field(description="Normalized position string that was published")
    message: str = "Position detected and sent to desktop"


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    details: Optional[dict[str, Any]] = None


class SessionInfo(BaseModel):
    """One active pairing code."""
    pairing_code: str = Field(alias="pairingCode")
    connections: int

    model_config = {"populate_by_name": True}


class SessionListResponse(BaseModel):
    """Response for GET /api/sessions."""
    sessions: list[SessionInfo] = Field(default_factory=list)
    count: int = 0


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "fenrelay"
    version: str

