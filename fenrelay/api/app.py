"""
FastAPI Application - HTTP upload endpoint and realtime socket.

Endpoints:
    POST   /upload          Upload a diagram photo for a pairing code
    GET    /api/sessions    List active pairing codes
    GET    /health          Health check
    WS     /ws              Realtime channel for receivers

Realtime frames are JSON objects {"type": ..., "payload": ...}:
    client -> server  join-session        payload: pairing code
    server -> client  session-joined      payload: {"pairingCode": code}
    server -> client  position-detected   payload: {"fen": fen}
    client -> server  ping                (answered with pong)
"""

from typing import Annotated, Optional, Union
import logging

from fastapi import FastAPI, File, Form, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import RelayConfig
from ..errors import ConfigurationError, RelayError
from .schemas import (
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    SessionInfo,
    SessionListResponse,
    UploadResponse,
)
from .service import RelayService

logger = logging.getLogger(__name__)


def create_app(service: Optional[RelayService] = None, config: Optional[RelayConfig] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional RelayService instance (built from config if not provided)
        config: Optional RelayConfig (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    config = config or RelayConfig.from_env()
    relay_service = service or RelayService.from_config(config)

    app = FastAPI(
        title="fenrelay",
        description="""
Chess position relay between a phone camera and a desktop board.

1. The desktop page opens `/ws` and sends `join-session` with a pairing code
2. The phone uploads a diagram photo to `POST /upload` with the same code
3. The detected FEN is pushed to every desktop joined to that code as `position-detected`

## Error Codes

| Code | Description |
|------|-------------|
| `VALIDATION_ERROR` | Pairing code or image missing |
| `DETECTION_FAILED` | No position could be read from the model reply |
| `UPSTREAM_ERROR` | The vision model call failed |
| `CONFIGURATION_ERROR` | No vision credential configured |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.relay_service = relay_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
            ).model_dump(mode="json", exclude_none=True),
        )

    # =========================================================================
    # Upload Endpoint
    # =========================================================================

    @app.post(
        "/upload",
        response_model=UploadResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Pairing code or image missing"},
            500: {"model": ErrorResponse, "description": "Detection or upstream failure"},
        },
        tags=["Relay"],
        summary="Upload a diagram photo and relay the detected position",
    )
    async def upload(
        pairing_code: Annotated[
            Optional[str],
            Form(alias="pairingCode", description="Pairing code shared with the desktop"),
        ] = None,
        image: Annotated[
            Optional[UploadFile],
            File(description="Photo of the chess diagram (JPEG)"),
        ] = None,
    ) -> Union[UploadResponse, JSONResponse]:
        """
        Detect the position in the photo and push it to every desktop joined
        to `pairingCode`.

        The response mirrors the published FEN whether or not any desktop
        is currently listening.
        """
        image_data = await image.read() if image is not None else None

        try:
            result = await relay_service.upload(pairing_code, image_data)
        except RelayError as e:
            if e.status_code >= 500:
                logger.error("Upload error: %s", e.message)
            else:
                logger.info("Rejected upload: %s", e.message)
            return make_error_response(
                ErrorCode(e.error_code),
                e.message,
                status_code=e.status_code,
            )
        except Exception as e:
            logger.exception("Upload error")
            return make_error_response(
                ErrorCode.INTERNAL_ERROR,
                str(e),
                status_code=500,
            )

        return UploadResponse(success=result.success, fen=result.fen, message=result.message)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.get(
        "/api/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active pairing codes",
    )
    async def list_sessions() -> SessionListResponse:
        """List pairing codes that have at least one joined connection."""
        sessions = relay_service.list_sessions()
        return SessionListResponse(
            sessions=[
                SessionInfo(pairing_code=code, connections=count)
                for code, count in sessions.items()
            ],
            count=len(sessions),
        )

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        Realtime channel for receivers.

        Malformed frames are ignored; the socket stays open.
        """
        await websocket.accept()
        lifecycle = relay_service.lifecycle
        connection_id = lifecycle.connect(websocket)

        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                text = frame.get("text")
                if text is None:
                    logger.debug("Ignoring binary frame from %s", connection_id)
                    continue
                await lifecycle.handle_message(connection_id, text)
        except WebSocketDisconnect:
            pass
        finally:
            lifecycle.disconnect(connection_id)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(version=__version__)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "fenrelay",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn fenrelay.api.app:app
app = None
try:
    app = create_app()
except ConfigurationError as e:
    # Invalid environment; `fenrelay serve` reports it before starting
    logger.error("Not creating default app: %s", e.message)
