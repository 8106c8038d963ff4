"""
Relay Service - Business logic between the HTTP/WebSocket layer and the relay.

The service:
1. Owns the session registry, pairing channel and connection lifecycle
2. Handles uploads: validate, detect, normalize, publish

This layer is framework-agnostic (no FastAPI imports).
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..config import RelayConfig
from ..errors import DetectionError, ValidationError
from ..session import (
    ConnectionLifecycle,
    PairingChannel,
    SessionRegistry,
    WebSocketChannel,
    make_event,
    POSITION_DETECTED,
)
from ..vision import GeminiCollaborator, VisionCollaborator, normalize_detection

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    """Outcome of a successful upload."""
    fen: str
    success: bool = True
    message: str = "Position detected and sent to desktop"
    delivered: int = 0


@dataclass
class RelayService:
    """
    Composition root for one relay process.

    Usage:
        service = RelayService(collaborator=GeminiCollaborator(api_key))

        # Realtime side
        connection_id = service.lifecycle.connect(websocket)

        # Upload side
        result = await service.upload(pairing_code, image_bytes)
    """
    collaborator: VisionCollaborator
    registry: SessionRegistry = field(default_factory=SessionRegistry)
    channel: PairingChannel = field(default_factory=WebSocketChannel)
    lifecycle: ConnectionLifecycle = field(init=False)

    def __post_init__(self):
        self.lifecycle = ConnectionLifecycle(self.registry, self.channel)

    @classmethod
    def from_config(cls, config: RelayConfig) -> RelayService:
        """Build a service that talks to Gemini with the given settings."""
        return cls(
            collaborator=GeminiCollaborator(
                api_key=config.gemini_api_key,
                model=config.model,
                temperature=config.temperature,
            ),
        )

    async def upload(self, pairing_code: str | None, image: bytes | None) -> UploadResult:
        """
        Detect the position in `image` and publish it to `pairing_code`.

        Raises:
            ValidationError: code or image missing
            DetectionError: model output held no usable position
            UpstreamError: the model call failed
            ConfigurationError: no vision credential configured
        """
        if not pairing_code:
            raise ValidationError("Pairing code required")
        if not image:
            raise ValidationError("No image provided")

        logger.info("Processing image for session: %s", pairing_code)

        output = await self.collaborator.detect(image)
        result = normalize_detection(output)
        if not result.success:
            logger.warning("Detection failed for %s: %s", pairing_code, result.reason)
            raise DetectionError("Could not detect chess position")

        logger.info("Detected FEN: %s", result.fen)

        delivered = await self.channel.publish(
            pairing_code,
            make_event(POSITION_DETECTED, {"fen": result.fen}),
        )
        return UploadResult(fen=result.fen, delivered=delivered)

    def list_sessions(self) -> dict[str, int]:
        """Active pairing codes and how many connections each has."""
        return {
            code: len(self.registry.members(code))
            for code in self.registry.codes()
        }
