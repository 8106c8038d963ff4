"""
Vision Collaborator - The external model that reads a position from a photo.

The relay treats the model as a black box:
    image bytes -> raw reply (text, or an already structured dict)

Implementations:
- GeminiCollaborator: Google Gemini via the google-genai async client
- StaticCollaborator: Canned replies, for tests and offline runs

Failures are mapped onto the relay's error taxonomy here, so callers only
ever see ConfigurationError or UpstreamError from `detect`.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any
import logging

from ..config import DEFAULT_MODEL
from ..errors import ConfigurationError, UpstreamError
from .prompts import VisionPrompts

logger = logging.getLogger(__name__)

JPEG_MIME_TYPE = "image/jpeg"


class VisionCollaborator(ABC):
    """
    Abstract base class for vision collaborators.

    `detect` may suspend while the external call is in flight.
    """

    @abstractmethod
    async def detect(self, image: bytes) -> str | dict[str, Any]:
        """Return the model's raw answer for one image."""
        pass


class GeminiCollaborator(VisionCollaborator):
    """
    Reads a chess diagram with a Gemini vision model.

    The API key is only checked when `detect` is called, so the server
    starts without one and reports the problem per request.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.1,
        prompt: str | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.prompt = prompt or VisionPrompts.diagram_to_fen()
        self._client = None

    def _get_client(self):
        if self._client is not None:
            return self._client

        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY not set")

        from google import genai
        self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def detect(self, image: bytes) -> str:
        client = self._get_client()

        from google.genai import types

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=[
                    self.prompt,
                    types.Part.from_bytes(data=image, mime_type=JPEG_MIME_TYPE),
                ],
                config=types.GenerateContentConfig(
                    temperature=self.temperature,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise UpstreamError(f"Vision model request failed: {e}") from e

        text = (response.text or "").strip()
        logger.debug("Gemini response: %s", text)
        return text


class StaticCollaborator(VisionCollaborator):
    """
    Collaborator with a fixed reply.

    Pass `error` to make every call fail with that exception instead.
    Records every image it was asked about in `calls`.
    """

    def __init__(
        self,
        reply: str | dict[str, Any] | None = None,
        error: Exception | None = None,
    ):
        self.reply = reply
        self.error = error
        self.calls: list[bytes] = []

    async def detect(self, image: bytes) -> str | dict[str, Any]:
        self.calls.append(image)
        if self.error is not None:
            raise self.error
        return self.reply if self.reply is not None else ""
