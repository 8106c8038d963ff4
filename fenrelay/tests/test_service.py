"""
Tests for the relay service upload path.

Tests:
- Validation errors before any detection
- Successful uploads publish exactly once
- Detection and upstream failures never publish
"""

import asyncio

import pytest

from ..api.service import RelayService
from ..config import RelayConfig
from ..errors import ConfigurationError, DetectionError, UpstreamError, ValidationError
from ..session import POSITION_DETECTED
from ..vision import GeminiCollaborator, StaticCollaborator
from .conftest import RecordingSink, START_FEN


def join(service, code):
    sink = RecordingSink()
    cid = service.lifecycle.connect(sink)
    asyncio.run(service.lifecycle.join_session(cid, code))
    return sink


class TestUploadValidation:
    """Missing fields are rejected before the collaborator is called."""

    @pytest.mark.parametrize("code", [None, ""])
    def test_missing_pairing_code(self, service, collaborator, code):
        with pytest.raises(ValidationError, match="Pairing code required"):
            asyncio.run(service.upload(code, b"jpeg"))
        assert collaborator.calls == []

    @pytest.mark.parametrize("image", [None, b""])
    def test_missing_image(self, service, collaborator, image):
        with pytest.raises(ValidationError, match="No image provided"):
            asyncio.run(service.upload("ABC123", image))
        assert collaborator.calls == []

    def test_validation_error_status(self):
        assert ValidationError("x").status_code == 400


class TestUploadSuccess:

    def test_publishes_normalized_fen(self, service, collaborator):
        """The published FEN carries the reported side to move."""
        desktop = join(service, "ABC123")

        result = asyncio.run(service.upload("ABC123", b"jpeg"))

        expected = START_FEN.replace(" w ", " b ")
        assert result.success
        assert result.fen == expected
        assert result.delivered == 1
        assert desktop.of_type(POSITION_DETECTED) == [
            {"type": POSITION_DETECTED, "payload": {"fen": expected}},
        ]
        assert collaborator.calls == [b"jpeg"]

    def test_every_receiver_on_code_gets_it(self, service):
        first = join(service, "ABC123")
        second = join(service, "ABC123")
        other = join(service, "OTHER")

        asyncio.run(service.upload("ABC123", b"jpeg"))

        assert len(first.of_type(POSITION_DETECTED)) == 1
        assert len(second.of_type(POSITION_DETECTED)) == 1
        assert other.of_type(POSITION_DETECTED) == []

    def test_no_receivers_still_succeeds(self, service):
        """Uploader gets confirmation even with nobody listening."""
        result = asyncio.run(service.upload("EMPTY", b"jpeg"))

        assert result.success
        assert result.delivered == 0

    def test_concurrent_uploads_both_delivered(self, service):
        desktop = join(service, "ABC123")

        async def both():
            await asyncio.gather(
                service.upload("ABC123", b"one"),
                service.upload("ABC123", b"two"),
            )

        asyncio.run(both())

        assert len(desktop.of_type(POSITION_DETECTED)) == 2


class TestUploadFailures:

    def test_unparseable_reply_does_not_publish(self):
        service = RelayService(collaborator=StaticCollaborator(reply="no board here"))
        desktop = join(service, "ABC123")

        with pytest.raises(DetectionError):
            asyncio.run(service.upload("ABC123", b"jpeg"))

        assert desktop.of_type(POSITION_DETECTED) == []

    def test_upstream_error_propagates(self):
        service = RelayService(
            collaborator=StaticCollaborator(error=UpstreamError("quota exceeded")),
        )
        desktop = join(service, "ABC123")

        with pytest.raises(UpstreamError, match="quota exceeded"):
            asyncio.run(service.upload("ABC123", b"jpeg"))

        assert desktop.of_type(POSITION_DETECTED) == []

    def test_missing_credential_fails_at_call_time(self):
        """A service without a key is built fine and fails on upload."""
        service = RelayService.from_config(RelayConfig(gemini_api_key=None))
        assert isinstance(service.collaborator, GeminiCollaborator)

        with pytest.raises(ConfigurationError):
            asyncio.run(service.upload("ABC123", b"jpeg"))


class TestListSessions:

    def test_lists_codes_with_counts(self, service):
        join(service, "A")
        join(service, "A")
        join(service, "B")

        assert service.list_sessions() == {"A": 2, "B": 1}
