"""
Error taxonomy for the relay.

Every error carries the HTTP status and the structured error code the
request boundary turns it into. Nothing here is retried.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for errors reported back to the uploading client."""
    error_code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RelayError):
    """A required upload field was missing."""
    error_code = "VALIDATION_ERROR"
    status_code = 400


class DetectionError(RelayError):
    """The vision model answered, but no position could be read from it."""
    error_code = "DETECTION_FAILED"


class UpstreamError(RelayError):
    """The vision model call itself failed (network, auth, quota)."""
    error_code = "UPSTREAM_ERROR"


class ConfigurationError(RelayError):
    """The relay is missing something it needs to call the vision model."""
    error_code = "CONFIGURATION_ERROR"
