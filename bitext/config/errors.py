"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from bitext.config.errors import ErrorCode, BitextError

    raise BitextError(ErrorCode.EXTRACTION_FAILED, "Answer is not JSON")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Configuration errors
    UNSUPPORTED_MODEL = "UNSUPPORTED_MODEL"
    MISSING_ENDPOINT = "MISSING_ENDPOINT"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"

    # Transport errors
    STREAM_FAILED = "STREAM_FAILED"
    POLL_TRANSPORT_FAILED = "POLL_TRANSPORT_FAILED"
    POLLING_TIMEOUT = "POLLING_TIMEOUT"
    NO_ANSWER_FOUND = "NO_ANSWER_FOUND"

    # Answer parsing
    EXTRACTION_FAILED = "EXTRACTION_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BitextError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(BitextError):
    """Empty or invalid input, raised before any network call."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, details)


class UnsupportedModelError(BitextError):
    """Requested model is not present in any configured family."""

    def __init__(self, model_id: str, details: dict[str, Any] | None = None) -> None:
        self.model_id = model_id
        super().__init__(
            ErrorCode.UNSUPPORTED_MODEL,
            f"Unsupported model: {model_id}",
            {"model": model_id, **(details or {})},
        )


class MissingEndpointError(BitextError):
    """Family has no base endpoint configured (operator misconfiguration)."""

    def __init__(self, family: str) -> None:
        self.family = family
        super().__init__(
            ErrorCode.MISSING_ENDPOINT,
            f"No API endpoint configured for {family}",
            {"family": family},
        )


class MissingCredentialError(BitextError):
    """A required API key or bot identifier is not configured."""

    def __init__(self, family: str, setting: str) -> None:
        self.family = family
        self.setting = setting
        super().__init__(
            ErrorCode.MISSING_CREDENTIAL,
            f"Missing credential '{setting}' for {family}",
            {"family": family, "setting": setting},
        )


class StreamError(BitextError):
    """Streaming transport failed before the answer was complete."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.STREAM_FAILED, message, details)


class PollTransportError(BitextError):
    """A submit, poll or fetch call failed; the session is aborted."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.POLL_TRANSPORT_FAILED, message, details)


class PollingTimeoutError(BitextError):
    """Polling budget exhausted without the chat completing."""

    def __init__(self, attempts: int, interval_seconds: float) -> None:
        self.attempts = attempts
        super().__init__(
            ErrorCode.POLLING_TIMEOUT,
            f"Polling timeout after {attempts * interval_seconds:g} seconds",
            {"attempts": attempts, "interval_seconds": interval_seconds},
        )


class NoAnswerFoundError(BitextError):
    """Completed chat has no message of type 'answer'."""

    def __init__(
        self,
        message: str = "No answer message found in response",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(ErrorCode.NO_ANSWER_FOUND, message, details)


class ExtractionError(BitextError):
    """No extraction stage could recover a result from the answer."""

    def __init__(
        self,
        raw_text: str,
        reasons: dict[str, str] | None = None,
    ) -> None:
        self.raw_text = raw_text
        self.reasons = reasons or {}
        super().__init__(
            ErrorCode.EXTRACTION_FAILED,
            "Invalid answer content format",
            {"reasons": self.reasons},
        )
