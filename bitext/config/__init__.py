"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    BitextError,
    ErrorCode,
    ExtractionError,
    MissingCredentialError,
    MissingEndpointError,
    NoAnswerFoundError,
    PollingTimeoutError,
    PollTransportError,
    StreamError,
    UnsupportedModelError,
    ValidationError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "BitextError",
    "ValidationError",
    "UnsupportedModelError",
    "MissingEndpointError",
    "MissingCredentialError",
    "StreamError",
    "PollTransportError",
    "PollingTimeoutError",
    "NoAnswerFoundError",
    "ExtractionError",
]
