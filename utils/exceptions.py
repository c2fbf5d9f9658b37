"""
Unified exception hierarchy for Learnware Grove.

All domain exceptions inherit from LearnwareError and carry:
- error_code: machine-readable string (e.g. "COURSE_NOT_FOUND")
- status_code: HTTP status code
- message: human-readable description
- context: optional structured metadata dict
- kind: the normalized ErrorCode the error handler reports
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Closed set of error kinds surfaced to callers and logs."""
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    MODEL_PROVIDER_ERROR = "MODEL_PROVIDER_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    INVALID_RESPONSE_FORMAT = "INVALID_RESPONSE_FORMAT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class LearnwareError(Exception):
    """Base exception for all Learnware Grove domain errors."""

    kind: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.context = context or {}
        super().__init__(message)


class ValidationError(LearnwareError):
    """400-level validation / bad-request errors."""

    kind = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        error_code: str = "INVALID_REQUEST",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, status_code=400, context=context)


class NotFoundError(LearnwareError):
    """404 resource-not-found errors."""

    kind = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        error_code: str = "COURSE_NOT_FOUND",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, status_code=404, context=context)


class AuthError(LearnwareError):
    """Missing or rejected credentials (Gemini API key, owner id)."""

    kind = ErrorCode.AUTH_ERROR

    def __init__(
        self,
        message: str = "Gemini service is not initialized. Please set a valid API key.",
        error_code: str = "API_KEY_MISSING",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, status_code=401, context=context)


class ModelProviderError(LearnwareError):
    """The generative model call itself failed."""

    kind = ErrorCode.MODEL_PROVIDER_ERROR

    def __init__(
        self,
        message: str = "An error occurred with the Gemini API",
        error_code: str = "GENERATION_FAILED",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, status_code=502, context=context)


class InvalidResponseFormatError(LearnwareError):
    """Model answered, but no JSON object could be extracted from the text."""

    kind = ErrorCode.INVALID_RESPONSE_FORMAT

    def __init__(self, raw_text: str, message: str = "Invalid response format"):
        self.raw_text = raw_text
        super().__init__(
            message,
            error_code="INVALID_RESPONSE_FORMAT",
            status_code=502,
            context={"raw_text": raw_text},
        )


class StorageError(LearnwareError):
    """500-level database / storage failures."""

    kind = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        error_code: str = "STORAGE_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, status_code=500, context=context)
