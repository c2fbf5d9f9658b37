"""
Error normalization for the generation pipeline.

Turns whatever was raised (our own LearnwareError subclasses, SDK errors,
HTTP client errors, plain exceptions) into a single AppError so callers and
logs only ever deal with one shape.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from utils.exceptions import ErrorCode, LearnwareError

logger = logging.getLogger(__name__)

GENERIC_API_MESSAGE = "An API error occurred"
NETWORK_MESSAGE = "A network error occurred. Please check your connection."
PROVIDER_MESSAGE = "An error occurred with the Gemini API"
AUTH_MESSAGE = "Authentication failed. Please check your API key."
UNKNOWN_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class AppError:
    code: ErrorCode
    message: str
    details: Optional[Any] = None

    def to_dict(self) -> dict:
        return {"error": self.code.value, "message": self.message}


def _safe_attr(obj: Any, name: str) -> Any:
    # httpx raises RuntimeError when .request is read on an error built without one
    try:
        return getattr(obj, name, None)
    except RuntimeError:
        return None


def _message_of(caught: Any) -> str:
    message = _safe_attr(caught, "message")
    if isinstance(message, str) and message:
        return message
    if isinstance(caught, dict):
        return str(caught.get("message") or "")
    if isinstance(caught, BaseException):
        return str(caught)
    return ""


def _response_body(response: Any) -> Any:
    data = _safe_attr(response, "data")
    if data is not None:
        return data
    json_fn = _safe_attr(response, "json")
    if callable(json_fn):
        try:
            return json_fn()
        except ValueError:
            return None
    return None


def _is_validation_error(caught: Any) -> bool:
    if isinstance(caught, PydanticValidationError):
        return True
    return type(caught).__name__ == "ValidationError" or _safe_attr(caught, "name") == "ValidationError"


def normalize_error(caught: Any) -> AppError:
    """
    Classify a raised value into an AppError.

    Typed LearnwareErrors map straight to their kind. Anything else is matched
    against these rules in order, first match wins:
    response attached, request without response, provider named in the
    message, validation error, auth wording in the message, unknown.
    """
    if isinstance(caught, LearnwareError):
        return AppError(code=caught.kind, message=caught.message, details=caught.context or None)

    response = _safe_attr(caught, "response")
    if response is not None:
        body = _response_body(response)
        message = body.get("message") if isinstance(body, dict) else None
        return AppError(
            code=ErrorCode.API_ERROR,
            message=message or GENERIC_API_MESSAGE,
            details=body,
        )

    request = _safe_attr(caught, "request")
    if request is not None:
        return AppError(code=ErrorCode.NETWORK_ERROR, message=NETWORK_MESSAGE, details=request)

    message = _message_of(caught)

    if "Gemini" in message:
        return AppError(code=ErrorCode.MODEL_PROVIDER_ERROR, message=PROVIDER_MESSAGE, details=caught)

    if _is_validation_error(caught):
        errors = caught.errors() if isinstance(caught, PydanticValidationError) else _safe_attr(caught, "errors")
        return AppError(code=ErrorCode.VALIDATION_ERROR, message=message, details=errors)

    if "authentication" in message or "API key" in message:
        return AppError(code=ErrorCode.AUTH_ERROR, message=AUTH_MESSAGE, details=caught)

    return AppError(code=ErrorCode.UNKNOWN_ERROR, message=message or UNKNOWN_MESSAGE, details=caught)


def log_error(error: AppError) -> None:
    """Write one line for a normalized error. Never raises."""
    try:
        details = repr(error.details) if error.details is not None else "-"
    except Exception:
        details = "<unrepresentable details>"
    logger.error(f"[{error.code.value}] {error.message} | details={details[:500]}")


def is_auth_error(error: AppError) -> bool:
    return error.code == ErrorCode.AUTH_ERROR


def is_network_error(error: AppError) -> bool:
    return error.code == ErrorCode.NETWORK_ERROR


def is_validation_error(error: AppError) -> bool:
    return error.code == ErrorCode.VALIDATION_ERROR
