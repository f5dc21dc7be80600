"""Map dispatch failures to response envelopes."""

from __future__ import annotations

from typing import Any

from loguru import logger

from ajaxrpc.rpc.envelope import ResponseEnvelope
from ajaxrpc.utils.exceptions import AjaxRpcError, classify_exception, sanitize_error_message


def error_result(request_id: Any, exc: AjaxRpcError) -> ResponseEnvelope:
    """Envelope for routing, parameter and application errors; id is echoed."""
    return ResponseEnvelope(id=request_id, error=exc.message)


def _exception_text(exc: Exception) -> str:
    try:
        return str(exc)
    except Exception:
        # unprintable; callers fall back to the type name
        return ""


def unhandled_exception_result(*, method: str, request_id: Any, exc: Exception) -> ResponseEnvelope:
    """Map an exception raised by an invoked method to an error envelope."""
    code, category = classify_exception(exc)
    sanitized = sanitize_error_message(_exception_text(exc)) or type(exc).__name__
    logger.opt(exception=exc).error("RPC method {} failed with [{}/{}]: {}", method, code, category.value, sanitized)
    return ResponseEnvelope(id=request_id, error=sanitized)


def invalid_return_result(*, method: str, request_id: Any, outcome: Any) -> ResponseEnvelope:
    logger.error("RPC method {} returned {} instead of (result, error)", method, type(outcome).__name__)
    return ResponseEnvelope(id=request_id, error=f"Invalid return value from {method}.")


def unserializable_result(*, method: str, request_id: Any, exc: Exception) -> ResponseEnvelope:
    logger.error("RPC method {} result is not JSON serializable: {}", method, exc)
    return ResponseEnvelope(id=request_id, error=f"Result of {method} is not JSON serializable.")
