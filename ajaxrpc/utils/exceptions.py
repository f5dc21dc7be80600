"""
Exception hierarchy and error handling utilities for ajaxrpc.

Provides:
- Custom exception classes with error codes
- Error categorization (configuration, protocol, routing, parameter, application)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    CONFIGURATION = "configuration"
    PROTOCOL = "protocol"
    ROUTING = "routing"
    PARAMETER = "parameter"
    APPLICATION = "application"
    FATAL = "fatal"


class AjaxRpcError(Exception):
    """Base exception for all ajaxrpc errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def description(self) -> str:
        return self.message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigurationError(AjaxRpcError):
    """Registration-time error: bad service name, duplicate, or nothing to expose."""

    UNNAMED_SERVICE = "UNNAMED_SERVICE"
    NOT_EXPORTED = "NOT_EXPORTED"
    DUPLICATE_SERVICE = "DUPLICATE_SERVICE"
    NO_ELIGIBLE_METHODS = "NO_ELIGIBLE_METHODS"

    def __init__(self, kind: str, message: str, service: str | None = None):
        details = {"service": service} if service is not None else {}
        super().__init__(message, code=kind, category=ErrorCategory.CONFIGURATION, details=details)
        self.kind = kind

    @classmethod
    def unnamed_service(cls, type_name: str) -> ConfigurationError:
        return cls(cls.UNNAMED_SERVICE, f"rpc: no service name for type {type_name}")

    @classmethod
    def not_exported(cls, name: str) -> ConfigurationError:
        return cls(cls.NOT_EXPORTED, f"rpc Register: type {name} is not exported", service=name)

    @classmethod
    def duplicate_service(cls, name: str) -> ConfigurationError:
        return cls(cls.DUPLICATE_SERVICE, f"rpc: service already defined: {name}", service=name)

    @classmethod
    def no_eligible_methods(cls, name: str) -> ConfigurationError:
        return cls(
            cls.NO_ELIGIBLE_METHODS,
            f"rpc Register: type {name} has no exported methods of suitable type",
            service=name,
        )


class ProtocolError(AjaxRpcError):
    """The request body could not be parsed as a request envelope."""

    MESSAGE = "Invalid JSON-RPC."

    def __init__(self, reason: str | None = None):
        details = {"reason": reason} if reason else {}
        super().__init__(self.MESSAGE, code="INVALID_REQUEST", category=ErrorCategory.PROTOCOL, details=details)


class RoutingError(AjaxRpcError):
    """Unknown service or unknown method."""

    SERVICE_NOT_FOUND = "Service not found."
    METHOD_NOT_FOUND = "Method not found."

    def __init__(self, message: str, code: str, target: str):
        super().__init__(message, code=code, category=ErrorCategory.ROUTING, details={"method": target})

    @classmethod
    def service_not_found(cls, target: str) -> RoutingError:
        return cls(cls.SERVICE_NOT_FOUND, "SERVICE_NOT_FOUND", target)

    @classmethod
    def method_not_found(cls, target: str) -> RoutingError:
        return cls(cls.METHOD_NOT_FOUND, "METHOD_NOT_FOUND", target)


class ParameterError(AjaxRpcError):
    """Arity or type mismatch while decoding positional parameters."""

    def __init__(self, message: str, code: str, position: int | None = None):
        details = {"position": position} if position is not None else {}
        super().__init__(message, code=code, category=ErrorCategory.PARAMETER, details=details)
        self.position = position

    @classmethod
    def arity(cls) -> ParameterError:
        return cls("Incorrect number of parameters.", "ARITY")

    @classmethod
    def type_mismatch(cls, position: int) -> ParameterError:
        return cls(f"Type mismatch parameter {position}.", "TYPE_MISMATCH", position=position)


class ApplicationError(AjaxRpcError):
    """Error reported by an invoked method through its error return value."""

    def __init__(self, message: str, method: str | None = None):
        details = {"method": method} if method else {}
        super().__init__(message, code="APPLICATION_ERROR", category=ErrorCategory.APPLICATION, details=details)


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory]:
    """
    Classify an exception raised out of an invoked method.

    Returns:
        Tuple of (error_code, category)
    """
    if isinstance(exc, AjaxRpcError):
        return exc.code, exc.category

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.PROTOCOL

    if isinstance(exc, (TypeError, ValueError)):
        return "INVALID_VALUE", ErrorCategory.APPLICATION

    if isinstance(exc, KeyError):
        return "MISSING_KEY", ErrorCategory.APPLICATION

    if isinstance(exc, ZeroDivisionError):
        return "ARITHMETIC_ERROR", ErrorCategory.APPLICATION

    return "INTERNAL_ERROR", ErrorCategory.FATAL
