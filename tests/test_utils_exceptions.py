"""Tests for ajaxrpc.utils.exceptions module."""

from __future__ import annotations

import json

import pytest

from ajaxrpc.utils.exceptions import (
    AjaxRpcError,
    ApplicationError,
    ConfigurationError,
    ErrorCategory,
    ParameterError,
    ProtocolError,
    RoutingError,
    classify_exception,
    sanitize_error_message,
)


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_base_error_to_dict(self) -> None:
        exc = AjaxRpcError("test message", code="TEST_CODE")
        assert exc.to_dict() == {
            "error": "TEST_CODE",
            "message": "test message",
            "category": ErrorCategory.FATAL.value,
            "details": {},
        }
        assert str(exc) == "[TEST_CODE] test message"
        assert exc.description() == "test message"

    def test_configuration_error_messages(self) -> None:
        assert ConfigurationError.duplicate_service("Arith").message == "rpc: service already defined: Arith"
        assert ConfigurationError.not_exported("_x").message == "rpc Register: type _x is not exported"
        assert (
            ConfigurationError.no_eligible_methods("Empty").message
            == "rpc Register: type Empty has no exported methods of suitable type"
        )
        exc = ConfigurationError.unnamed_service("Thing")
        assert exc.kind == ConfigurationError.UNNAMED_SERVICE
        assert exc.category == ErrorCategory.CONFIGURATION
        assert exc.details == {}

    def test_configuration_error_carries_service(self) -> None:
        exc = ConfigurationError.duplicate_service("Arith")
        assert exc.details == {"service": "Arith"}
        assert exc.code == ConfigurationError.DUPLICATE_SERVICE

    def test_protocol_error(self) -> None:
        exc = ProtocolError(reason="bad json")
        assert exc.message == "Invalid JSON-RPC."
        assert exc.category == ErrorCategory.PROTOCOL
        assert exc.details == {"reason": "bad json"}
        assert ProtocolError().details == {}

    def test_routing_errors(self) -> None:
        service = RoutingError.service_not_found("A.B")
        method = RoutingError.method_not_found("A.B")
        assert service.message == "Service not found."
        assert method.message == "Method not found."
        assert service.code == "SERVICE_NOT_FOUND"
        assert method.details == {"method": "A.B"}

    def test_parameter_errors(self) -> None:
        arity = ParameterError.arity()
        assert arity.message == "Incorrect number of parameters."
        assert arity.position is None

        mismatch = ParameterError.type_mismatch(3)
        assert mismatch.message == "Type mismatch parameter 3."
        assert mismatch.position == 3
        assert mismatch.details == {"position": 3}

    def test_application_error(self) -> None:
        exc = ApplicationError("no funds", method="Bank.Withdraw")
        assert exc.category == ErrorCategory.APPLICATION
        assert exc.details == {"method": "Bank.Withdraw"}
        assert ApplicationError("x").details == {}


class TestSanitizeErrorMessage:
    def test_sanitize_api_key(self) -> None:
        result = sanitize_error_message("Error: api_key=sk-1234567890abcdef")
        assert "sk-1234567890abcdef" not in result
        assert "[REDACTED]" in result

    def test_sanitize_bearer_token(self) -> None:
        result = sanitize_error_message("Authorization: Bearer abc.def.ghi")
        assert "abc.def.ghi" not in result

    def test_sanitize_long_hex(self) -> None:
        result = sanitize_error_message("id " + "a" * 40)
        assert "a" * 40 not in result

    def test_plain_message_untouched(self) -> None:
        assert sanitize_error_message("division by zero") == "division by zero"

    def test_custom_replacement(self) -> None:
        assert sanitize_error_message("password=hunter2", replacement="***") == "***"


class TestClassifyException:
    @pytest.mark.parametrize(
        ("exc", "code", "category"),
        [
            (ParameterError.arity(), "ARITY", ErrorCategory.PARAMETER),
            (json.JSONDecodeError("x", "doc", 0), "JSON_PARSE_ERROR", ErrorCategory.PROTOCOL),
            (ValueError("x"), "INVALID_VALUE", ErrorCategory.APPLICATION),
            (TypeError("x"), "INVALID_VALUE", ErrorCategory.APPLICATION),
            (KeyError("x"), "MISSING_KEY", ErrorCategory.APPLICATION),
            (ZeroDivisionError(), "ARITHMETIC_ERROR", ErrorCategory.APPLICATION),
            (RuntimeError("x"), "INTERNAL_ERROR", ErrorCategory.FATAL),
        ],
    )
    def test_classification(self, exc, code, category) -> None:
        assert classify_exception(exc) == (code, category)
