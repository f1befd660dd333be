"""Unit tests for ServiceError hierarchy."""

import pytest

from lumen_core.runtime.errors import (
    ErrorCode,
    RetryableError,
    ServiceError,
    TerminalError,
)


class TestServiceError:
    """Tests for ServiceError base class."""

    def test_create_with_required_fields(self):
        """Should create error with required fields."""
        error = ServiceError(
            code="TEST_ERROR",
            message_safe="Something went wrong",
        )

        assert error.code == "TEST_ERROR"
        assert error.message_safe == "Something went wrong"
        assert error.message_debug is None
        assert error.retryable is False
        assert error.status_code is None
        assert error.cause is None
        assert len(error.debug_id) == 8

    def test_str_representation(self):
        """Should format as [CODE] message."""
        error = ServiceError(code="MY_CODE", message_safe="My message")

        assert str(error) == "[MY_CODE] My message"

    def test_repr_uses_subclass_name(self):
        error = TerminalError(code=ErrorCode.NOT_FOUND, message_safe="gone", debug_id="abc")

        assert repr(error).startswith("TerminalError(code='NOT_FOUND'")

    def test_is_exception(self):
        with pytest.raises(ServiceError):
            raise ServiceError(code="X", message_safe="boom")


class TestRetryClassification:
    """Tests for RetryableError and TerminalError."""

    def test_retryable_error_is_retryable(self):
        error = RetryableError(
            code=ErrorCode.SERVICE_UNAVAILABLE,
            message_safe="Service returned 503",
            status_code=503,
        )

        assert error.retryable is True
        assert error.status_code == 503
        assert isinstance(error, ServiceError)

    def test_terminal_error_is_not_retryable(self):
        cause = ValueError("bad")
        error = TerminalError(
            code=ErrorCode.INVALID_INPUT,
            message_safe="Bad request",
            cause=cause,
        )

        assert error.retryable is False
        assert error.cause is cause
        assert isinstance(error, ServiceError)
