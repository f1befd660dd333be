"""
Standardized error model with retry semantics.

Every failure that crosses a remote-call boundary is converted into one of
these classes, so callers can decide between retrying, skipping and giving
up without inspecting transport exceptions.
"""

from __future__ import annotations

import uuid


class ServiceError(Exception):
    """Standardized service error with retry classification.

    Attributes:
        code: Error code for programmatic handling.
        message_safe: Safe message for logging and user display.
        message_debug: Optional detailed message for debugging.
        retryable: Whether this error can be retried.
        status_code: HTTP status of the failed response, when there was one.
        cause: Optional underlying exception.
        debug_id: Unique identifier for log correlation.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        retryable: bool = False,
        status_code: int | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        """Initialize a ServiceError.

        Args:
            code: Machine-readable error code (see ErrorCode).
            message_safe: Message safe to show in a tool result.
            message_debug: Optional detail such as a truncated response body.
            retryable: Whether the operation can be retried.
            status_code: HTTP status that caused the error, if any.
            cause: Optional underlying exception.
            debug_id: Optional correlation ID (auto-generated if None).
        """
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.retryable = retryable
        self.status_code = status_code
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    def __str__(self) -> str:
        """Return ``[CODE] message``."""
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        """Return detailed representation."""
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"retryable={self.retryable}, "
            f"debug_id={self.debug_id!r})"
        )


class RetryableError(ServiceError):
    """Error that indicates the operation can be retried.

    Raised for transient failures: timeouts, connection errors, rate
    limiting (429), 5xx responses and malformed status documents.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        """Initialize a RetryableError.

        Args:
            code: Machine-readable error code.
            message_safe: Message safe to show in a tool result.
            message_debug: Optional detailed debug message.
            status_code: HTTP status that caused the error, if any.
            cause: Optional underlying exception.
            debug_id: Optional correlation ID.
        """
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=True,
            status_code=status_code,
            cause=cause,
            debug_id=debug_id,
        )


class TerminalError(ServiceError):
    """Error that indicates the operation should not be retried.

    Raised for permanent failures: rejected input (400), bad credentials
    (401, 403), missing results (404) and redirects that cannot be followed.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        """Initialize a TerminalError.

        Args:
            code: Machine-readable error code.
            message_safe: Message safe to show in a tool result.
            message_debug: Optional detailed debug message.
            status_code: HTTP status that caused the error, if any.
            cause: Optional underlying exception.
            debug_id: Optional correlation ID.
        """
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=False,
            status_code=status_code,
            cause=cause,
            debug_id=debug_id,
        )


class ErrorCode:
    """Standard error codes for common failure scenarios."""

    # Network/connectivity
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Authentication/Authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Validation
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    NOT_FOUND = "NOT_FOUND"

    # Rate limiting
    RATE_LIMITED = "RATE_LIMITED"

    # Remote jobs
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    POLL_FAILED = "POLL_FAILED"
    JOB_TIMEOUT = "JOB_TIMEOUT"
    DOWNLOAD_FAILED = "DOWNLOAD_FAILED"
    PERSIST_FAILED = "PERSIST_FAILED"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"
