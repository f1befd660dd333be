"""
Terminal outcomes of a remote job that did not produce artifacts.

Every failure seen while orchestrating a job is converted into exactly one
of these before it reaches the caller.
"""

from __future__ import annotations

from lumen_core.runtime.errors import ErrorCode, ServiceError


class OrchestrationError(ServiceError):
    """Base class for remote-job failures."""

    def __init__(
        self,
        code: str,
        message_safe: str,
        correlation_key: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=False,
            cause=cause,
        )
        self.correlation_key = correlation_key


class SubmissionFailed(OrchestrationError):
    """The upload was rejected or could not be sent. Never retried."""

    def __init__(
        self,
        correlation_key: str,
        reason: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            code=ErrorCode.SUBMISSION_FAILED,
            message_safe=reason,
            correlation_key=correlation_key,
            cause=cause,
        )
        self.status_code = status_code


class PollFailed(OrchestrationError):
    """The status endpoint answered with a non-retryable error."""

    def __init__(self, correlation_key: str, cause: Exception):
        super().__init__(
            code=ErrorCode.POLL_FAILED,
            message_safe=f"Status check failed: {cause}",
            correlation_key=correlation_key,
            cause=cause,
        )


class JobTimeout(OrchestrationError):
    """No qualifying completion within the attempt budget."""

    def __init__(
        self,
        correlation_key: str,
        attempts: int,
        last_error: Exception | None = None,
    ):
        super().__init__(
            code=ErrorCode.JOB_TIMEOUT,
            message_safe=f"Job not completed after {attempts} status checks",
            correlation_key=correlation_key,
            message_debug=str(last_error) if last_error else None,
            cause=last_error,
        )
        self.attempts = attempts
        self.last_error = last_error


class DownloadFailed(OrchestrationError):
    """The service reported results but none could be retrieved."""

    def __init__(
        self,
        correlation_key: str,
        identifiers: list[str],
        message_safe: str | None = None,
        code: str = ErrorCode.DOWNLOAD_FAILED,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe
            or f"All {len(identifiers)} result downloads failed",
            correlation_key=correlation_key,
        )
        self.identifiers = identifiers


class PersistFailed(DownloadFailed):
    """Results were downloaded but none could be written to storage."""

    def __init__(self, correlation_key: str, identifiers: list[str]):
        super().__init__(
            correlation_key=correlation_key,
            identifiers=identifiers,
            message_safe=f"All {len(identifiers)} downloaded results failed to save",
            code=ErrorCode.PERSIST_FAILED,
        )
