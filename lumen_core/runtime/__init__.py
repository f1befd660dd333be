"""
Service runtime layer for lumen-tools.

This package provides shared infrastructure for calling remote services:
- RunContext: Per-invocation context with correlation IDs
- ServiceError: Standardized errors with retry semantics
- ServiceHttpClient: Pooled async HTTP client with timeouts and retry
- RetryPolicy: Configurable retry behavior
"""

from .context import RunContext, default_context
from .errors import ErrorCode, RetryableError, ServiceError, TerminalError
from .http_client import ServiceHttpClient
from .retry import DEFAULT_RETRY_POLICY, NO_RETRY_POLICY, RetryPolicy

__all__ = [
    "RunContext",
    "default_context",
    "ErrorCode",
    "ServiceError",
    "RetryableError",
    "TerminalError",
    "ServiceHttpClient",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "NO_RETRY_POLICY",
]
