"""
Shared async HTTP client for calls to remote AI services.

This module provides a pooled HTTP client that injects default and
correlation headers, bounds every call with a timeout, retries transient
failures and converts everything else into ServiceError subclasses.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from loguru import logger

from .context import RunContext
from .errors import ErrorCode, RetryableError, ServiceError, TerminalError
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy


class ServiceHttpClient:
    """Shared HTTP client for remote services.

    Features:
    - Connection pooling via httpx.AsyncClient
    - Default headers (e.g. credential cookies) plus X-Request-Id injection
    - Retry on transient failures (429, 502, 503, 504, timeouts, connect errors)
    - Per-call timeout; redirects are followed
    - Structured error conversion

    Paths are joined to ``base_url``; absolute ``http(s)://`` URLs are used
    unchanged, which is how result downloads are addressed.

    Example:
        client = ServiceHttpClient("https://image-upscaling.net")
        async with client:
            response = await client.get("/removebg_get_status", context)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_policy: RetryPolicy | None = None,
        default_headers: dict[str, str] | None = None,
        max_connections: int = 20,
        max_keepalive: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the HTTP client.

        Args:
            base_url: Base URL for relative request paths.
            timeout: Timeout in seconds applied to every call.
            retry_policy: Retry configuration. Uses default if None.
            default_headers: Headers sent with every request.
            max_connections: Maximum total connections in pool.
            max_keepalive: Maximum keepalive connections.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy or DEFAULT_RETRY_POLICY
        self.default_headers = dict(default_headers or {})

        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            keepalive_expiry=30.0,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=self._limits,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ServiceHttpClient":
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _build_url(self, path: str) -> str:
        """Build full URL from a path or pass an absolute URL through."""
        if path.startswith(("http://", "https://")):
            return path
        path = path.lstrip("/")
        return f"{self.base_url}/{path}"

    async def request(
        self,
        method: str,
        path: str,
        context: RunContext,
        retry_policy: RetryPolicy | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an HTTP request with header injection and retry.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Request path or absolute URL.
            context: RunContext for header injection and correlation.
            retry_policy: Overrides the client policy for this call.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            The HTTP response (always 2xx).

        Raises:
            RetryableError: For transient failures after max retries.
            TerminalError: For permanent failures (4xx, unfollowable 3xx).
            ServiceError: For anything unexpected.
        """
        policy = retry_policy or self.retry_policy
        client = await self._get_client()
        url = self._build_url(path)

        headers = dict(self.default_headers)
        headers.update(kwargs.pop("headers", None) or {})
        headers.update(context.get_headers())

        last_exception: Exception | None = None

        for attempt in range(policy.max_attempts):
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    **kwargs,
                )

                if policy.should_retry_status(response.status_code):
                    if attempt + 1 < policy.max_attempts:
                        delay = policy.calculate_delay(attempt)
                        logger.info(
                            f"[{context.request_id}] Retry {attempt + 1}/{policy.max_attempts} "
                            f"for {method} {path} (status={response.status_code}) in {delay:.2f}s"
                        )
                        await asyncio.sleep(delay)
                        continue

                _raise_for_status(response)
                return response

            except httpx.TimeoutException as e:
                last_exception = e
                if attempt + 1 >= policy.max_attempts:
                    raise RetryableError(
                        code=ErrorCode.TIMEOUT,
                        message_safe=f"Request timed out after {self.timeout}s",
                        cause=e,
                    )

                delay = policy.calculate_delay(attempt)
                logger.info(
                    f"[{context.request_id}] Timeout, retry {attempt + 1}/{policy.max_attempts} "
                    f"for {method} {path} in {delay:.2f}s"
                )
                await asyncio.sleep(delay)

            except httpx.ConnectError as e:
                last_exception = e
                if attempt + 1 >= policy.max_attempts:
                    raise RetryableError(
                        code=ErrorCode.CONNECTION_ERROR,
                        message_safe="Failed to connect to service",
                        cause=e,
                    )

                delay = policy.calculate_delay(attempt)
                logger.info(
                    f"[{context.request_id}] Connection error, retry {attempt + 1}/{policy.max_attempts} "
                    f"for {method} {path} in {delay:.2f}s"
                )
                await asyncio.sleep(delay)

            except ServiceError:
                raise

            except Exception as e:
                logger.error(f"[{context.request_id}] Unexpected error: {e}")
                raise ServiceError(
                    code=ErrorCode.INTERNAL_ERROR,
                    message_safe="Unexpected error during request",
                    message_debug=str(e),
                    cause=e,
                )

        if last_exception:
            raise RetryableError(
                code=ErrorCode.SERVICE_UNAVAILABLE,
                message_safe="Max retries exceeded",
                cause=last_exception,
            )
        raise RuntimeError("Retry loop exited unexpectedly")

    async def get(
        self,
        path: str,
        context: RunContext,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a GET request.

        Args:
            path: Request path or absolute URL.
            context: RunContext for correlation.
            **kwargs: Additional arguments (params, headers, retry_policy, etc.).

        Returns:
            The HTTP response.
        """
        return await self.request("GET", path, context, **kwargs)

    async def post(
        self,
        path: str,
        context: RunContext,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a POST request.

        Args:
            path: Request path or absolute URL.
            context: RunContext for correlation.
            **kwargs: Additional arguments (files, data, headers, retry_policy, etc.).

        Returns:
            The HTTP response.
        """
        return await self.request("POST", path, context, **kwargs)


def _raise_for_status(response: httpx.Response) -> None:
    """Convert an error response into the matching ServiceError.

    Redirects are followed by the client, so a 3xx that reaches this point
    had no usable Location and carries no content.
    """
    status = response.status_code
    if status < 300:
        return

    body = response.text[:500] if response.text else None

    if status < 400:
        raise TerminalError(
            code=ErrorCode.INVALID_RESPONSE,
            message_safe=f"Unfollowable redirect ({status})",
            message_debug=response.headers.get("location"),
            status_code=status,
        )

    if status == 429:
        raise RetryableError(
            code=ErrorCode.RATE_LIMITED,
            message_safe="Rate limited by service",
            message_debug=body,
            status_code=status,
        )

    if status >= 500:
        raise RetryableError(
            code=ErrorCode.SERVICE_UNAVAILABLE,
            message_safe=f"Service returned {status}",
            message_debug=body,
            status_code=status,
        )

    if status == 401:
        raise TerminalError(
            code=ErrorCode.UNAUTHORIZED,
            message_safe="Unauthorized",
            status_code=status,
        )

    if status == 403:
        raise TerminalError(
            code=ErrorCode.FORBIDDEN,
            message_safe="Forbidden",
            status_code=status,
        )

    if status == 404:
        raise TerminalError(
            code=ErrorCode.NOT_FOUND,
            message_safe="Resource not found",
            status_code=status,
        )

    raise TerminalError(
        code=ErrorCode.INVALID_INPUT,
        message_safe=f"Request failed with status {status}",
        message_debug=body,
        status_code=status,
    )
