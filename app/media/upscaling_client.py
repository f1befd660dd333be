"""
Remote image job service HTTP client.

The service runs background removal and upscaling as queued jobs. Every
kind of job exposes the same three operations:

    POST /<kind>_upload        multipart upload, registers the job
    GET  /<kind>_get_status    pending/processing/processed result URLs
    GET  <result url>?delete_after_download=

All jobs of one client share the status endpoint. The client id is sent as
a cookie and identifies the account, not the job.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from app.jobs.schemas import StatusSnapshot, SubmissionResult
from lumen_core.runtime import (
    NO_RETRY_POLICY,
    ErrorCode,
    RetryableError,
    RetryPolicy,
    RunContext,
    ServiceError,
    ServiceHttpClient,
    default_context,
)

DEFAULT_BASE_URL = "https://image-upscaling.net"
DEFAULT_TIMEOUT = 30.0


class JobKind(str, Enum):
    """Job families offered by the service."""

    REMOVE_BACKGROUND = "removebg"
    UPSCALE = "upscaling"


class UploadPayload(BaseModel):
    """An image to upload plus the form fields for its job."""

    filename: str
    content: bytes
    fields: dict[str, str] = Field(default_factory=dict)


class UpscalingServiceClient:
    """Async client for the remote image job service.

    Uses ServiceHttpClient for connection pooling, per-call timeouts and
    retry on transient failures. Uploads are never retried.

    Example:
        async with UpscalingServiceClient(client_id="abc") as client:
            result = await client.submit(JobKind.UPSCALE, payload)
            snapshot = await client.get_status(JobKind.UPSCALE)
    """

    def __init__(
        self,
        client_id: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            client_id: Account identifier sent as the ``client_id`` cookie.
            base_url: Base URL of the service.
            timeout: Per-request timeout in seconds.
            retry_policy: Retry policy for status checks and downloads.
            transport: Optional httpx transport (used by tests).

        Raises:
            ValueError: If ``client_id`` is empty.
        """
        if not client_id:
            raise ValueError("CLIENT_ID is required for the image job service")

        self._http = ServiceHttpClient(
            base_url=base_url,
            timeout=timeout,
            retry_policy=retry_policy,
            default_headers={"Cookie": f"client_id={client_id}"},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._http.base_url

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self._http.close()

    async def __aenter__(self) -> "UpscalingServiceClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def submit(
        self,
        kind: JobKind,
        payload: UploadPayload,
        context: RunContext | None = None,
    ) -> SubmissionResult:
        """Upload an image and register a job.

        Args:
            kind: Which job family to submit to.
            payload: Image bytes, upload filename and form fields.
            context: Optional RunContext for correlation.

        Returns:
            Accepted result, or a rejected one carrying the HTTP status.

        Raises:
            ServiceError: If the request never produced a response.
        """
        ctx = context or default_context()
        try:
            await self._http.post(
                f"/{kind.value}_upload",
                ctx,
                files={"image": (payload.filename, payload.content)},
                data=payload.fields,
                retry_policy=NO_RETRY_POLICY,
            )
        except ServiceError as e:
            if e.status_code is None:
                raise
            return SubmissionResult.rejected(
                f"Upload error: {e.status_code}", status_code=e.status_code
            )
        return SubmissionResult.accepted()

    async def get_status(
        self,
        kind: JobKind,
        context: RunContext | None = None,
    ) -> StatusSnapshot:
        """Fetch the shared queue status for a job family.

        Raises:
            RetryableError: If the body is not a valid status document.
            ServiceError: For HTTP failures.
        """
        ctx = context or default_context()
        response = await self._http.get(f"/{kind.value}_get_status", ctx)
        try:
            return StatusSnapshot.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RetryableError(
                code=ErrorCode.INVALID_RESPONSE,
                message_safe="Malformed status response",
                message_debug=response.text[:500] if response.text else None,
                cause=e,
            )

    async def download(
        self,
        url: str,
        context: RunContext | None = None,
    ) -> bytes:
        """Download a processed result; the service deletes it afterwards.

        Raises:
            ServiceError: For HTTP failures.
        """
        ctx = context or default_context()
        response = await self._http.get(
            url,
            ctx,
            params={"delete_after_download": ""},
        )
        return response.content
