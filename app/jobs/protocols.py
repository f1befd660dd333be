"""
Protocols for the remote-job orchestration module.

The orchestrator only depends on these callables, so a job service client,
a storage backend or a test double can be swapped in freely.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from app.jobs.schemas import StatusSnapshot, SubmissionResult


@runtime_checkable
class JobSubmitter(Protocol):
    """Uploads the input payload and registers the job remotely."""

    async def __call__(self, payload: Any) -> SubmissionResult:
        ...


@runtime_checkable
class StatusProvider(Protocol):
    """Returns the service's current pending/processing/processed view."""

    async def __call__(self) -> StatusSnapshot:
        ...


@runtime_checkable
class ArtifactFetcher(Protocol):
    """Retrieves the bytes behind one completed result identifier.

    Raises on failure.
    """

    async def __call__(self, identifier: str) -> bytes:
        ...


@runtime_checkable
class ArtifactSink(Protocol):
    """Persists downloaded bytes and returns a storage reference."""

    async def __call__(self, content: bytes, suggested_name: str) -> str:
        ...


class KeyMatcher(Protocol):
    """Decides whether a reported identifier belongs to a job."""

    def __call__(self, correlation_key: str, identifier: str) -> bool:
        ...


class ArtifactNamer(Protocol):
    """Builds the output filename for the ``index``-th stored artifact."""

    def __call__(self, correlation_key: str, index: int, identifier: str) -> str:
        ...
