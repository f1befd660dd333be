"""
Fake remote job service and sink for orchestrator tests.
"""

from __future__ import annotations

import asyncio

from app.jobs.schemas import StatusSnapshot, SubmissionResult
from lumen_core.runtime.errors import ErrorCode, RetryableError


class FakeJobService:
    """Scripted service: each poll returns the next snapshot, the last one repeats."""

    def __init__(
        self,
        snapshots: list[StatusSnapshot] | None = None,
        submit_result: SubmissionResult | None = None,
        contents: dict[str, bytes] | None = None,
        failing_fetches: set[str] | None = None,
    ):
        self.snapshots = list(snapshots or [])
        self.submit_result = submit_result or SubmissionResult.accepted()
        self.contents = contents or {}
        self.failing_fetches = failing_fetches or set()
        self.submit_calls: list[object] = []
        self.poll_calls = 0
        self.fetch_calls: list[str] = []

    async def submit(self, payload: object) -> SubmissionResult:
        self.submit_calls.append(payload)
        return self.submit_result

    async def poll(self) -> StatusSnapshot:
        self.poll_calls += 1
        if not self.snapshots:
            return StatusSnapshot()
        index = min(self.poll_calls, len(self.snapshots)) - 1
        return self.snapshots[index]

    async def fetch(self, identifier: str) -> bytes:
        self.fetch_calls.append(identifier)
        if identifier in self.failing_fetches:
            raise RetryableError(
                code=ErrorCode.SERVICE_UNAVAILABLE,
                message_safe=f"Service returned 503 for {identifier}",
                status_code=503,
            )
        return self.contents.get(identifier, identifier.encode())


class HangingCall:
    """Async callable that never finishes on the listed call numbers."""

    def __init__(self, result, hang_on: set[int]):
        self.result = result
        self.hang_on = hang_on
        self.calls = 0

    async def __call__(self, *args):
        self.calls += 1
        if self.calls in self.hang_on:
            await asyncio.sleep(3600)
        return self.result


class FakeSink:
    """In-memory sink returning ``mem://<name>`` references."""

    def __init__(self, failing_names: set[str] | None = None):
        self.failing_names = failing_names or set()
        self.saved: dict[str, bytes] = {}
        self.calls: list[str] = []

    async def __call__(self, content: bytes, suggested_name: str) -> str:
        self.calls.append(suggested_name)
        if suggested_name in self.failing_names:
            raise OSError(f"disk full while writing {suggested_name}")
        self.saved[suggested_name] = content
        return f"mem://{suggested_name}"
