"""
Submit / poll / download orchestration for one remote asynchronous job.

Flow:
    1. Submit the payload once. A rejected submission ends the job.
    2. Sleep ``poll_interval``, then poll the shared status endpoint, up to
       ``max_attempts`` times. The job is complete when at least one
       processed identifier matches the correlation key and no processing
       identifier does.
    3. Fetch every matching identifier in the order the service reported
       them, persisting each artifact as soon as it is downloaded. Single
       fetch or persist failures are skipped.
    4. Return the storage references, or raise one OrchestrationError.

Every remote call is bounded by ``call_timeout``. Cancellation of the
surrounding task propagates unchanged: nothing further is polled, fetched
or returned.
"""

from __future__ import annotations

import asyncio
from pathlib import PurePath
from typing import Any, Awaitable, Callable, TypeVar
from urllib.parse import urlsplit

from loguru import logger

from app.jobs.errors import (
    DownloadFailed,
    JobTimeout,
    PersistFailed,
    PollFailed,
    SubmissionFailed,
)
from app.jobs.matching import substring_matcher
from app.jobs.protocols import (
    ArtifactFetcher,
    ArtifactNamer,
    ArtifactSink,
    JobSubmitter,
    KeyMatcher,
    StatusProvider,
)
from app.jobs.schemas import Artifact, Job, JobState, PollPolicy, StatusSnapshot
from lumen_core.runtime.errors import ServiceError

T = TypeVar("T")


def default_namer(correlation_key: str, index: int, identifier: str) -> str:
    """``<key>_<index><suffix of the identifier's path>``."""
    suffix = PurePath(urlsplit(identifier).path).suffix
    return f"{correlation_key}_{index}{suffix}"


def match_snapshot(
    snapshot: StatusSnapshot,
    correlation_key: str,
    matcher: KeyMatcher = substring_matcher,
) -> tuple[list[str], list[str]]:
    """Split a snapshot into this job's processed and processing identifiers.

    Returns:
        ``(matching, still_processing)`` in snapshot order.
    """
    matching = [i for i in snapshot.processed if matcher(correlation_key, i)]
    still_processing = [i for i in snapshot.processing if matcher(correlation_key, i)]
    return matching, still_processing


def is_complete(matching: list[str], still_processing: list[str]) -> bool:
    """A job is complete once it has results and nothing left in progress."""
    return bool(matching) and not still_processing


class AsyncJobOrchestrator:
    """
    Drives the lifecycle of a single remote job.

    The instance is single-use: it owns the Job it creates in ``run`` and
    refuses to run a second time. Concurrent jobs each get their own
    orchestrator and share nothing but the remote service.

    Usage:
        orchestrator = AsyncJobOrchestrator(
            submit_fn=submit, poll_fn=poll, fetch_fn=fetch, persist_fn=sink,
            policy=PollPolicy(max_attempts=30, poll_interval=2.0),
        )
        paths = await orchestrator.run(payload, correlation_key="photo1-3fa2c1d0")
    """

    def __init__(
        self,
        submit_fn: JobSubmitter,
        poll_fn: StatusProvider,
        fetch_fn: ArtifactFetcher,
        persist_fn: ArtifactSink,
        policy: PollPolicy | None = None,
        matcher: KeyMatcher = substring_matcher,
        namer: ArtifactNamer = default_namer,
    ):
        self.submit_fn = submit_fn
        self.poll_fn = poll_fn
        self.fetch_fn = fetch_fn
        self.persist_fn = persist_fn
        self.policy = policy or PollPolicy()
        self.matcher = matcher
        self.namer = namer
        self.job: Job | None = None
        self.poll_count = 0

    async def run(self, payload: Any, correlation_key: str) -> list[str]:
        """
        Submit ``payload`` and wait for its results.

        Args:
            payload: Opaque input handed to ``submit_fn``.
            correlation_key: Fragment identifying this job's result identifiers.

        Returns:
            Non-empty list of storage references, in download order.

        Raises:
            ValueError: If ``correlation_key`` is empty.
            RuntimeError: If this orchestrator has already run.
            SubmissionFailed, PollFailed, JobTimeout, DownloadFailed,
            PersistFailed: Terminal job outcomes.
        """
        if not correlation_key:
            raise ValueError("correlation_key must be non-empty")
        if self.job is not None:
            raise RuntimeError("AsyncJobOrchestrator instances are single-use")

        job = Job(correlation_key=correlation_key)
        self.job = job

        try:
            await self._submit(job, payload)
            job.transition(JobState.POLLING)
            matching = await self._poll_until_complete(job)
            refs = await self._collect(job, matching)
        except JobTimeout:
            job.transition(JobState.TIMED_OUT)
            raise
        except BaseException:
            job.transition(JobState.FAILED)
            raise

        job.transition(JobState.COMPLETED)
        logger.info(f"[{correlation_key}] Job completed with {len(refs)} artifact(s)")
        return refs

    async def _call(self, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
        return await asyncio.wait_for(fn(*args), timeout=self.policy.call_timeout)

    async def _submit(self, job: Job, payload: Any) -> None:
        key = job.correlation_key
        try:
            result = await self._call(self.submit_fn, payload)
        except asyncio.TimeoutError as e:
            raise SubmissionFailed(
                key, f"Upload timed out after {self.policy.call_timeout}s", cause=e
            )
        except Exception as e:
            raise SubmissionFailed(key, f"Upload error: {e}", cause=e)

        if not result.ok:
            logger.warning(f"[{key}] Submission rejected: {result.error}")
            raise SubmissionFailed(
                key, result.error or "Upload rejected", status_code=result.status_code
            )
        logger.info(f"[{key}] Job submitted")

    async def _poll_until_complete(self, job: Job) -> list[str]:
        key = job.correlation_key
        max_attempts = self.policy.max_attempts
        last_error: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            await asyncio.sleep(self.policy.poll_interval)
            self.poll_count = attempt

            try:
                snapshot = await self._call(self.poll_fn)
            except ServiceError as e:
                if not e.retryable:
                    raise PollFailed(key, e)
                last_error = e
                logger.warning(f"[{key}] Poll {attempt}/{max_attempts} failed: {e}")
                continue
            except Exception as e:
                last_error = e
                logger.warning(
                    f"[{key}] Poll {attempt}/{max_attempts} failed: {type(e).__name__} {e}"
                )
                continue

            matching, still_processing = match_snapshot(snapshot, key, self.matcher)
            if is_complete(matching, still_processing):
                logger.info(
                    f"[{key}] Completed on poll {attempt}/{max_attempts}: "
                    f"{len(matching)} result(s)"
                )
                return matching

            logger.debug(
                f"[{key}] Poll {attempt}/{max_attempts}: "
                f"processed={len(matching)} processing={len(still_processing)}"
            )

        logger.warning(f"[{key}] Timed out after {max_attempts} polls")
        raise JobTimeout(key, attempts=max_attempts, last_error=last_error)

    async def _collect(self, job: Job, matching: list[str]) -> list[str]:
        key = job.correlation_key
        refs: list[str] = []
        fetched = 0

        for identifier in matching:
            try:
                content = await self._call(self.fetch_fn, identifier)
            except Exception as e:
                logger.warning(f"[{key}] Download failed for {identifier}: {e}")
                continue
            fetched += 1

            artifact = Artifact(
                identifier=identifier,
                filename=self.namer(key, len(refs), identifier),
                content=content,
            )
            try:
                ref = await self._call(self.persist_fn, artifact.content, artifact.filename)
            except Exception as e:
                logger.warning(f"[{key}] Could not save {artifact.filename}: {e}")
                continue
            refs.append(ref)

        if not refs:
            if fetched:
                raise PersistFailed(key, matching)
            raise DownloadFailed(key, matching)
        return refs


async def run_job(
    input_payload: Any,
    correlation_key: str,
    submit_fn: JobSubmitter,
    poll_fn: StatusProvider,
    fetch_fn: ArtifactFetcher,
    persist_fn: ArtifactSink,
    max_attempts: int,
    poll_interval: float,
    call_timeout: float = 30.0,
    matcher: KeyMatcher = substring_matcher,
    namer: ArtifactNamer = default_namer,
) -> list[str]:
    """Run one job with a fresh orchestrator. See ``AsyncJobOrchestrator.run``."""
    orchestrator = AsyncJobOrchestrator(
        submit_fn=submit_fn,
        poll_fn=poll_fn,
        fetch_fn=fetch_fn,
        persist_fn=persist_fn,
        policy=PollPolicy(
            max_attempts=max_attempts,
            poll_interval=poll_interval,
            call_timeout=call_timeout,
        ),
        matcher=matcher,
        namer=namer,
    )
    return await orchestrator.run(input_payload, correlation_key)
