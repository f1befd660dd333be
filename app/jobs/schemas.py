"""
Data model for remote asynchronous jobs.

A Job is owned by exactly one orchestrator for its lifetime. StatusSnapshot
and Artifact are immutable values: a snapshot is fresh on every poll and is
never merged with a previous one.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class JobState(str, Enum):
    """Lifecycle state of a remote job."""

    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = {JobState.COMPLETED, JobState.TIMED_OUT, JobState.FAILED}

_STATE_RANK = {
    JobState.SUBMITTED: 0,
    JobState.POLLING: 1,
    JobState.COMPLETED: 2,
    JobState.TIMED_OUT: 2,
    JobState.FAILED: 2,
}


class Job(BaseModel):
    """One submitted unit of remote work.

    Attributes:
        correlation_key: Fragment identifying this job's entries in a shared
            status snapshot.
        submitted_at: When the job was created. Set once.
        state: Current lifecycle state. Only moves forward.
    """

    correlation_key: str = Field(min_length=1, frozen=True)
    submitted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), frozen=True
    )
    state: JobState = JobState.SUBMITTED

    def transition(self, new_state: JobState) -> None:
        """Move the job to ``new_state``.

        Raises:
            ValueError: If the job is already terminal or the move is backwards.
        """
        if self.state.is_terminal:
            raise ValueError(
                f"Job {self.correlation_key} is already {self.state.value}"
            )
        if _STATE_RANK[new_state] <= _STATE_RANK[self.state]:
            raise ValueError(
                f"Invalid transition {self.state.value} -> {new_state.value}"
            )
        self.state = new_state


class StatusSnapshot(BaseModel):
    """Point-in-time view of a remote job queue.

    Identifiers keep the order the service reported them in; duplicates are
    dropped.
    """

    pending: tuple[str, ...] = ()
    processing: tuple[str, ...] = ()
    processed: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @field_validator("pending", "processing", "processed", mode="before")
    @classmethod
    def _dedupe(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if not isinstance(value, (list, tuple)):
            raise ValueError("expected a list of identifiers")
        return tuple(dict.fromkeys(value))

    @classmethod
    def empty(cls) -> "StatusSnapshot":
        return cls()


class Artifact(BaseModel):
    """One downloaded result: raw bytes plus the name it will be stored under."""

    identifier: str
    filename: str
    content: bytes

    model_config = {"frozen": True}


class SubmissionResult(BaseModel):
    """Outcome of uploading a job to the remote service."""

    ok: bool
    error: str | None = None
    status_code: int | None = None

    model_config = {"frozen": True}

    @classmethod
    def accepted(cls) -> "SubmissionResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls, error: str, status_code: int | None = None) -> "SubmissionResult":
        return cls(ok=False, error=error, status_code=status_code)


class PollPolicy(BaseModel):
    """Budget for one job's poll loop.

    Attributes:
        max_attempts: Number of status polls before giving up.
        poll_interval: Seconds slept before every poll.
        call_timeout: Upper bound in seconds for each remote call.
    """

    max_attempts: int = Field(default=30, gt=0)
    poll_interval: float = Field(default=2.0, gt=0)
    call_timeout: float = Field(default=30.0, gt=0)

    model_config = {"frozen": True}

    @property
    def total_wait(self) -> float:
        """Total time spent sleeping if no poll ever completes."""
        return self.max_attempts * self.poll_interval
