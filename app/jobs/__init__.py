"""Remote asynchronous job orchestration: submit, poll, download, persist."""

from .errors import (
    DownloadFailed,
    JobTimeout,
    OrchestrationError,
    PersistFailed,
    PollFailed,
    SubmissionFailed,
)
from .orchestrator import AsyncJobOrchestrator, run_job
from .schemas import Artifact, Job, JobState, PollPolicy, StatusSnapshot, SubmissionResult

__all__ = [
    "AsyncJobOrchestrator",
    "run_job",
    "Artifact",
    "Job",
    "JobState",
    "PollPolicy",
    "StatusSnapshot",
    "SubmissionResult",
    "OrchestrationError",
    "SubmissionFailed",
    "PollFailed",
    "JobTimeout",
    "DownloadFailed",
    "PersistFailed",
]
