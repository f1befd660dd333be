"""
Factory for wiring remote-job collaborators from Settings.

This is the only place that reads the client credential; everything
downstream receives it through the objects built here.
"""

from __future__ import annotations

from functools import partial

from app.jobs.matching import substring_matcher
from app.jobs.orchestrator import AsyncJobOrchestrator, default_namer
from app.jobs.protocols import ArtifactNamer, ArtifactSink, KeyMatcher
from app.jobs.schemas import PollPolicy
from app.media.storage import LocalArtifactSink
from app.media.upscaling_client import JobKind, UpscalingServiceClient
from lumen_core.config import Settings, settings
from lumen_core.runtime import DEFAULT_RETRY_POLICY, RunContext


def get_upscaling_client(config: Settings | None = None) -> UpscalingServiceClient:
    """
    Create a client for the remote image job service.

    Raises:
        ValueError: If CLIENT_ID is not configured.
    """
    config = config or settings
    return UpscalingServiceClient(
        client_id=config.CLIENT_ID,
        base_url=config.UPSCALING_API_URL,
        timeout=config.REQUEST_TIMEOUT,
        retry_policy=DEFAULT_RETRY_POLICY,
    )


def get_artifact_sink(prefix: str, config: Settings | None = None) -> LocalArtifactSink:
    """Create a fresh per-invocation output directory sink."""
    config = config or settings
    return LocalArtifactSink(base_path=config.OUTPUT_DIR, prefix=prefix)


def get_poll_policy(kind: JobKind, config: Settings | None = None) -> PollPolicy:
    """Poll budget for a job family: 30 x 2s for background removal, 60 x 2s for upscaling."""
    config = config or settings
    max_attempts = (
        config.BGCLEANER_MAX_ATTEMPTS
        if kind is JobKind.REMOVE_BACKGROUND
        else config.RESIZE_MAX_ATTEMPTS
    )
    return PollPolicy(
        max_attempts=max_attempts,
        poll_interval=config.POLL_INTERVAL,
        # Every HTTP attempt may use its full timeout, plus the backoff between them
        call_timeout=(
            config.REQUEST_TIMEOUT * DEFAULT_RETRY_POLICY.max_attempts
            + DEFAULT_RETRY_POLICY.max_total_delay()
        ),
    )


def build_orchestrator(
    client: UpscalingServiceClient,
    kind: JobKind,
    sink: ArtifactSink,
    policy: PollPolicy,
    context: RunContext,
    namer: ArtifactNamer = default_namer,
    matcher: KeyMatcher = substring_matcher,
) -> AsyncJobOrchestrator:
    """Bind a client to one job family and wrap it in an orchestrator."""
    return AsyncJobOrchestrator(
        submit_fn=partial(client.submit, kind, context=context),
        poll_fn=partial(client.get_status, kind, context=context),
        fetch_fn=partial(client.download, context=context),
        persist_fn=sink,
        policy=policy,
        matcher=matcher,
        namer=namer,
    )
