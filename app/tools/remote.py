"""
Shared flow for tools backed by the remote image job service.

Reads the source image, derives a correlation key, uploads under a name
that embeds the key, and hands the rest to AsyncJobOrchestrator.
"""
from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Any

import aiofiles
from loguru import logger

from app.jobs.errors import JobTimeout, OrchestrationError, SubmissionFailed
from app.jobs.matching import get_matcher, make_correlation_key, stem_key, upload_filename
from app.jobs.protocols import ArtifactNamer
from app.media.factory import (
    build_orchestrator,
    get_artifact_sink,
    get_poll_policy,
    get_upscaling_client,
)
from app.media.storage import LocalArtifactSink
from app.media.upscaling_client import JobKind, UploadPayload, UpscalingServiceClient
from app.tools.base import Tool, ToolResult
from lumen_core.config import Settings, settings
from lumen_core.runtime import RunContext


class RemoteJobTool(Tool):
    """
    Base class for submit/poll/download tools.

    Subclasses pick the job kind and decide form fields, artifact names and
    how the stored paths are reported.
    """

    kind: JobKind
    timeout_message: str

    def __init__(
        self,
        client: UpscalingServiceClient | None = None,
        config: Settings | None = None,
    ):
        self._client = client
        self._config = config or settings

    def _get_client(self) -> UpscalingServiceClient:
        if self._client is None:
            self._client = get_upscaling_client(self._config)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    def form_fields(self, params: Any) -> dict[str, str]:
        return {}

    @abstractmethod
    def artifact_namer(self, stem: str, params: Any) -> ArtifactNamer:
        ...

    @abstractmethod
    def format_result(self, sink: LocalArtifactSink, paths: list[str], params: Any) -> str:
        ...

    async def forward(self, params: Any, context: RunContext) -> ToolResult:
        image_path = Path(params.image_path)
        try:
            async with aiofiles.open(image_path, "rb") as f:
                content = await f.read()
        except FileNotFoundError:
            return ToolResult.error(f"Error: File not found: {image_path}")

        key = make_correlation_key(image_path.name, self._config.CORRELATION_STRATEGY)
        payload = UploadPayload(
            filename=upload_filename(key, image_path.name),
            content=content,
            fields=self.form_fields(params),
        )

        sink = get_artifact_sink(self.name, self._config)
        orchestrator = build_orchestrator(
            client=self._get_client(),
            kind=self.kind,
            sink=sink,
            policy=get_poll_policy(self.kind, self._config),
            context=context,
            namer=self.artifact_namer(stem_key(image_path.name), params),
            matcher=get_matcher(self._config.MATCH_STRATEGY),
        )

        logger.info(f"[{context.request_id}] {self.name}: {image_path.name} as job {key}")
        try:
            paths = await orchestrator.run(payload, key)
        except SubmissionFailed as e:
            return ToolResult.error(e.message_safe)
        except JobTimeout:
            return ToolResult.error(self.timeout_message)
        except OrchestrationError as e:
            return ToolResult.error(f"Error: {e.message_safe}")

        return ToolResult.success(self.format_result(sink, paths, params))
