"""
Background Removal Tool

Removes the background of an image through the remote job service and
reports the folder holding every processed variant.
"""
from __future__ import annotations

from pathlib import Path

from app.jobs.protocols import ArtifactNamer
from app.media.storage import LocalArtifactSink
from app.media.upscaling_client import JobKind
from app.tools.remote import RemoteJobTool
from app.tools.schemas import BackgroundRemovalInput


class BackgroundRemovalTool(RemoteJobTool):
    """
    Example:
        tool = BackgroundRemovalTool()
        result = await tool(image_path="/path/to/photo.jpg")
        # "/tmp/bgcleaner-1718000000000-3fa2c1d0\n\nFiles:\nphoto_nobg_0.png"
    """

    name = "bgcleaner"
    description = (
        "Remove background from an image using AI. Produces a high-quality PNG "
        "with transparent background, preserving fine details like hair and edges. "
        "Returns the folder path containing all processed images."
    )
    input_model = BackgroundRemovalInput
    kind = JobKind.REMOVE_BACKGROUND
    timeout_message = "Timeout: processing took too long"

    def artifact_namer(self, stem: str, params: BackgroundRemovalInput) -> ArtifactNamer:
        def name(correlation_key: str, index: int, identifier: str) -> str:
            return f"{stem}_nobg_{index}.png"

        return name

    def format_result(
        self,
        sink: LocalArtifactSink,
        paths: list[str],
        params: BackgroundRemovalInput,
    ) -> str:
        names = "\n".join(Path(p).name for p in paths)
        return f"{sink.directory.resolve()}\n\nFiles:\n{names}"
