"""
Image Upscaling Tool

Upscales an image 1x-4x through the remote job service and returns the
path of the upscaled file.
"""
from __future__ import annotations

from app.jobs.protocols import ArtifactNamer
from app.media.storage import LocalArtifactSink
from app.media.upscaling_client import JobKind
from app.tools.remote import RemoteJobTool
from app.tools.schemas import UpscaleInput


class UpscaleTool(RemoteJobTool):
    """
    Example:
        tool = UpscaleTool()
        result = await tool(image_path="/path/to/photo.jpg", scale=4, model="general")
    """

    name = "resize"
    description = (
        "Upscale an image using AI without losing quality. Supports 2x, 3x, or 4x "
        "scaling with different models optimized for various image sizes. "
        "Returns the path to the upscaled image."
    )
    input_model = UpscaleInput
    kind = JobKind.UPSCALE
    timeout_message = "Timeout: upscaling took too long"

    def form_fields(self, params: UpscaleInput) -> dict[str, str]:
        return params.form_fields()

    def artifact_namer(self, stem: str, params: UpscaleInput) -> ArtifactNamer:
        def name(correlation_key: str, index: int, identifier: str) -> str:
            # The first result keeps the plain name; extras must not overwrite it
            if index == 0:
                return f"{stem}_{params.scale}x.png"
            return f"{stem}_{params.scale}x_{index}.png"

        return name

    def format_result(
        self,
        sink: LocalArtifactSink,
        paths: list[str],
        params: UpscaleInput,
    ) -> str:
        return paths[0]
