"""Remote image job service client, artifact storage and wiring."""

from .storage import LocalArtifactSink
from .upscaling_client import JobKind, UploadPayload, UpscalingServiceClient

__all__ = [
    "JobKind",
    "LocalArtifactSink",
    "UploadPayload",
    "UpscalingServiceClient",
]
