"""Argument models for the image job tools."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

UpscaleModel = Literal["diffuser", "plus", "general"]


class BackgroundRemovalInput(BaseModel):
    image_path: str = Field(
        min_length=1,
        description="Absolute path to the source image file (PNG, JPG, WEBP supported)",
    )


class UpscaleInput(BaseModel):
    image_path: str = Field(
        min_length=1,
        description="Absolute path to the source image file",
    )
    scale: Literal[1, 2, 3, 4] = Field(
        default=2,
        description="Scale factor: 2, 3, or 4 (default: 2)",
    )
    model: UpscaleModel = Field(
        default="plus",
        description=(
            "Model: diffuser (small images, creative), plus (medium/large), "
            "general (very large)"
        ),
    )
    face_enhance: bool = Field(
        default=False,
        description="Enhance faces in the image (only for plus/general models)",
    )

    def form_fields(self) -> dict[str, str]:
        """Multipart form fields the upscaling endpoint expects."""
        fields = {"scale": str(self.scale), "model": self.model}
        if self.face_enhance and self.model in ("plus", "general"):
            fields["fx"] = ""
        if self.model == "diffuser":
            fields["prompt"] = ""
            fields["creativity"] = "0.1"
        return fields
