"""
Local filesystem sink for downloaded artifacts.

Each tool invocation gets its own output directory, created lazily on the
first write, so a job that produces nothing leaves nothing behind.
"""

from __future__ import annotations

import time
import uuid
from pathlib import Path

import aiofiles
from loguru import logger


class LocalArtifactSink:
    """
    Writes artifacts under ``<base_path>/<prefix>-<epoch millis>-<id>/``.

    The random id keeps sinks created in the same millisecond apart.

    Usage:
        sink = LocalArtifactSink("/tmp", prefix="bgcleaner")
        path = await sink.persist(content, "photo_nobg_0.png")
    """

    def __init__(self, base_path: str | Path, prefix: str):
        """
        Args:
            base_path: Root directory for output directories.
            prefix: Directory name prefix, usually the tool name.
        """
        self.base_path = Path(base_path)
        unique_id = str(uuid.uuid4())[:8]
        self.directory = self.base_path / f"{prefix}-{int(time.time() * 1000)}-{unique_id}"
        self.written: list[Path] = []

    async def persist(self, content: bytes, suggested_name: str) -> str:
        """
        Write ``content`` to ``suggested_name`` inside the output directory.

        Returns:
            str: Absolute path of the written file.

        Raises:
            ValueError: If the name is empty or contains path separators.
            OSError: If the file cannot be written.
        """
        if (
            suggested_name in ("", ".", "..")
            or Path(suggested_name).name != suggested_name
        ):
            raise ValueError(f"Invalid artifact name: {suggested_name!r}")

        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / suggested_name

        async with aiofiles.open(target, "wb") as f:
            await f.write(content)

        self.written.append(target)
        logger.info(f"Saved {len(content)} bytes to {target}")
        return str(target.resolve())

    async def __call__(self, content: bytes, suggested_name: str) -> str:
        return await self.persist(content, suggested_name)
