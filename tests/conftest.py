"""Shared fixtures for lumen-tools tests."""

import pytest

from lumen_core.config import Settings


@pytest.fixture
def test_settings(tmp_path):
    """Settings with fast polling and a per-test output directory."""
    return Settings(
        CLIENT_ID="test-client",
        UPSCALING_API_URL="https://jobs.example.test",
        OUTPUT_DIR=str(tmp_path),
        REQUEST_TIMEOUT=1.0,
        POLL_INTERVAL=0.01,
        BGCLEANER_MAX_ATTEMPTS=3,
        RESIZE_MAX_ATTEMPTS=3,
        CORRELATION_STRATEGY="stem",
    )


@pytest.fixture
def image_file(tmp_path):
    """A small source image on disk."""
    path = tmp_path / "photo1.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return path
