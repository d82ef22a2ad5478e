"""Shared fixtures."""

import io
from typing import Any

import numpy as np
import pytest
from PIL import Image

from transform_camera.sources.base import CameraProperties, FrameSource, ImageMetadata


def make_image(width: int = 400, height: int = 300) -> Image.Image:
    """Opaque RGBA test image with a colour gradient."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    frame[:, :, 0] = xs[np.newaxis, :].astype(np.uint8)
    frame[:, :, 1] = ys[:, np.newaxis].astype(np.uint8)
    frame[:, :, 2] = 128
    frame[:, :, 3] = 255
    return Image.fromarray(frame)


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


class MemorySource(FrameSource):
    """Frame source serving fixed bytes, or raising a given error."""

    source_type = "memory"

    def __init__(self, name: str, data: bytes = b"", error: Exception | None = None):
        super().__init__(name)
        self.data = data
        self.error = error
        self.requests: list[str] = []

    def open(self) -> None:
        self._opened = True

    def image(
        self, mime_type: str = "", extra: dict[str, Any] | None = None
    ) -> tuple[bytes, ImageMetadata]:
        self.requests.append(mime_type)
        if self.error is not None:
            raise self.error
        self._frame_index += 1
        return self.data, ImageMetadata(mime_type="image/png")

    def properties(self) -> CameraProperties:
        return CameraProperties(width=400, height=300, mime_types=["image/png"])

    def close(self) -> None:
        self._opened = False


@pytest.fixture
def image() -> Image.Image:
    return make_image()


@pytest.fixture
def png_bytes(image: Image.Image) -> bytes:
    return encode_png(image)


@pytest.fixture
def memory_source(png_bytes: bytes) -> MemorySource:
    source = MemorySource("front", data=png_bytes)
    source.open()
    return source
