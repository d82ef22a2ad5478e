"""Still image file source."""

import logging
from pathlib import Path
from typing import Any

from PIL import Image

from transform_camera.sources.base import CameraProperties, FrameSource, ImageMetadata

logger = logging.getLogger(__name__)


class ImageFileSource(FrameSource):
    """Serves a still image file (PNG, JPG, BMP, WebP, etc.) as every frame."""

    source_type = "image"

    def __init__(self, name: str, path: str, **kwargs: Any):
        """Initialize image source.

        Args:
            name: Source name
            path: Path to image file
        """
        super().__init__(name, **kwargs)
        self.path = path

        self._data: bytes | None = None
        self._mime_type = ""
        self._width = 0
        self._height = 0

    def open(self) -> None:
        """Read and identify the image file."""
        if self._opened:
            return

        path = Path(self.path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {self.path}")

        data = path.read_bytes()
        try:
            with Image.open(path) as img:
                self._width, self._height = img.size
                self._mime_type = Image.MIME.get(img.format or "", "")
        except Exception as e:
            raise RuntimeError(f"Failed to load image: {e}") from e

        self._data = data
        self._opened = True
        logger.info(f"Opened image: {self.path} ({self._width}x{self._height})")

    def image(
        self, mime_type: str = "", extra: dict[str, Any] | None = None
    ) -> tuple[bytes, ImageMetadata]:
        """Return the file contents unchanged, whatever mime type is requested."""
        if not self._opened or self._data is None:
            raise RuntimeError(f"Image source {self.name!r} is not open")

        self._frame_index += 1
        return self._data, ImageMetadata(mime_type=self._mime_type)

    def properties(self) -> CameraProperties:
        return CameraProperties(
            width=self._width,
            height=self._height,
            mime_types=[self._mime_type] if self._mime_type else [],
        )

    def close(self) -> None:
        """Release image data."""
        self._data = None
        self._opened = False
        logger.debug(f"Closed image: {self.path}")
