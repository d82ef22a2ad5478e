"""Camera/webcam source using OpenCV."""

import logging
from typing import Any

from transform_camera.processing.codec import MIME_JPEG, MIME_PNG
from transform_camera.sources.base import CameraProperties, FrameSource, ImageMetadata

logger = logging.getLogger(__name__)

try:
    import cv2
    HAS_OPENCV = True
except ImportError:
    HAS_OPENCV = False
    logger.warning("OpenCV not available - camera source disabled")

# cv2.imencode extensions by mime type
_EXTENSIONS = {
    MIME_JPEG: ".jpg",
    MIME_PNG: ".png",
}


class CameraSource(FrameSource):
    """Live camera/webcam source."""

    source_type = "camera"

    def __init__(
        self,
        name: str,
        device: int | str = 0,
        resolution: tuple[int, int] | None = None,
        **kwargs: Any,
    ):
        """Initialize camera source.

        Args:
            name: Source name
            device: Camera device index (0, 1, ...) or device path (/dev/video0)
            resolution: Requested capture resolution (width, height)
        """
        if not HAS_OPENCV:
            raise RuntimeError("OpenCV required for camera source. Install opencv-python-headless")

        super().__init__(name, **kwargs)

        self.device = device
        self.requested_resolution = resolution

        self._cap: Any = None  # cv2.VideoCapture
        self._width = 0
        self._height = 0

    def open(self) -> None:
        """Open the camera device."""
        if self._opened:
            return

        cap = cv2.VideoCapture(self.device)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"Failed to open camera: {self.device}")

        if self.requested_resolution:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.requested_resolution[0])
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.requested_resolution[1])

        self._cap = cap
        self._width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self._height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self._opened = True
        logger.info(f"Opened camera: {self.device} ({self._width}x{self._height})")

    def image(
        self, mime_type: str = "", extra: dict[str, Any] | None = None
    ) -> tuple[bytes, ImageMetadata]:
        """Capture a frame and encode it (JPEG unless PNG is requested)."""
        if not self._opened or self._cap is None:
            raise RuntimeError(f"Camera source {self.name!r} is not open")

        ret, frame = self._cap.read()
        if not ret:
            raise RuntimeError(f"Failed to read frame from camera: {self.device}")

        if mime_type not in _EXTENSIONS:
            mime_type = MIME_JPEG

        # imencode expects BGR, which is what VideoCapture returns
        ok, encoded = cv2.imencode(_EXTENSIONS[mime_type], frame)
        if not ok:
            raise RuntimeError(f"Failed to encode camera frame as {mime_type}")

        self._frame_index += 1
        return encoded.tobytes(), ImageMetadata(mime_type=mime_type)

    def properties(self) -> CameraProperties:
        return CameraProperties(
            width=self._width,
            height=self._height,
            mime_types=list(_EXTENSIONS),
        )

    def close(self) -> None:
        """Release camera."""
        if self._cap:
            self._cap.release()
            self._cap = None
        self._opened = False
        logger.debug(f"Closed camera: {self.device}")
