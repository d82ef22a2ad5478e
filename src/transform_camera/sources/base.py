"""Base class for frame sources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ImageMetadata:
    """Metadata returned alongside an encoded frame."""

    mime_type: str = ""


@dataclass
class NamedImage:
    """An encoded frame tagged with the name of the source that produced it."""

    image: bytes
    source_name: str
    mime_type: str


@dataclass
class CameraProperties:
    """Static properties of a frame source."""

    width: int = 0
    height: int = 0
    supports_pcd: bool = False
    mime_types: list[str] = field(default_factory=list)


class FrameSource(ABC):
    """Base class for all upstream frame sources.

    Subclasses implement specific sources (image file, camera, etc.)
    """

    source_type: str = "unknown"

    def __init__(self, name: str, **kwargs: Any):
        """Initialize frame source.

        Args:
            name: Name other components use to reference this source
            **kwargs: Additional source-specific parameters
        """
        self.name = name
        self.extra_params = kwargs

        self._opened = False
        self._frame_index = 0

    @abstractmethod
    def open(self) -> None:
        """Open/initialize the source.

        Raises:
            FileNotFoundError: If file doesn't exist
            RuntimeError: If source cannot be opened
        """
        pass

    @abstractmethod
    def image(
        self, mime_type: str = "", extra: dict[str, Any] | None = None
    ) -> tuple[bytes, ImageMetadata]:
        """Return the current frame, encoded.

        Args:
            mime_type: Preferred encoding; sources may ignore it
            extra: Source-specific request options

        Returns:
            Tuple of (encoded frame, metadata)
        """
        pass

    @abstractmethod
    def properties(self) -> CameraProperties:
        """Return source properties."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close/cleanup the source."""
        pass

    def images(self) -> list[NamedImage]:
        """Return the current frame from every sensor of the source."""
        data, metadata = self.image()
        return [NamedImage(image=data, source_name=self.name, mime_type=metadata.mime_type)]

    @property
    def is_opened(self) -> bool:
        """True if source is currently opened."""
        return self._opened

    @property
    def frame_index(self) -> int:
        """Number of frames served so far."""
        return self._frame_index

    def __enter__(self) -> "FrameSource":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
