"""Upstream frame source implementations."""

from transform_camera.sources.base import (
    CameraProperties,
    FrameSource,
    ImageMetadata,
    NamedImage,
)
from transform_camera.sources.image import ImageFileSource
from transform_camera.sources.camera import CameraSource

# Registry of source types
SOURCE_TYPES = {
    "image": ImageFileSource,
    "camera": CameraSource,
}


def create_source(source_type: str, **kwargs) -> FrameSource:
    """Create a frame source by type."""
    if source_type not in SOURCE_TYPES:
        raise ValueError(f"Unknown source type: {source_type}. Available: {list(SOURCE_TYPES.keys())}")
    return SOURCE_TYPES[source_type](**kwargs)


__all__ = [
    "CameraProperties",
    "FrameSource",
    "ImageMetadata",
    "NamedImage",
    "ImageFileSource",
    "CameraSource",
    "SOURCE_TYPES",
    "create_source",
]
