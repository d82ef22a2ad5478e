"""Transform Camera - applies an image transform pipeline to camera frames."""

from transform_camera.camera import TransformCamera, TransformCameraConfig
from transform_camera.processing.transforms import (
    Transform,
    TransformType,
    apply_pipeline,
    apply_transform,
)
from transform_camera.sources.base import FrameSource

__all__ = [
    "TransformCamera",
    "TransformCameraConfig",
    "Transform",
    "TransformType",
    "apply_pipeline",
    "apply_transform",
    "FrameSource",
]
