"""Image processing: transform pipeline, adjustments and codec."""

from transform_camera.processing.transforms import (
    TRANSFORM_PARAMS,
    Transform,
    TransformType,
    apply_pipeline,
    apply_transform,
    describe_transforms,
)
from transform_camera.processing.codec import decode_image, encode_image

__all__ = [
    "TRANSFORM_PARAMS",
    "Transform",
    "TransformType",
    "apply_pipeline",
    "apply_transform",
    "describe_transforms",
    "decode_image",
    "encode_image",
]
