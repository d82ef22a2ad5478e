"""Transform pipeline definitions and execution."""

import logging
import math
from enum import Enum
from numbers import Real
from typing import Any, Callable, Mapping, Sequence

from PIL import Image
from pydantic import BaseModel, Field, field_validator

from transform_camera.exceptions import (
    InvalidParameterError,
    PipelineError,
    TransformError,
    UnsupportedTransformError,
)
from transform_camera.processing import adjust

logger = logging.getLogger(__name__)

# Largest output side Pillow can allocate
MAX_DIMENSION = 2**31 - 1


class TransformType(str, Enum):
    """Supported pipeline operations."""

    RESIZE = "resize"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    BLUR = "blur"
    SHARPEN = "sharpen"
    GRAYSCALE = "grayscale"
    FLIP_H = "fliph"
    FLIP_V = "flipv"
    ROTATE = "rotate"


class Transform(BaseModel):
    """One pipeline step: an operation name and its loosely-typed parameters.

    The type is kept as plain text so an unknown operation only fails when
    the step is applied, not when the configuration is loaded.
    """

    type: str
    params: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("params", mode="before")
    @classmethod
    def _empty_params(cls, value: Any) -> Any:
        return {} if value is None else value


# Required parameter keys per operation
TRANSFORM_PARAMS: dict[TransformType, tuple[str, ...]] = {
    TransformType.RESIZE: ("width", "height"),
    TransformType.BRIGHTNESS: ("amount",),
    TransformType.CONTRAST: ("amount",),
    TransformType.BLUR: ("sigma",),
    TransformType.SHARPEN: ("sigma",),
    TransformType.GRAYSCALE: (),
    TransformType.FLIP_H: (),
    TransformType.FLIP_V: (),
    TransformType.ROTATE: ("angle",),
}


def describe_transforms() -> list[dict[str, Any]]:
    """List supported transform types with their required parameters."""
    return [
        {"type": t.value, "params": list(TRANSFORM_PARAMS[t])}
        for t in TransformType
    ]


def _number(params: Mapping[str, Any], name: str) -> float:
    """Extract a finite real parameter."""
    if name not in params:
        raise InvalidParameterError(name)

    value = params[name]
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidParameterError(name, value)

    try:
        number = float(value)
    except OverflowError:
        raise InvalidParameterError(name, value) from None
    if not math.isfinite(number):
        raise InvalidParameterError(name, value)
    return number


def _non_negative(params: Mapping[str, Any], name: str) -> float:
    number = _number(params, name)
    if number < 0:
        raise InvalidParameterError(name, params[name])
    return number


def _dimension(params: Mapping[str, Any], name: str) -> int:
    number = _non_negative(params, name)
    if not number.is_integer() or number > MAX_DIMENSION:
        raise InvalidParameterError(name, params[name])
    return int(number)


def _resize(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    width = _dimension(params, "width")
    height = _dimension(params, "height")
    if width == 0 and height == 0:
        # Nothing to derive a proportional size from
        raise InvalidParameterError("width", params["width"])

    out_w, out_h = adjust.resize_dimensions(image.size, width, height)
    max_pixels = Image.MAX_IMAGE_PIXELS
    if max(out_w, out_h) > MAX_DIMENSION or (max_pixels and out_w * out_h > max_pixels):
        name = "width" if width else "height"
        raise InvalidParameterError(name, params[name])

    return adjust.resize(image, width, height)


def _brightness(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.adjust_brightness(image, _number(params, "amount"))


def _contrast(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.adjust_contrast(image, _number(params, "amount"))


def _blur(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.blur(image, _non_negative(params, "sigma"))


def _sharpen(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.sharpen(image, _non_negative(params, "sigma"))


def _grayscale(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.grayscale(image)


def _flip_h(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.flip_horizontal(image)


def _flip_v(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.flip_vertical(image)


def _rotate(image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
    return adjust.rotate(image, _number(params, "angle"))


Handler = Callable[[Image.Image, Mapping[str, Any]], Image.Image]

_HANDLERS: dict[TransformType, Handler] = {
    TransformType.RESIZE: _resize,
    TransformType.BRIGHTNESS: _brightness,
    TransformType.CONTRAST: _contrast,
    TransformType.BLUR: _blur,
    TransformType.SHARPEN: _sharpen,
    TransformType.GRAYSCALE: _grayscale,
    TransformType.FLIP_H: _flip_h,
    TransformType.FLIP_V: _flip_v,
    TransformType.ROTATE: _rotate,
}


def apply_transform(image: Image.Image, transform: Transform) -> Image.Image:
    """Apply a single transform.

    Args:
        image: RGBA input image (not modified)
        transform: Step to apply

    Returns:
        New transformed image

    Raises:
        UnsupportedTransformError: If the type is not a known operation
        InvalidParameterError: If a required parameter is missing or invalid
    """
    try:
        transform_type = TransformType(transform.type)
    except ValueError:
        raise UnsupportedTransformError(transform.type) from None

    return _HANDLERS[transform_type](image, transform.params)


def apply_pipeline(image: Image.Image, pipeline: Sequence[Transform]) -> Image.Image:
    """Fold the pipeline over an image, left to right.

    The first failing step aborts the whole pipeline; no partial result is
    returned and later steps are never run.

    Args:
        image: Decoded input image (any mode, not modified)
        pipeline: Ordered transforms

    Returns:
        New RGBA image with every step applied

    Raises:
        PipelineError: Wrapping the failing step's TransformError
    """
    result = image.convert("RGBA")

    for index, transform in enumerate(pipeline):
        try:
            result = apply_transform(result, transform)
        except TransformError as e:
            raise PipelineError(index, transform.type, e) from e
        logger.debug(f"Applied {transform.type} ({index}): {result.width}x{result.height}")

    return result
