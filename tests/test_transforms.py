"""Tests for the transform pipeline executor."""

import numpy as np
import pytest
from PIL import Image

from transform_camera.exceptions import (
    InvalidParameterError,
    PipelineError,
    UnsupportedTransformError,
)
from transform_camera.processing import transforms
from transform_camera.processing.transforms import (
    TRANSFORM_PARAMS,
    Transform,
    TransformType,
    apply_pipeline,
    apply_transform,
    describe_transforms,
)

from conftest import make_image

VALID_PARAMS = {
    "resize": {"width": 50, "height": 40},
    "brightness": {"amount": 20},
    "contrast": {"amount": -30.5},
    "blur": {"sigma": 1.5},
    "sharpen": {"sigma": 2},
    "grayscale": {},
    "fliph": {},
    "flipv": {},
    "rotate": {"angle": 30},
}


def test_every_type_has_handler_and_schema():
    assert set(transforms._HANDLERS) == set(TransformType)
    assert set(TRANSFORM_PARAMS) == set(TransformType)
    assert set(VALID_PARAMS) == {t.value for t in TransformType}


def test_describe_transforms():
    described = {d["type"]: d["params"] for d in describe_transforms()}
    assert described["resize"] == ["width", "height"]
    assert described["grayscale"] == []
    assert len(described) == 9


@pytest.mark.parametrize("transform_type", [t.value for t in TransformType])
def test_valid_transform_returns_image(transform_type):
    src = make_image(64, 48)
    result = apply_transform(src, Transform(type=transform_type, params=VALID_PARAMS[transform_type]))
    assert isinstance(result, Image.Image)
    assert result.mode == "RGBA"
    assert result is not src


def test_transform_params_default_empty():
    assert Transform(type="grayscale").params == {}
    assert Transform(type="grayscale", params=None).params == {}


def test_empty_pipeline_is_identity(image):
    result = apply_pipeline(image, [])
    assert result is not image
    assert result.tobytes() == image.tobytes()


def test_pipeline_converts_rgb_input():
    src = make_image(20, 10).convert("RGB")
    result = apply_pipeline(src, [])
    assert result.mode == "RGBA"
    assert result.getpixel((0, 0))[3] == 255


def test_unsupported_type():
    with pytest.raises(UnsupportedTransformError, match="unsupported transform type: sepia"):
        apply_transform(make_image(10, 10), Transform(type="sepia"))


def test_unsupported_type_aborts_pipeline(monkeypatch):
    calls = []
    original = transforms._HANDLERS[TransformType.FLIP_H]

    def spy(img, params):
        calls.append("fliph")
        return original(img, params)

    monkeypatch.setitem(transforms._HANDLERS, TransformType.FLIP_H, spy)

    pipeline = [
        Transform(type="fliph"),
        Transform(type="sepia"),
        Transform(type="fliph"),
    ]
    with pytest.raises(PipelineError) as exc_info:
        apply_pipeline(make_image(10, 10), pipeline)

    assert calls == ["fliph"]
    assert exc_info.value.index == 1
    assert exc_info.value.transform_type == "sepia"
    assert isinstance(exc_info.value.__cause__, UnsupportedTransformError)
    assert "failed to apply transform sepia" in str(exc_info.value)


@pytest.mark.parametrize(
    "transform_type,param",
    [
        ("resize", "width"),
        ("brightness", "amount"),
        ("contrast", "amount"),
        ("blur", "sigma"),
        ("sharpen", "sigma"),
        ("rotate", "angle"),
    ],
)
@pytest.mark.parametrize("bad_value", ["missing", "10", None, True, float("nan"), 10**400])
def test_invalid_parameter(transform_type, param, bad_value):
    src = make_image(30, 20)
    before = src.tobytes()

    params = dict(VALID_PARAMS[transform_type])
    if bad_value == "missing":
        del params[param]
    else:
        params[param] = bad_value

    with pytest.raises(PipelineError) as exc_info:
        apply_pipeline(src, [Transform(type=transform_type, params=params)])

    cause = exc_info.value.__cause__
    assert isinstance(cause, InvalidParameterError)
    assert cause.name == param
    assert f"invalid {param} parameter" in str(exc_info.value)
    assert src.tobytes() == before


def test_missing_height_named():
    with pytest.raises(InvalidParameterError) as exc_info:
        apply_transform(make_image(10, 10), Transform(type="resize", params={"width": 5}))
    assert exc_info.value.name == "height"


@pytest.mark.parametrize(
    "params",
    [
        {"width": -1, "height": 10},
        {"width": 10.5, "height": 10},
        {"width": 0, "height": 0},
        {"width": 10**12, "height": 0},
        {"width": 20000, "height": 20000},
        {"width": 0, "height": 2**31},
    ],
)
def test_resize_rejects_bad_dimensions(params):
    with pytest.raises(InvalidParameterError):
        apply_transform(make_image(10, 10), Transform(type="resize", params=params))


def test_oversized_resize_is_pipeline_error():
    pipeline = [Transform(type="resize", params={"width": 10**12, "height": 0})]
    with pytest.raises(PipelineError) as exc_info:
        apply_pipeline(make_image(10, 10), pipeline)

    cause = exc_info.value.__cause__
    assert isinstance(cause, InvalidParameterError)
    assert cause.name == "width"


def test_derived_height_too_large_is_rejected():
    # 1x1000 column: width 10**6 derives height 10**9
    with pytest.raises(InvalidParameterError) as exc_info:
        apply_transform(make_image(1, 1000), Transform(type="resize", params={"width": 10**6, "height": 0}))
    assert exc_info.value.name == "width"


def test_resize_accepts_integral_float():
    result = apply_transform(make_image(40, 30), Transform(type="resize", params={"width": 20.0, "height": 15.0}))
    assert result.size == (20, 15)


@pytest.mark.parametrize("transform_type", ["blur", "sharpen"])
def test_negative_sigma_rejected(transform_type):
    with pytest.raises(InvalidParameterError, match="sigma"):
        apply_transform(make_image(10, 10), Transform(type=transform_type, params={"sigma": -1}))


def test_extra_params_ignored():
    result = apply_transform(make_image(10, 10), Transform(type="fliph", params={"unused": "x"}))
    assert result.size == (10, 10)


def test_numpy_scalars_accepted():
    result = apply_transform(
        make_image(40, 30),
        Transform(type="resize", params={"width": np.int64(20), "height": np.float64(0)}),
    )
    assert result.size == (20, 15)


def test_order_sensitivity(image):
    resize = Transform(type="resize", params={"width": 200, "height": 100})
    rotate = Transform(type="rotate", params={"angle": 90})

    a = apply_pipeline(image, [resize, rotate])
    b = apply_pipeline(image, [rotate, resize])

    assert a.size == (100, 200)
    assert b.size == (200, 100)
    assert a.tobytes() != b.tobytes()


def test_grayscale_then_proportional_resize(image):
    pipeline = [
        Transform(type="grayscale"),
        Transform(type="resize", params={"width": 100, "height": 0}),
    ]
    result = apply_pipeline(image, pipeline)

    assert result.size == (100, 75)
    frame = np.asarray(result)
    assert np.array_equal(frame[:, :, 0], frame[:, :, 1])
    assert np.array_equal(frame[:, :, 1], frame[:, :, 2])


def test_resize_height_only_derives_width(image):
    result = apply_transform(image, Transform(type="resize", params={"width": 0, "height": 150}))
    assert result.size == (200, 150)


def test_rotate_45_expands_with_transparent_corners(image):
    result = apply_pipeline(image, [Transform(type="rotate", params={"angle": 45})])

    assert result.width > image.width
    assert result.height > image.height
    w, h = result.size
    for corner in [(0, 0), (w - 1, 0), (0, h - 1), (w - 1, h - 1)]:
        assert result.getpixel(corner)[3] == 0
    assert result.getpixel((w // 2, h // 2))[3] == 255


def test_multi_step_pipeline_applies_in_order(image):
    pipeline = [
        Transform(type="fliph"),
        Transform(type="fliph"),
        Transform(type="flipv"),
        Transform(type="flipv"),
    ]
    result = apply_pipeline(image, pipeline)
    assert result.tobytes() == image.tobytes()
