"""Image adjustment operations.

Each function takes an RGBA ``PIL.Image.Image`` and returns a new image;
inputs are never modified in place.
"""

import math

import numpy as np
from PIL import Image, ImageFilter

TRANSPARENT = (0, 0, 0, 0)


def _apply_lut(image: Image.Image, lut: np.ndarray) -> Image.Image:
    """Map the colour channels through a 256-entry lookup table, keep alpha."""
    frame = np.asarray(image)
    result = frame.copy()
    result[:, :, :3] = lut[frame[:, :, :3]]
    return Image.fromarray(result)


def _clamp_lut(values: np.ndarray) -> np.ndarray:
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def resize_dimensions(size: tuple[int, int], width: int, height: int) -> tuple[int, int]:
    """Output size of a resize, deriving a zero width or height from the other."""
    src_w, src_h = size

    if width == 0:
        width = max(1, math.floor(height * src_w / src_h + 0.5))
    if height == 0:
        height = max(1, math.floor(width * src_h / src_w + 0.5))

    return width, height


def resize(image: Image.Image, width: int, height: int) -> Image.Image:
    """Resize with a Lanczos filter.

    A zero width or height is derived from the other dimension so the
    aspect ratio is preserved.

    Args:
        image: Input image
        width: Target width in pixels, or 0
        height: Target height in pixels, or 0

    Returns:
        Resized image
    """
    width, height = resize_dimensions(image.size, width, height)

    if (width, height) == image.size:
        return image.copy()

    return image.resize((width, height), Image.Resampling.LANCZOS)


def adjust_brightness(image: Image.Image, percentage: float) -> Image.Image:
    """Shift brightness by a percentage in [-100, 100].

    -100 gives a black image, 100 a white one; 0 leaves the image unchanged.
    """
    percentage = min(max(percentage, -100.0), 100.0)
    if percentage == 0:
        return image.copy()

    shift = 255.0 * percentage / 100.0
    lut = _clamp_lut(np.arange(256, dtype=np.float64) + shift)
    return _apply_lut(image, lut)


def adjust_contrast(image: Image.Image, percentage: float) -> Image.Image:
    """Scale contrast about mid-gray by a percentage in [-100, 100].

    -100 collapses the image to mid-gray, 100 doubles the spread.
    """
    percentage = min(max(percentage, -100.0), 100.0)
    if percentage == 0:
        return image.copy()

    v = (100.0 + percentage) / 100.0
    levels = np.arange(256, dtype=np.float64) / 255.0
    lut = _clamp_lut(((levels - 0.5) * v + 0.5) * 255.0)
    return _apply_lut(image, lut)


def blur(image: Image.Image, sigma: float) -> Image.Image:
    """Gaussian blur with standard deviation ``sigma`` (0 = unchanged)."""
    if sigma <= 0:
        return image.copy()
    return image.filter(ImageFilter.GaussianBlur(radius=sigma))


def sharpen(image: Image.Image, sigma: float) -> Image.Image:
    """Unsharp-mask sharpen of the colour channels (0 = unchanged)."""
    if sigma <= 0:
        return image.copy()

    alpha = image.getchannel("A")
    result = image.convert("RGB").filter(
        ImageFilter.UnsharpMask(radius=sigma, percent=100, threshold=0)
    )
    result.putalpha(alpha)
    return result


def grayscale(image: Image.Image) -> Image.Image:
    """Desaturate to luma (ITU-R 601-2) while staying RGBA."""
    luma = image.convert("L")
    return Image.merge("RGBA", (luma, luma, luma, image.getchannel("A")))


def flip_horizontal(image: Image.Image) -> Image.Image:
    return image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)


def flip_vertical(image: Image.Image) -> Image.Image:
    return image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)


def rotate(image: Image.Image, angle: float) -> Image.Image:
    """Rotate counter-clockwise by ``angle`` degrees about the centre.

    The canvas grows to hold the whole rotated image and exposed corners
    are filled with full transparency.
    """
    return image.rotate(
        angle,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=TRANSPARENT,
    )
