"""Frame decoding and encoding."""

import io
import logging

from PIL import Image

logger = logging.getLogger(__name__)

MIME_JPEG = "image/jpeg"
MIME_PNG = "image/png"

# Output formats by mime type
ENCODERS = {
    MIME_JPEG: "JPEG",
    MIME_PNG: "PNG",
}

JPEG_QUALITY = 90


def decode_image(data: bytes) -> Image.Image:
    """Decode an encoded frame into an RGBA image.

    Raises:
        PIL.UnidentifiedImageError: If the data is not a readable image
    """
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        return img.convert("RGBA")


def encode_image(image: Image.Image, mime_type: str = MIME_JPEG) -> tuple[bytes, str]:
    """Encode an image for the caller.

    Unknown or empty mime types fall back to JPEG.

    Returns:
        Tuple of (encoded bytes, mime type actually used)
    """
    if mime_type not in ENCODERS:
        if mime_type:
            logger.debug(f"Unsupported output mime type {mime_type!r}, using {MIME_JPEG}")
        mime_type = MIME_JPEG

    buf = io.BytesIO()
    if mime_type == MIME_JPEG:
        # JPEG has no alpha; composite onto black
        if image.mode in ("RGBA", "LA"):
            rgba = image.convert("RGBA")
            background = Image.new("RGB", image.size, (0, 0, 0))
            background.paste(rgba, mask=rgba.getchannel("A"))
            image = background
        elif image.mode != "RGB":
            image = image.convert("RGB")
        image.save(buf, format="JPEG", quality=JPEG_QUALITY)
    else:
        image.save(buf, format=ENCODERS[mime_type])

    return buf.getvalue(), mime_type
