"""
Image encoding for vision API requests.

Providers receive the captured still as a base64 JPEG. JPEG files are
passed through untouched unless they need downscaling; anything else is
re-encoded with Pillow.
"""

import base64
import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from chessvision.core.models import ImagePayload, JPEG_MIME_TYPE


logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, Image.Image, NDArray[np.uint8]]

JPEG_SUFFIXES = {".jpg", ".jpeg"}
JPEG_MAGIC = b"\xff\xd8\xff"
DEFAULT_JPEG_QUALITY = 90


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def _to_jpeg_bytes(
    image: Image.Image,
    max_size: int | None = None,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """Re-encode a PIL image as RGB JPEG, optionally downscaled."""
    if max_size is not None and max(image.size) > max_size:
        ratio = max_size / max(image.size)
        new_size = (
            max(1, int(image.size[0] * ratio)),
            max(1, int(image.size[1] * ratio)),
        )
        logger.debug(f"Resizing image from {image.size} to {new_size}")
        image = image.resize(new_size, Image.Resampling.LANCZOS)

    # JPEG has no alpha channel; flatten onto white
    if image.mode in ("RGBA", "LA"):
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.getchannel("A"))
        image = background
    elif image.mode != "RGB":
        image = image.convert("RGB")

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def _needs_resize(data: bytes, max_size: int | None) -> bool:
    if max_size is None:
        return False
    with Image.open(io.BytesIO(data)) as image:
        return max(image.size) > max_size


def encode_image(
    source: ImageSource,
    max_size: int | None = None,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> ImagePayload:
    """
    Encode a captured image for transmission to a vision provider.

    Args:
        source: File path, raw image bytes, PIL image, or RGB numpy array
        max_size: Longest allowed side in pixels (None keeps the original size)
        quality: JPEG quality used when re-encoding

    Returns:
        ImagePayload holding base64 JPEG data

    Raises:
        FileNotFoundError: If a path does not exist
        PIL.UnidentifiedImageError: If the data is not a readable image
    """
    if isinstance(source, np.ndarray):
        return ImagePayload(_b64(_to_jpeg_bytes(Image.fromarray(source), max_size, quality)))

    if isinstance(source, Image.Image):
        return ImagePayload(_b64(_to_jpeg_bytes(source, max_size, quality)))

    if isinstance(source, (str, Path)):
        path = Path(source)
        data = path.read_bytes()
        is_jpeg = path.suffix.lower() in JPEG_SUFFIXES or data.startswith(JPEG_MAGIC)
    else:
        data = bytes(source)
        is_jpeg = data.startswith(JPEG_MAGIC)

    if is_jpeg and not _needs_resize(data, max_size):
        return ImagePayload(_b64(data), JPEG_MIME_TYPE)

    with Image.open(io.BytesIO(data)) as image:
        image.load()
        return ImagePayload(_b64(_to_jpeg_bytes(image, max_size, quality)))
