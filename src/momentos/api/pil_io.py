"""
PIL IO module.

Decoding of user supplied images and encoding of the final composition.
"""
import asyncio
import io
import logging
from PIL import Image, ImageOps, UnidentifiedImageError

from momentos.constants import JPEG_QUALITY
from momentos.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

#: Formats the terminal stage can produce.
ENCODE_FORMATS = ('JPEG',)


def decode(data: bytes) -> Image.Image:
    """
    Decode image bytes into an RGBA PIL image.

    EXIF orientation is applied so camera shots come out upright.

    :raises DecodeError: when the bytes are not a readable image, or when
        the image exceeds Pillow's decompression bomb limit.
    """
    if not data:
        raise DecodeError("Empty image data")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            image = ImageOps.exif_transpose(image)
            if image.mode != 'RGBA':
                image = image.convert('RGBA')
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        raise DecodeError("Failed to decode image: %s" % e) from e
    logger.debug("Decoded %dx%d image" % image.size)
    return image


async def decode_async(data: bytes) -> Image.Image:
    """Decode off the event loop so other work keeps running."""
    return await asyncio.to_thread(decode, data)


def get_pil_quality(quality: float) -> int:
    """Convert a [0, 1] quality into Pillow's JPEG quality scale."""
    if not 0.0 < quality <= 1.0:
        raise EncodeError("Quality must be in (0, 1]: %r" % quality)
    return max(1, min(95, int(round(quality * 100))))


def encode(
    image: Image.Image, format: str = 'JPEG', quality: float = JPEG_QUALITY
) -> bytes:
    """
    Encode an RGB PIL image.

    :raises EncodeError: on an unsupported format or a writer failure.
    """
    format = format.upper()
    if format == 'JPG':
        format = 'JPEG'
    if format not in ENCODE_FORMATS:
        raise EncodeError("Unsupported encode target: %s" % format)
    if image.mode != 'RGB':
        image = image.convert('RGB')

    buffer = io.BytesIO()
    try:
        image.save(buffer, format=format, quality=get_pil_quality(quality))
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError("Failed to encode %s: %s" % (format, e)) from e
    data = buffer.getvalue()
    logger.debug("Encoded %s: %d bytes" % (format, len(data)))
    return data

