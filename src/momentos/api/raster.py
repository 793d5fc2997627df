"""
Raster image and encoded image value types.
"""
import logging
from typing import Any, Optional

import numpy as np
from attrs import define, field
from PIL import Image

from momentos.api import numpy_io, pil_io
from momentos.constants import JPEG_QUALITY

logger = logging.getLogger(__name__)


def _freeze(array: Any) -> np.ndarray:
    pixels = np.array(numpy_io.as_rgba(array), copy=True)
    pixels.flags.writeable = False
    return pixels


@define(frozen=True, eq=False, repr=False)
class RasterImage:
    """
    Immutable RGBA8 pixel buffer.

    The pixel array is copied on construction and flagged read-only, so a
    raster never aliases the buffer it was built from and cannot be
    mutated afterwards. Stages that need to draw take a float copy with
    :py:meth:`numpy`.

    Example::

        from momentos.api.raster import RasterImage

        source = RasterImage.frombytes(open('photo.jpg', 'rb').read())
        print(source.width, source.height)
    """

    pixels: np.ndarray = field(converter=_freeze)

    @pixels.validator
    def _validate_pixels(self, attribute: Any, value: np.ndarray) -> None:
        if value.shape[0] < 1 or value.shape[1] < 1:
            raise ValueError("Raster must be at least 1x1: %r" % (value.shape,))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self):
        """(width, height) tuple."""
        return self.width, self.height

    @classmethod
    def frombytes(cls, data: bytes) -> "RasterImage":
        """Decode encoded image bytes (PNG, JPEG, ...).

        :raises ~momentos.errors.DecodeError: on unreadable data.
        """
        return cls.frompil(pil_io.decode(data))

    @classmethod
    async def frombytes_async(cls, data: bytes) -> "RasterImage":
        return cls.frompil(await pil_io.decode_async(data))

    @classmethod
    def frompil(cls, image: Image.Image) -> "RasterImage":
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.asarray(image))

    @classmethod
    def fromarray(cls, array: np.ndarray) -> "RasterImage":
        """Quantize a float RGBA canvas in [0, 1] into a raster."""
        return cls(numpy_io.to_uint8(array))

    @classmethod
    def new(cls, size, color=(0, 0, 0, 255)) -> "RasterImage":
        """Create a raster of ``size`` (width, height) filled with ``color``."""
        width, height = size
        return cls(np.full((height, width, 4), color, dtype=np.uint8))

    def numpy(self) -> np.ndarray:
        """Return a fresh float32 RGBA canvas in [0, 1]."""
        return numpy_io.to_float(self.pixels)

    def topil(self) -> Image.Image:
        return Image.fromarray(np.array(self.pixels), "RGBA")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return bool(np.array_equal(self.pixels, other.pixels))

    def __hash__(self) -> int:
        return hash((self.pixels.shape, self.pixels.tobytes()))

    def __repr__(self) -> str:
        return "%s(size=%dx%d)" % (self.__class__.__name__, self.width, self.height)


@define(frozen=True)
class EncodedImage:
    """
    Final encoded composition, owned by the caller.

    .. py:attribute:: data

        Encoded bytes.

    .. py:attribute:: generation

        Render generation that produced the image.
    """

    data: bytes = field(repr=False)
    width: int
    height: int
    format: str = "JPEG"
    quality: float = JPEG_QUALITY
    generation: Optional[int] = None

    @property
    def mimetype(self) -> str:
        return "image/%s" % self.format.lower()

    def __len__(self) -> int:
        return len(self.data)
