import asyncio
import io
import logging
import struct
import zlib

import numpy as np
from PIL import Image

from momentos.api.raster import RasterImage

logging.basicConfig(level=logging.DEBUG)


def solid(width, height, color=(10, 200, 30, 255)):
    return RasterImage.new((width, height), color)


def gradient(width, height):
    """Raster with distinct, deterministic pixels."""
    Y, X = np.mgrid[0:height, 0:width]
    pixels = np.stack(
        [
            (X * 255 // max(1, width - 1)),
            (Y * 255 // max(1, height - 1)),
            ((X + Y) * 7 % 256),
            np.full_like(X, 255),
        ],
        axis=2,
    ).astype(np.uint8)
    return RasterImage(pixels)


def to_png(raster):
    buffer = io.BytesIO()
    raster.topil().save(buffer, format="PNG")
    return buffer.getvalue()


def _png_chunk(kind, payload):
    crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)


def oversized_png(width=30000, height=30000):
    """PNG whose header claims a size past Pillow's decompression bomb limit."""
    header = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b"\x00"))
        + _png_chunk(b"IEND", b"")
    )


def open_jpeg(data):
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


class SlowDecoder(object):
    """Decoder that waits for :py:meth:`release` before finishing."""

    def __init__(self, error=None):
        self.error = error
        self.calls = 0
        self._started = None
        self._release = None

    def _events(self):
        if self._started is None:
            self._started = asyncio.Event()
            self._release = asyncio.Event()
        return self._started, self._release

    async def wait_started(self):
        started, _ = self._events()
        await started.wait()

    def release(self):
        self._events()[1].set()

    async def __call__(self, data):
        started, release = self._events()
        self.calls += 1
        started.set()
        await release.wait()
        if self.error is not None:
            raise self.error
        return RasterImage.frombytes(data)
