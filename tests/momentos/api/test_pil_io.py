import logging

import pytest
from PIL import Image

from momentos.api import pil_io
from momentos.errors import DecodeError, EncodeError

from ..utils import gradient, open_jpeg, oversized_png, to_png

logger = logging.getLogger(__name__)


def test_decode_converts_to_rgba():
    image = pil_io.decode(to_png(gradient(6, 4)))
    assert image.mode == "RGBA"
    assert image.size == (6, 4)


def test_decode_error_chains_cause():
    with pytest.raises(DecodeError) as excinfo:
        pil_io.decode(b"garbage")
    assert excinfo.value.__cause__ is not None


def test_decode_rejects_decompression_bomb():
    with pytest.raises(DecodeError) as excinfo:
        pil_io.decode(oversized_png())
    assert isinstance(excinfo.value.__cause__, Image.DecompressionBombError)


def test_encode_jpeg():
    data = pil_io.encode(Image.new("RGB", (8, 6), (255, 0, 0)), quality=0.95)
    assert data[:2] == b"\xff\xd8"
    image = open_jpeg(data)
    assert image.format == "JPEG"
    assert image.size == (8, 6)


def test_encode_drops_alpha():
    data = pil_io.encode(Image.new("RGBA", (4, 4), (0, 0, 255, 128)))
    assert open_jpeg(data).mode == "RGB"


@pytest.mark.parametrize("format", ["PNG", "webp", "nope"])
def test_encode_unsupported(format):
    with pytest.raises(EncodeError):
        pil_io.encode(Image.new("RGB", (4, 4)), format=format)


@pytest.mark.parametrize(
    "quality, expected", [(0.9, 90), (0.95, 95), (1.0, 95), (0.001, 1)]
)
def test_get_pil_quality(quality, expected):
    assert pil_io.get_pil_quality(quality) == expected


@pytest.mark.parametrize("quality", [0.0, -1.0, 1.5])
def test_get_pil_quality_error(quality):
    with pytest.raises(EncodeError):
        pil_io.get_pil_quality(quality)


def test_decode_async():
    import asyncio

    image = asyncio.run(pil_io.decode_async(to_png(gradient(3, 3))))
    assert image.size == (3, 3)
