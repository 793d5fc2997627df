import asyncio
import logging

import numpy as np
import pytest

from momentos.api.raster import RasterImage
from momentos.api.state import CustomFrame, Frame
from momentos.composite import color, frames
from momentos.constants import Filter, FrameType
from momentos.errors import DecodeError

from ..utils import SlowDecoder, gradient, solid, to_png

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
CARD = (0xF8, 0xF9, 0xFA, 255)


def _apply(base, frame, filter=Filter.NONE, filtered=None, **kwargs):
    if filtered is None:
        filtered = color.apply(base, filter)
    return asyncio.run(frames.apply(base, filtered, frame, filter, **kwargs))


def test_frame_registry():
    assert set(frames.FRAMES) == set(FrameType) - {FrameType.CUSTOM}
    assert frames.FRAMES[FrameType.CINEMA].frame_kind is FrameType.CINEMA


def test_none_frame():
    source = gradient(30, 20)
    assert _apply(source, Frame(FrameType.NONE)) == source


def test_white_border():
    source = gradient(1000, 1000)
    result = _apply(source, Frame(FrameType.WHITE_BORDER)).pixels

    for edge in (
        result[:50, :],
        result[-50:, :],
        result[:, :50],
        result[:, -50:],
    ):
        assert np.all(edge == WHITE)
    np.testing.assert_array_equal(result[50:950, 50:950], source.pixels[50:950, 50:950])


def test_white_border_uses_short_edge():
    result = _apply(solid(400, 200), Frame(FrameType.WHITE_BORDER)).pixels
    assert np.all(result[:10, :] == WHITE)
    assert np.all(result[:, :10] == WHITE)
    assert not np.any(np.all(result[10:190, 10:390] == WHITE, axis=2))


def test_polaroid():
    source = solid(1000, 1000, (10, 200, 30, 255))
    result = _apply(source, Frame(FrameType.POLAROID)).pixels

    for x, y in [(5, 5), (49, 49), (500, 30), (950, 500), (980, 10), (500, 800), (500, 990)]:
        assert tuple(result[y, x]) == CARD, (x, y)
    for x, y in [(50, 50), (949, 50), (500, 400), (50, 799), (949, 799)]:
        assert tuple(result[y, x]) == (10, 200, 30, 255), (x, y)


def test_polaroid_refilters_inner_photo():
    source = solid(200, 100, (200, 100, 50, 255))
    # Filtered canvas passed in is ignored for the card, the photo is redrawn.
    result = _apply(
        source,
        Frame(FrameType.POLAROID),
        Filter.GRAYSCALE,
        filtered=solid(200, 100, (255, 0, 0, 255)),
    ).pixels
    expected = color.apply(solid(1, 1, (200, 100, 50, 255)), Filter.GRAYSCALE).pixels[0, 0]
    # padding 5, bottom padding 20
    assert tuple(result[2, 2]) == CARD
    assert tuple(result[85, 100]) == CARD
    np.testing.assert_allclose(result[50, 100], expected, atol=1)


def test_cinema():
    source = solid(1920, 1080, (120, 130, 140, 255))
    result = _apply(source, Frame(FrameType.CINEMA)).pixels
    assert np.all(result[:108] == BLACK)
    assert np.all(result[-108:] == BLACK)
    assert np.all(result[108:972] == (120, 130, 140, 255))


def test_vignette():
    source = solid(1000, 1000, (255, 255, 255, 255))
    result = _apply(source, Frame(FrameType.VIGNETTE)).pixels.astype(int)
    # Inside the inner radius the image is untouched.
    assert tuple(result[500, 500]) == (255, 255, 255, 255)
    assert tuple(result[500, 200]) == (255, 255, 255, 255)
    # Darker towards the corners, but never more than 70% black.
    assert result[0, 0, 0] < result[500, 20, 0] < 255
    assert result[0, 0, 0] >= int(255 * 0.3) - 1
    assert np.all(result[:, :, 3] == 255)


def test_vignette_mask():
    mask = frames.make_vignette_mask(1200, 300)
    assert mask.shape == (300, 1200, 1)
    assert mask.min() == 0.0
    assert mask.max() <= 0.7 + 1e-6
    np.testing.assert_allclose(mask[:, :, 0], mask[:, ::-1, 0], atol=1e-6)


@pytest.mark.parametrize(
    "kind",
    [FrameType.NONE, FrameType.WHITE_BORDER, FrameType.POLAROID, FrameType.CINEMA, FrameType.VIGNETTE],
)
def test_frames_are_deterministic(kind):
    source = gradient(64, 48)
    first = _apply(source, Frame(kind), Filter.WARM)
    second = _apply(source, Frame(kind), Filter.WARM)
    assert first == second


def test_draw_frame_checks_arguments():
    canvas = gradient(8, 8).numpy()
    with pytest.raises(ValueError):
        frames.draw_frame(canvas, FrameType.CUSTOM)
    with pytest.raises(ValueError):
        frames.draw_frame(canvas, FrameType.POLAROID)
    frames.draw_frame(canvas, FrameType.CINEMA)
    np.testing.assert_array_equal(canvas, gradient(8, 8).numpy())


def test_custom_frame_is_stretched():
    overlay = np.zeros((2, 4, 4), dtype=np.uint8)
    overlay[:, :2] = (255, 0, 0, 255)
    source = solid(100, 60, (0, 0, 255, 255))
    result = _apply(source, CustomFrame(RasterImage(overlay))).pixels
    assert tuple(result[30, 10]) == (255, 0, 0, 255)
    assert tuple(result[30, 90]) == (0, 0, 255, 255)
    assert result.shape == (60, 100, 4)


def test_custom_frame_alpha_blends():
    overlay = solid(10, 10, (255, 255, 255, 128))
    source = solid(20, 20, (0, 0, 0, 255))
    result = _apply(source, CustomFrame(to_png(overlay))).pixels
    assert abs(int(result[10, 10, 0]) - 128) <= 1
    assert result[10, 10, 3] == 255


def test_custom_frame_transparent_edge_has_no_halo():
    overlay = np.array([[[1.0, 1.0, 1.0, 1.0], [0.0, 0.0, 0.0, 0.0]]], dtype=np.float32)
    canvas = np.zeros((1, 3, 4), dtype=np.float32)
    canvas[:, :] = (1.0, 0.0, 0.0, 1.0)
    result = frames.draw_custom(canvas, overlay)
    np.testing.assert_allclose(result[0, 0], (1.0, 1.0, 1.0, 1.0), atol=1e-4)
    np.testing.assert_allclose(result[0, 1], (1.0, 0.5, 0.5, 1.0), atol=1e-4)
    np.testing.assert_allclose(result[0, 2], (1.0, 0.0, 0.0, 1.0), atol=1e-4)


def test_custom_frame_waits_for_decoder():
    async def scenario():
        decoder = SlowDecoder()
        source = solid(10, 10)
        task = asyncio.ensure_future(
            frames.apply(source, source, CustomFrame(to_png(solid(5, 5, WHITE))), decoder=decoder)
        )
        await decoder.wait_started()
        assert not task.done()
        decoder.release()
        result = await task
        assert np.all(result.pixels == WHITE)

    asyncio.run(scenario())


def test_custom_frame_decode_error():
    source = solid(10, 10)
    with pytest.raises(DecodeError):
        _apply(source, CustomFrame(b"not an image"))
