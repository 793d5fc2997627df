"""
Decorative frames.

Parameterless frames are pure functions of the canvas size and the
filtered pixels, registered in :py:data:`FRAMES` by
:py:class:`~momentos.constants.FrameType`. The custom frame decodes a user
image first, so the public entry point :py:func:`apply` is a coroutine for
every kind; it only suspends for custom frames given as encoded bytes.

Geometry is relative to the canvas width ``w`` and height ``h``:

- white border: ``0.05 * min(w, h)`` thick, flush with the edges
- polaroid: ``#f8f9fa`` card, image inset by ``0.05 * min(w, h)`` with a
  ``0.2 * min(w, h)`` bottom margin
- cinema: black bars of ``0.1 * h`` at top and bottom
- vignette: radial gradient from ``min(w, h) / 3`` (clear) to
  ``max(w, h) / 1.2`` (70% black)
"""

import logging
from typing import Awaitable, Callable, Optional, Union

import numpy as np

from momentos.api.raster import RasterImage
from momentos.api.state import AnyFrame, CustomFrame
from momentos.composite import color
from momentos.composite.utils import parse_color, rect, resize, source_over
from momentos.constants import (
    BORDER_RATIO,
    CINEMA_BAR_RATIO,
    POLAROID_BACKGROUND,
    POLAROID_BOTTOM_PADDING,
    POLAROID_PADDING,
    VIGNETTE_OPACITY,
    Filter,
    FrameType,
)
from momentos.registry import new_registry

logger = logging.getLogger(__name__)

FRAMES, register = new_registry(attribute="frame_kind")

Decoder = Callable[[bytes], Awaitable[RasterImage]]

WHITE = (1.0, 1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0, 1.0)


@register(FrameType.NONE)
def draw_none(canvas, base, filter):
    return canvas.copy()


@register(FrameType.WHITE_BORDER)
def draw_white_border(canvas, base, filter):
    height, width = canvas.shape[:2]
    thickness = int(round(BORDER_RATIO * min(width, height)))
    result = canvas.copy()
    if thickness <= 0:
        return result
    result[:thickness, :] = WHITE
    result[height - thickness :, :] = WHITE
    result[:, :thickness] = WHITE
    result[:, width - thickness :] = WHITE
    return result


@register(FrameType.POLAROID)
def draw_polaroid(canvas, base, filter):
    """
    Draw the polaroid card.

    The photo is redrawn from the unfiltered ``base`` into the inner
    rectangle and filtered at that size, instead of shrinking the already
    filtered canvas.
    """
    height, width = canvas.shape[:2]
    short = min(width, height)
    padding = POLAROID_PADDING * short
    bottom_padding = POLAROID_BOTTOM_PADDING * short

    result = np.empty_like(canvas)
    result[:, :, :3] = parse_color(POLAROID_BACKGROUND)
    result[:, :, 3] = 1.0

    left, top, right, bottom = rect(
        padding, padding, width - padding, height - bottom_padding
    )
    if right <= left or bottom <= top:
        logger.debug("Canvas too small for the polaroid photo")
        return result

    photo = resize(base, bottom - top, right - left)
    photo = color.apply_array(photo, filter)
    result[top:bottom, left:right] = source_over(
        result[top:bottom, left:right], photo[:, :, :3], photo[:, :, 3:4]
    )
    return result


@register(FrameType.CINEMA)
def draw_cinema(canvas, base, filter):
    height = canvas.shape[0]
    bar = int(round(CINEMA_BAR_RATIO * height))
    result = canvas.copy()
    if bar <= 0:
        return result
    result[:bar, :] = BLACK
    result[height - bar :, :] = BLACK
    return result


@register(FrameType.VIGNETTE)
def draw_vignette(canvas, base, filter):
    height, width = canvas.shape[:2]
    mask = make_vignette_mask(width, height)
    return source_over(canvas, (0.0, 0.0, 0.0), mask)


def make_vignette_mask(width: int, height: int) -> np.ndarray:
    """
    Opacity map of the vignette with shape ``(height, width, 1)``.
    """
    from scipy import interpolate  # type: ignore[import-untyped]

    inner = min(width, height) / 3.0
    outer = max(width, height) / 1.2
    X, Y = np.meshgrid(
        np.arange(width, dtype=np.float32) + 0.5 - width / 2.0,
        np.arange(height, dtype=np.float32) + 0.5 - height / 2.0,
    )
    Z = (np.sqrt(np.power(X, 2) + np.power(Y, 2)) - inner) / (outer - inner)
    Ga = interpolate.interp1d(
        [0.0, 1.0],
        [0.0, VIGNETTE_OPACITY],
        bounds_error=False,
        fill_value=(0.0, VIGNETTE_OPACITY),
    )
    return np.expand_dims(Ga(Z), 2).astype(np.float32)


def draw_custom(canvas: np.ndarray, overlay: np.ndarray) -> np.ndarray:
    """
    Stretch ``overlay`` to the canvas size and paint it on top.

    Resampling works on premultiplied color so fully transparent pixels
    do not bleed into their neighbors.
    """
    height, width = canvas.shape[:2]
    alpha = overlay[:, :, 3:4]
    premultiplied = np.concatenate([overlay[:, :, :3] * alpha, alpha], axis=2)
    stretched = resize(premultiplied, height, width)
    alpha = stretched[:, :, 3:4]
    rgb = np.divide(
        stretched[:, :, :3],
        alpha,
        out=np.zeros_like(stretched[:, :, :3]),
        where=alpha > 0,
    )
    return source_over(canvas, np.clip(rgb, 0.0, 1.0), alpha)


def draw_frame(
    canvas: np.ndarray,
    frame: Union[AnyFrame, FrameType],
    base: Optional[np.ndarray] = None,
    filter: Union[Filter, str, None] = Filter.NONE,
) -> np.ndarray:
    """
    Draw a parameterless frame on a float RGBA canvas.

    :param canvas: Filtered canvas, not modified.
    :param frame: Frame or frame kind.
    :param base: Unfiltered source canvas, needed by the polaroid frame.
    :param filter: Filter to apply to redrawn photos.
    :return: New canvas.
    """
    kind = FrameType(getattr(frame, "kind", frame))
    if kind is FrameType.CUSTOM:
        raise ValueError("Custom frames are drawn by apply()")
    if kind is FrameType.POLAROID and base is None:
        raise ValueError("Polaroid frame requires the base image")
    logger.debug("Drawing frame %s" % kind.value)
    return FRAMES[kind](canvas, base, Filter.get(filter))


async def load_custom_frame(
    frame: CustomFrame, decoder: Optional[Decoder] = None
) -> RasterImage:
    """
    Return the decoded custom frame image.

    :raises ~momentos.errors.DecodeError: when the image cannot be decoded.
    """
    if isinstance(frame.image, RasterImage):
        return frame.image
    decoder = decoder or RasterImage.frombytes_async
    logger.debug("Decoding custom frame (%d bytes)" % len(frame.image))
    return await decoder(frame.image)


async def apply(
    base: RasterImage,
    filtered: RasterImage,
    frame: AnyFrame,
    filter: Union[Filter, str, None] = Filter.NONE,
    decoder: Optional[Decoder] = None,
) -> RasterImage:
    """
    Draw ``frame`` over the ``filtered`` image.

    Resolves without suspending for every frame except a custom frame
    given as encoded bytes, which awaits ``decoder``.
    """
    if isinstance(frame, CustomFrame):
        overlay = await load_custom_frame(frame, decoder)
        return RasterImage.fromarray(draw_custom(filtered.numpy(), overlay.numpy()))

    if frame.kind is FrameType.NONE:
        return RasterImage(filtered.pixels)
    result = draw_frame(
        filtered.numpy(),
        frame,
        base=base.numpy() if frame.kind is FrameType.POLAROID else None,
        filter=filter,
    )
    return RasterImage.fromarray(result)
