"""
Text sticker rendering.

Sticker sizes are designed for a 1080px short edge and scale with the
canvas by ``s = min(w, h) / 1080``. Text is a single line centered at
``(w / 2, 0.85 * h)`` with a soft drop shadow, always in the bold face
of the family. On a polaroid card the text sits lower, at ``0.92 * h``,
in a dark color and without shadow.
"""

import functools
import logging
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from momentos.api.raster import RasterImage
from momentos.api.state import AnyFrame, FontSpec, Sticker
from momentos.composite.utils import parse_color, source_over
from momentos.constants import (
    POLAROID_TEXT_COLOR,
    REFERENCE_RESOLUTION,
    SHADOW_BLUR,
    SHADOW_COLOR,
    SHADOW_OFFSET,
    STICKER_Y,
    STICKER_Y_POLAROID,
    FrameType,
)

logger = logging.getLogger(__name__)

FALLBACK_FONTS = {
    False: ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf"),
    True: ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf"),
}


def get_scale(width: int, height: int) -> float:
    """Resolution scale factor relative to a 1080px short edge."""
    return min(width, height) / REFERENCE_RESOLUTION


def _font_candidates(family: str, bold: bool):
    compact = family.replace(" ", "")
    style = "Bold" if bold else "Regular"
    yield "%s-%s.ttf" % (compact, style)
    yield "%s.ttf" % compact
    yield family
    for name in FALLBACK_FONTS[bold]:
        yield name


@functools.lru_cache(maxsize=32)
def _load_font(family: str, bold: bool, size: int):
    for name in _font_candidates(family, bold):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.warning("Font %r not found, using the default font" % family)
    return ImageFont.load_default(size=size)


def load_font(font: FontSpec, size: float, bold: Optional[bool] = None):
    """
    Load ``font`` at ``size`` pixels, falling back to Pillow's font.

    ``bold`` overrides the face picked from ``font.weight``.
    """
    if bold is None:
        bold = font.bold
    return _load_font(font.family, bold, max(1, int(round(size))))


def draw_text_mask(
    size: Tuple[int, int], text: str, font, center: Tuple[float, float]
) -> np.ndarray:
    """
    Rasterize ``text`` centered at ``center`` into a coverage map.

    Text running past the canvas is clipped.
    """
    image = Image.new("L", size, 0)
    draw = ImageDraw.Draw(image)
    if isinstance(font, ImageFont.FreeTypeFont):
        draw.text(center, text, fill=255, font=font, anchor="mm")
    else:
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        origin = (center[0] - (left + right) / 2.0, center[1] - (top + bottom) / 2.0)
        draw.text(origin, text, fill=255, font=font)
    return np.expand_dims(np.asarray(image, dtype=np.float32) / 255.0, 2)


def draw_shadow(mask: np.ndarray, blur: float, offset: float) -> np.ndarray:
    """Blur and offset a coverage map into a drop shadow map."""
    from skimage import filters  # type: ignore[import-untyped]

    height, width = mask.shape[:2]
    shift = int(round(offset))
    shadow = np.zeros_like(mask)
    if shift < height and shift < width:
        shadow[shift:, shift:] = mask[: height - shift, : width - shift]
    # A canvas shadow blur of b is a gaussian with sigma b / 2.
    sigma = blur / 2.0
    if sigma > 0:
        shadow = filters.gaussian(shadow, sigma=sigma, channel_axis=-1, preserve_range=True)
    return np.clip(shadow, 0.0, 1.0).astype(np.float32)


def draw_sticker(
    canvas: np.ndarray, sticker: Sticker, frame: Union[AnyFrame, FrameType]
) -> np.ndarray:
    """Draw ``sticker`` on a float RGBA canvas, returning a new canvas."""
    height, width = canvas.shape[:2]
    scale = get_scale(width, height)
    font = load_font(sticker.font, sticker.font.base_size * scale, bold=True)
    polaroid = FrameType(getattr(frame, "kind", frame)) is FrameType.POLAROID

    center = (width / 2.0, (STICKER_Y_POLAROID if polaroid else STICKER_Y) * height)
    mask = draw_text_mask((width, height), sticker.text, font, center)
    logger.debug(
        "Drawing sticker %s at %.1f,%.1f (scale %.3f)"
        % (sticker.name, center[0], center[1], scale)
    )

    result = canvas
    if polaroid:
        fill = parse_color(POLAROID_TEXT_COLOR)
    else:
        fill = parse_color(sticker.color)
        shadow = draw_shadow(mask, SHADOW_BLUR * scale, SHADOW_OFFSET * scale)
        result = source_over(result, SHADOW_COLOR[:3], shadow * SHADOW_COLOR[3])
    return source_over(result, fill, mask)


def apply(canvas: RasterImage, sticker: Union[Sticker, None], frame) -> RasterImage:
    """
    Draw ``sticker`` over ``canvas``; a copy of ``canvas`` if no sticker.
    """
    if sticker is None:
        return RasterImage(canvas.pixels)
    return RasterImage.fromarray(draw_sticker(canvas.numpy(), sticker, frame))
