"""
Color filters.

Every preset filter is an ordered chain of primitives following the CSS
filter functions. Primitives work on float RGB arrays in [0, 1] with shape
``(height, width, 3)`` and each one clamps its output before the next one
runs, so later primitives see the clamped result of earlier ones. Alpha is
carried through untouched.

Example::

    from momentos.composite import color
    from momentos.constants import Filter

    warm = color.apply(source, Filter.WARM)
"""

import logging
from typing import Union

import numpy as np

from momentos.api.raster import RasterImage
from momentos.composite.utils import clip, luma
from momentos.constants import Filter
from momentos.registry import new_registry

logger = logging.getLogger(__name__)

PRIMITIVES, register = new_registry(attribute="primitive")

# Rows produce R, G and B from the input RGB.
SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float32,
)

#: Filter presets as (primitive, argument) chains, applied in order.
FILTER_CHAINS = {
    Filter.NONE: (),
    Filter.VIVID: (("contrast", 1.2), ("saturate", 1.2)),
    Filter.WARM: (("sepia", 0.3), ("hue-rotate", -10.0), ("saturate", 1.2)),
    Filter.COOL: (("hue-rotate", 10.0), ("brightness", 1.1)),
    Filter.SEPIA: (("sepia", 1.0),),
    Filter.GRAYSCALE: (("grayscale", 1.0),),
    Filter.VINTAGE: (("sepia", 0.5), ("contrast", 1.1), ("brightness", 0.9)),
}


@register("contrast")
def contrast(rgb, k):
    return clip((rgb - 0.5) * k + 0.5)


@register("brightness")
def brightness(rgb, k):
    return clip(rgb * k)


@register("saturate")
def saturate(rgb, k):
    L = luma(rgb)
    return clip(L + (rgb - L) * k)


@register("sepia")
def sepia(rgb, k):
    k = min(max(k, 0.0), 1.0)
    toned = np.einsum("hwc,rc->hwr", rgb, SEPIA_MATRIX)
    return clip(rgb + (toned - rgb) * k)


@register("grayscale")
def grayscale(rgb, k):
    k = min(max(k, 0.0), 1.0)
    return clip(rgb + (luma(rgb) - rgb) * k)


@register("hue-rotate")
def hue_rotate(rgb, degrees):
    """
    Rotate hue in HSL space, keeping saturation and lightness.
    """
    h, s, l = rgb_to_hsl(rgb)
    return clip(hsl_to_rgb((h + degrees) % 360.0, s, l))


def rgb_to_hsl(rgb):
    """
    Convert RGB to HSL.

    Hue is in degrees [0, 360), saturation and lightness in [0, 1]. Each
    component keeps a trailing channel axis of size 1.
    """
    R, G, B = rgb[:, :, 0:1], rgb[:, :, 1:2], rgb[:, :, 2:3]
    C_max = np.max(rgb, axis=2, keepdims=True)
    C_min = np.min(rgb, axis=2, keepdims=True)
    delta = C_max - C_min
    lightness = (C_max + C_min) / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)
    hue = np.select(
        [C_max == R, C_max == G],
        [((G - B) / safe_delta) % 6.0, (B - R) / safe_delta + 2.0],
        (R - G) / safe_delta + 4.0,
    )
    hue = np.where(chromatic, hue * 60.0, 0.0)

    denominator = 1.0 - np.abs(2.0 * lightness - 1.0)
    saturation = np.where(
        chromatic & (denominator > 0),
        delta / np.where(denominator > 0, denominator, 1.0),
        0.0,
    )
    return hue, saturation, lightness


def hsl_to_rgb(hue, saturation, lightness):
    """Inverse of :py:func:`rgb_to_hsl`."""
    a = saturation * np.minimum(lightness, 1.0 - lightness)

    def f(n):
        k = (n + hue / 30.0) % 12.0
        return lightness - a * np.clip(np.minimum(k - 3.0, 9.0 - k), -1.0, 1.0)

    return np.concatenate((f(0.0), f(8.0), f(4.0)), axis=2).astype(np.float32)


def apply_array(array: np.ndarray, filter: Union[Filter, str, None]) -> np.ndarray:
    """
    Apply ``filter`` to a float RGBA canvas, returning a new canvas.
    """
    filter = Filter.get(filter)
    rgb = array[:, :, :3].astype(np.float32)
    for name, argument in FILTER_CHAINS[filter]:
        rgb = PRIMITIVES[name](rgb, argument).astype(np.float32)
    return np.concatenate((rgb, array[:, :, 3:4]), axis=2).astype(np.float32)


def apply(src: RasterImage, filter: Union[Filter, str, None]) -> RasterImage:
    """
    Apply ``filter`` to ``src``.

    Unknown filter names fall back to :py:attr:`~momentos.constants.Filter.NONE`,
    which returns an unaliased pixel-identical copy of ``src``.
    """
    resolved = Filter.get(filter)
    if resolved is Filter.NONE:
        if filter is not None and filter not in (Filter.NONE, Filter.NONE.value):
            logger.warning("Unknown filter %r, using none" % (filter,))
        return RasterImage(src.pixels)
    logger.debug("Applying filter %s" % resolved.value)
    return RasterImage.fromarray(apply_array(src.numpy(), resolved))
