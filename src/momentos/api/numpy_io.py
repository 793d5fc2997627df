"""
Conversions between 8-bit pixel buffers and float canvases.

The composite engine works on ``float32`` arrays in [0, 1] with shape
``(height, width, channels)``; rasters store ``uint8`` RGBA.
"""
import logging

import numpy as np

logger = logging.getLogger(__name__)

EXPECTED_CHANNELS = 4


def as_rgba(array: np.ndarray) -> np.ndarray:
    """Return ``array`` as a ``uint8`` RGBA buffer."""
    array = np.asarray(array)
    if array.ndim == 2:
        array = np.expand_dims(array, 2)
    if array.ndim != 3:
        raise ValueError("Expected a 3-dimensional array, got %d" % array.ndim)
    if array.dtype != np.uint8:
        raise TypeError("Expected uint8 pixels, got %s" % array.dtype)

    channels = array.shape[2]
    if channels == 1:
        array = np.repeat(array, 3, axis=2)
    elif channels == 2:
        array = np.concatenate(
            (np.repeat(array[:, :, :1], 3, axis=2), array[:, :, 1:2]), axis=2
        )
    if array.shape[2] == 3:
        opaque = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
        array = np.concatenate((array, opaque), axis=2)
    elif array.shape[2] > EXPECTED_CHANNELS:
        logger.debug("Extra channel found")
        array = array[:, :, :EXPECTED_CHANNELS]
    return array


def to_float(pixels: np.ndarray) -> np.ndarray:
    """Convert ``uint8`` pixels to a fresh ``float32`` canvas."""
    return pixels.astype(np.float32) / 255.0


def to_uint8(array: np.ndarray) -> np.ndarray:
    """Quantize a float canvas to ``uint8`` with rounding."""
    return np.round(np.clip(array, 0.0, 1.0) * 255.0).astype(np.uint8)


def split(array: np.ndarray):
    """Split a float RGBA canvas into color and alpha views."""
    return array[:, :, :3], array[:, :, 3:4]


def merge(color: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    return np.concatenate((color, alpha), axis=2).astype(np.float32)


def flatten(array: np.ndarray, background=(0.0, 0.0, 0.0)) -> np.ndarray:
    """
    Flatten a float RGBA canvas over an opaque background.

    Transparent canvas areas end up as ``background``, the same way a
    browser canvas exports transparency to JPEG as black.
    """
    color, alpha = split(array)
    backdrop = np.asarray(background, dtype=np.float32).reshape((1, 1, 3))
    return color * alpha + backdrop * (1.0 - alpha)
