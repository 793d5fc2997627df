"""Utility functions for composite operations."""

from typing import Tuple, Union, overload

import numpy as np
from numpy.typing import NDArray
from PIL import ImageColor

#: Rec. 601 luma weights.
LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def clip(x: NDArray[np.floating]) -> NDArray[np.floating]:
    """Clip between [0, 1]."""
    return np.clip(x, 0.0, 1.0)


def luma(rgb: NDArray[np.floating]) -> NDArray[np.floating]:
    """Per-pixel luma with a trailing channel axis of size 1."""
    return np.sum(rgb * LUMA, axis=2, keepdims=True, dtype=np.float32)


@overload
def union(backdrop: float, source: float) -> float: ...


@overload
def union(
    backdrop: NDArray[np.floating], source: NDArray[np.floating]
) -> NDArray[np.floating]: ...


@overload
def union(backdrop: float, source: NDArray[np.floating]) -> NDArray[np.floating]: ...


@overload
def union(backdrop: NDArray[np.floating], source: float) -> NDArray[np.floating]: ...


def union(
    backdrop: Union[float, NDArray[np.floating]],
    source: Union[float, NDArray[np.floating]],
) -> Union[float, NDArray[np.floating]]:
    """Generalized union of shape."""
    return backdrop + source - (backdrop * source)


def source_over(
    canvas: NDArray[np.floating],
    color: Union[NDArray[np.floating], Tuple[float, ...]],
    alpha: Union[float, NDArray[np.floating]],
) -> NDArray[np.floating]:
    """
    Paint ``color`` with coverage ``alpha`` over an RGBA ``canvas``.

    Returns a new canvas; ``canvas`` is not modified.
    """
    Cb, Ab = canvas[:, :, :3], canvas[:, :, 3:4]
    Cs = np.asarray(color, dtype=np.float32)
    As = np.asarray(alpha, dtype=np.float32)
    Ar = union(Ab, As)
    with np.errstate(divide="ignore", invalid="ignore"):
        Cr = np.where(Ar > 0, (Cs * As + Cb * Ab * (1.0 - As)) / Ar, 0.0)
    return np.concatenate((clip(Cr), clip(Ar)), axis=2).astype(np.float32)


def parse_color(value: str) -> Tuple[float, float, float]:
    """Parse a CSS color into normalized RGB."""
    rgb = ImageColor.getrgb(value)[:3]
    return tuple(c / 255.0 for c in rgb)  # type: ignore[return-value]


def rect(
    left: float, top: float, right: float, bottom: float
) -> Tuple[int, int, int, int]:
    """Snap a float rectangle to integer pixel edges."""
    return (
        int(round(left)),
        int(round(top)),
        int(round(right)),
        int(round(bottom)),
    )


def resize(array: NDArray[np.floating], height: int, width: int) -> NDArray[np.floating]:
    """Resample a float canvas to ``(height, width)`` ignoring aspect ratio."""
    from skimage.transform import resize as _resize

    if array.shape[:2] == (height, width):
        return array.copy()
    resized = _resize(
        array,
        (height, width, array.shape[2]),
        order=1,
        mode="edge",
        anti_aliasing=height < array.shape[0] or width < array.shape[1],
        preserve_range=True,
    )
    return clip(resized).astype(np.float32)
