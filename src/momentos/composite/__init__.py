"""
Composite module for photo rendering.

Key modules:

- :py:mod:`momentos.composite.color`: color filter presets
- :py:mod:`momentos.composite.frames`: decorative frames
- :py:mod:`momentos.composite.sticker`: text stickers
- :py:mod:`momentos.composite.pipeline`: ordered render with stale result
  protection

The engine works on float32 NumPy arrays in [0, 1]; stages exchange
immutable :py:class:`~momentos.api.raster.RasterImage` values.
"""

from momentos.composite.pipeline import CompositionPipeline

__all__ = [
    "CompositionPipeline",
]
