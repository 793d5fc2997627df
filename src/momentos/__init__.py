"""
momentos: photo composition with filters, frames and text stickers.

The package turns a source photo and a small set of user choices into one
flattened JPEG.

Basic usage::

    import asyncio

    from momentos import CompositionPipeline, CompositionState
    from momentos.api.state import Frame, STICKERS
    from momentos.constants import Filter, FrameType

    state = CompositionState(
        filter=Filter.SEPIA,
        frame=Frame(FrameType.CINEMA),
        sticker=STICKERS['gratidao'],
    )
    encoded = asyncio.run(CompositionPipeline().render(photo_bytes, state))

Architecture:

- :py:mod:`momentos.api`: rasters, composition state, preferences and the
  editor session
- :py:mod:`momentos.composite`: filters, frames, stickers and the pipeline
"""

from momentos.api.raster import EncodedImage, RasterImage
from momentos.api.state import CompositionState
from momentos.composite.pipeline import CompositionPipeline
from momentos.version import __version__

__all__ = [
    "CompositionPipeline",
    "CompositionState",
    "EncodedImage",
    "RasterImage",
    "__version__",
]
