"""
Composition pipeline.

A render runs five stages in order on a fresh canvas:

1. decode and validate the source
2. color filter, :py:mod:`momentos.composite.color`
3. frame, :py:mod:`momentos.composite.frames` (may suspend)
4. sticker, :py:mod:`momentos.composite.sticker`
5. JPEG encode

Each stage starts only after the previous one returned, including any
awaited decode, so the sticker always lands on top of a finished frame.

Every call to :py:meth:`CompositionPipeline.render` takes a new
generation number. A render whose generation is no longer the latest
when it resumes from a suspension, or when it is about to commit, raises
:py:exc:`~momentos.errors.StaleGeneration` and commits nothing. Stale
renders run to their next check rather than being cancelled.

Example::

    import asyncio

    from momentos.api.state import CompositionState
    from momentos.composite.pipeline import CompositionPipeline

    pipeline = CompositionPipeline()
    encoded = asyncio.run(pipeline.render(source_bytes, CompositionState()))
    open('out.jpg', 'wb').write(encoded.data)
"""

import logging
from typing import Optional, Union

from PIL import Image

from momentos.api import numpy_io, pil_io
from momentos.api.raster import EncodedImage, RasterImage
from momentos.api.state import CompositionState
from momentos.composite import color, frames, sticker
from momentos.composite.frames import Decoder
from momentos.constants import JPEG_QUALITY
from momentos.errors import DecodeError, StaleGeneration

logger = logging.getLogger(__name__)

Source = Union[bytes, RasterImage]


class CompositionPipeline(object):
    """
    Renders compositions and keeps the latest committed result.

    :param decoder: Coroutine function decoding image bytes into a
        :py:class:`~momentos.api.raster.RasterImage`. Defaults to a Pillow
        decode run outside the event loop.
    :param format: Encode target, only ``'JPEG'`` is supported.
    :param quality: Encode quality in (0, 1].

    .. py:attribute:: latest

        Last committed :py:class:`~momentos.api.raster.EncodedImage`, or None.
    """

    def __init__(
        self,
        decoder: Optional[Decoder] = None,
        format: str = "JPEG",
        quality: float = JPEG_QUALITY,
    ):
        self.decoder = decoder or RasterImage.frombytes_async
        self.format = format
        self.quality = quality
        self.latest: Optional[EncodedImage] = None
        self._generation = 0

    @property
    def generation(self) -> int:
        """Generation of the most recently requested render."""
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _check(self, generation: int, stage: str) -> None:
        if not self.is_current(generation):
            logger.debug(
                "Discarding generation %d at %s, latest is %d"
                % (generation, stage, self._generation)
            )
            raise StaleGeneration(generation, self._generation)

    async def _decode_source(self, source: Source) -> RasterImage:
        if isinstance(source, RasterImage):
            return source
        if isinstance(source, (bytes, bytearray)):
            return await self.decoder(bytes(source))
        raise DecodeError("Unsupported source type: %s" % type(source).__name__)

    async def _compose(
        self, source: Source, state: CompositionState, generation: int
    ) -> RasterImage:
        logger.debug("Generation %d: %r" % (generation, state))
        base = await self._decode_source(source)
        self._check(generation, "source")

        filtered = color.apply(base, state.filter)

        try:
            framed = await frames.apply(
                base, filtered, state.frame, state.filter, decoder=self.decoder
            )
        except DecodeError:
            self._check(generation, "frame")
            raise
        self._check(generation, "frame")

        return sticker.apply(framed, state.sticker, state.frame)

    def encode(self, image: RasterImage, generation: Optional[int] = None) -> EncodedImage:
        """Flatten ``image`` over black and encode it."""
        flat = numpy_io.to_uint8(numpy_io.flatten(image.numpy()))
        data = pil_io.encode(
            Image.fromarray(flat, "RGB"), format=self.format, quality=self.quality
        )
        return EncodedImage(
            data,
            image.width,
            image.height,
            format=self.format.upper(),
            quality=self.quality,
            generation=generation,
        )

    async def compose(self, source: Source, state: CompositionState) -> RasterImage:
        """
        Run stages 1-4 and return the unencoded composition.

        This counts as a render request: it supersedes pending renders.

        :raises ~momentos.errors.DecodeError: on an unreadable source or
            custom frame.
        :raises ~momentos.errors.StaleGeneration: when superseded.
        """
        generation = self._next_generation()
        return await self._compose(source, state, generation)

    async def render(self, source: Source, state: CompositionState) -> EncodedImage:
        """
        Render ``state`` over ``source`` and commit the result to
        :py:attr:`latest`.

        :raises ~momentos.errors.DecodeError: on an unreadable source or
            custom frame.
        :raises ~momentos.errors.EncodeError: when encoding fails.
        :raises ~momentos.errors.StaleGeneration: when superseded.
        """
        generation = self._next_generation()
        composed = await self._compose(source, state, generation)
        encoded = self.encode(composed, generation)
        self._check(generation, "commit")
        self.latest = encoded
        logger.debug("Committed generation %d (%d bytes)" % (generation, len(encoded)))
        return encoded
