"""
Editor session.

Holds the source photo and the current composition state of one editing
session, and connects renders to the pinned-frame preference and to the
photo store and export collaborators.
"""

import logging
import time
from typing import Callable, Optional, Union

from momentos.api.preferences import MemoryPreferenceStore, PinnedFrame, initial_state
from momentos.api.protocols import Exporter, PhotoStore, PreferenceStore, SavedPhoto
from momentos.api.raster import EncodedImage, RasterImage
from momentos.api.state import CompositionState, CustomFrame, Frame, Sticker, get_sticker
from momentos.composite.pipeline import CompositionPipeline, Source
from momentos.constants import (
    SAVE_FILENAME,
    SHARE_FILENAME,
    AspectRatio,
    Filter,
    FrameType,
)
from momentos.errors import StaleGeneration

logger = logging.getLogger(__name__)


class EditorSession(object):
    """
    Editing session for one photo.

    The initial frame is seeded from the pinned default frame in ``prefs``.

    Example::

        session = EditorSession(photo_bytes, prefs=JSONPreferenceStore(path))
        session.select_filter(Filter.WARM)
        preview = await session.refresh()
        filename = await session.save(gallery, exporter=downloads)
    """

    def __init__(
        self,
        source: Source,
        prefs: Optional[PreferenceStore] = None,
        aspect_ratio: Union[str, AspectRatio] = AspectRatio.PORTRAIT,
        pipeline: Optional[CompositionPipeline] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.source = source
        self.prefs = prefs if prefs is not None else MemoryPreferenceStore()
        self.pinned = PinnedFrame(self.prefs)
        self.aspect_ratio = AspectRatio(aspect_ratio)
        self.pipeline = pipeline or CompositionPipeline()
        self.state = initial_state(self.prefs)
        self._clock = clock

    def select_filter(self, filter: Union[Filter, str]) -> CompositionState:
        self.state = self.state.evolve(filter=filter)
        return self.state

    def select_frame(self, frame: Union[FrameType, str]) -> CompositionState:
        """
        Select a parameterless frame.

        Custom frames are selected by :py:meth:`set_custom_frame`.
        """
        kind = FrameType(frame)
        if kind is FrameType.CUSTOM:
            raise ValueError("Use set_custom_frame() to select a custom frame")
        self.state = self.state.evolve(frame=Frame(kind))
        return self.state

    def set_custom_frame(self, image: Union[bytes, RasterImage]) -> CompositionState:
        """Load a user frame image and select it."""
        self.state = self.state.evolve(frame=CustomFrame(image))
        return self.state

    def select_sticker(self, sticker: Union[Sticker, str, None]) -> CompositionState:
        if not isinstance(sticker, Sticker):
            sticker = get_sticker(sticker)
        self.state = self.state.evolve(sticker=sticker)
        return self.state

    @property
    def is_pinned(self) -> bool:
        """Whether the selected frame is the pinned default."""
        return self.pinned.is_pinned(self.state.frame)

    def toggle_pin(self) -> Optional[FrameType]:
        """
        Pin or unpin the selected frame.

        :raises ~momentos.errors.InvalidPinTarget: when a custom frame is
            selected; the preference is left unchanged.
        """
        return self.pinned.toggle(self.state.frame)

    async def refresh(self) -> Optional[EncodedImage]:
        """
        Render the current state.

        Returns None when a newer render superseded this one.
        """
        try:
            return await self.pipeline.render(self.source, self.state)
        except StaleGeneration as e:
            logger.debug(str(e))
            return None

    async def _final(self) -> EncodedImage:
        while True:
            encoded = await self.refresh()
            if encoded is not None:
                return encoded

    async def save(
        self, store: PhotoStore, exporter: Optional[Exporter] = None
    ) -> str:
        """
        Render the current state, save it and optionally download it.

        Returns the suggested file name.
        """
        encoded = await self._final()
        timestamp = int(self._clock() * 1000)
        store.save_photo(SavedPhoto(encoded.data, timestamp, self.aspect_ratio))
        filename = SAVE_FILENAME.format(timestamp=timestamp)
        if exporter is not None:
            exporter.export(encoded.data, filename)
        logger.debug("Saved %s" % filename)
        return filename

    async def share(self, exporter: Exporter) -> str:
        encoded = await self._final()
        exporter.export(encoded.data, SHARE_FILENAME)
        return SHARE_FILENAME
