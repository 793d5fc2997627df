"""
User-facing types: rasters, composition state, preferences and sessions.
"""

from momentos.api.preferences import (
    JSONPreferenceStore,
    MemoryPreferenceStore,
    PinnedFrame,
    initial_state,
    toggle_pin,
)
from momentos.api.raster import EncodedImage, RasterImage
from momentos.api.session import EditorSession
from momentos.api.state import (
    STICKERS,
    CompositionState,
    CustomFrame,
    FontSpec,
    Frame,
    Sticker,
)

__all__ = [
    "CompositionState",
    "CustomFrame",
    "EditorSession",
    "EncodedImage",
    "FontSpec",
    "Frame",
    "JSONPreferenceStore",
    "MemoryPreferenceStore",
    "PinnedFrame",
    "RasterImage",
    "STICKERS",
    "Sticker",
    "initial_state",
    "toggle_pin",
]
