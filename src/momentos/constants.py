"""
Various constants for momentos
"""
from enum import Enum


class Filter(Enum):
    """
    Color filter presets.

    Each filter maps to an ordered chain of color primitives, see
    :py:data:`~momentos.composite.color.FILTER_CHAINS`.
    """
    NONE = 'none'
    VIVID = 'contrast'
    WARM = 'warm'
    COOL = 'cool'
    SEPIA = 'sepia'
    GRAYSCALE = 'grayscale'
    VINTAGE = 'vintage'

    @classmethod
    def get(cls, value):
        """Look up a filter by name, falling back to :py:attr:`NONE`."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class FrameType(Enum):
    """
    Frame kinds.

    Only :py:attr:`CUSTOM` carries user data and it can never be pinned.
    """
    NONE = 'none'
    CUSTOM = 'custom'
    WHITE_BORDER = 'white-border'
    POLAROID = 'polaroid'
    CINEMA = 'cinema'
    VIGNETTE = 'vignette'

    @property
    def pinnable(self):
        return self is not FrameType.CUSTOM


class AspectRatio(Enum):
    """
    Capture framing tag, kept as metadata only.
    """
    PORTRAIT = '9:16'
    LANDSCAPE = '16:9'


#: Display labels used by the editor.
FILTER_LABELS = {
    Filter.NONE: 'Normal',
    Filter.VIVID: 'Vívido',
    Filter.WARM: 'Quente',
    Filter.COOL: 'Frio',
    Filter.SEPIA: 'Sépia',
    Filter.GRAYSCALE: 'P&B',
    Filter.VINTAGE: 'Retrô',
}

FRAME_LABELS = {
    FrameType.NONE: 'Sem Moldura',
    FrameType.CUSTOM: 'Sua Moldura',
    FrameType.WHITE_BORDER: 'Borda Branca',
    FrameType.POLAROID: 'Polaroid',
    FrameType.CINEMA: 'Cinema',
    FrameType.VIGNETTE: 'Vinheta',
}

# Preference key of the pinned default frame.
PINNED_FRAME_KEY = 'instafiltros_default_frame'

# Output encoding.
JPEG_QUALITY = 0.9
SAVE_FILENAME = 'momento-{timestamp}.jpg'
SHARE_FILENAME = 'momento.jpg'

# Sticker layout is designed for a 1080px short edge.
REFERENCE_RESOLUTION = 1080.0
STICKER_Y = 0.85
STICKER_Y_POLAROID = 0.92
SHADOW_BLUR = 10.0
SHADOW_OFFSET = 2.0
SHADOW_COLOR = (0.0, 0.0, 0.0, 0.5)
POLAROID_TEXT_COLOR = '#333'

# Frame geometry, relative to the canvas.
BORDER_RATIO = 0.05
POLAROID_PADDING = 0.05
POLAROID_BOTTOM_PADDING = 0.2
POLAROID_BACKGROUND = '#f8f9fa'
CINEMA_BAR_RATIO = 0.1
VIGNETTE_OPACITY = 0.7
