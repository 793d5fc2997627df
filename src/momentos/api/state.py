"""
Composition parameters.

A :py:class:`CompositionState` is a frozen snapshot of the user's choices:
one filter, one frame and an optional sticker. Changing a choice produces
a new state with :py:meth:`CompositionState.evolve`; a render in flight
keeps the snapshot it started with.

Example::

    from momentos.api.state import CompositionState, Frame, STICKERS
    from momentos.constants import Filter, FrameType

    state = CompositionState(
        filter=Filter.SEPIA,
        frame=Frame(FrameType.CINEMA),
        sticker=STICKERS["gratidao"],
    )
    state = state.evolve(filter=Filter.NONE)
"""

import logging
import re
from typing import Any, Optional, Union

import attrs
from attrs import define, field

from momentos.api.raster import RasterImage
from momentos.constants import Filter, FrameType
from momentos.validators import in_, range_

logger = logging.getLogger(__name__)

_FONT_RE = re.compile(
    r"^\s*(?:(?P<weight>\d{3}|bold|normal)\s+)?(?P<size>\d+(?:\.\d+)?)px\s+(?P<family>.+?)\s*$"
)


@define(frozen=True)
class FontSpec:
    """
    Font description with a size designed for a 1080px canvas.

    .. py:attribute:: weight

        CSS-like numeric weight, 400 is regular and 700 bold.

    .. py:attribute:: base_size

        Pixel size at the reference resolution.

    .. py:attribute:: family

        Font family name.
    """

    weight: int = field(default=700, validator=range_(100, 900))
    base_size: float = field(default=60.0, converter=float, validator=range_(1, 1000))
    family: str = "sans-serif"

    @classmethod
    def parse(cls, value: str) -> "FontSpec":
        """Parse a CSS font shorthand such as ``700 80px "Dancing Script"``."""
        match = _FONT_RE.match(value)
        if match is None:
            raise ValueError("Invalid font specification: %r" % value)
        weight = match.group("weight") or "normal"
        weight = {"normal": "400", "bold": "700"}.get(weight, weight)
        family = match.group("family").strip().strip("\"'") or "sans-serif"
        return cls(int(weight), float(match.group("size")), family)

    @property
    def bold(self) -> bool:
        return self.weight >= 600


def _font_converter(value: Union[str, FontSpec]) -> FontSpec:
    if isinstance(value, str):
        return FontSpec.parse(value)
    return value


@define(frozen=True)
class Sticker:
    """
    Text overlay drawn near the bottom of the composition.
    """

    name: str
    text: str
    color: str = "#FFFFFF"
    font: FontSpec = field(factory=FontSpec, converter=_font_converter)
    label: str = field(default="", eq=False)


#: Sticker presets, keyed by name.
STICKERS = {
    sticker.name: sticker
    for sticker in (
        Sticker(
            "bom-dia", "Bom dia!", "#FFFFFF", '700 80px "Dancing Script"', "Bom Dia"
        ),
        Sticker(
            "boa-tarde",
            "Boa tarde",
            "#FFFFFF",
            '700 80px "Playfair Display"',
            "Boa Tarde",
        ),
        Sticker(
            "boa-noite", "Boa noite", "#fbbf24", '700 80px "Dancing Script"', "Boa Noite"
        ),
        Sticker("gratidao", "Gratidão", "#FFFFFF", '500 60px "Inter"', "Gratidão"),
        Sticker(
            "felicidade",
            "Momentos Felizes",
            "#f472b6",
            '700 60px "Dancing Script"',
            "Felicidade",
        ),
    )
}


def get_sticker(name: Optional[str]) -> Optional[Sticker]:
    """Look up a sticker preset; ``None`` and ``'none'`` mean no sticker."""
    if name is None or name == "none":
        return None
    try:
        return STICKERS[name]
    except KeyError:
        raise KeyError("Unknown sticker: %s" % name) from None


@define(frozen=True)
class Frame:
    """
    Parameterless frame computed purely from the canvas size.
    """

    kind: FrameType = field(
        default=FrameType.NONE,
        converter=FrameType,
        validator=in_([t for t in FrameType if t is not FrameType.CUSTOM]),
    )


@define(frozen=True)
class CustomFrame:
    """
    User supplied frame image stretched over the whole canvas.

    .. py:attribute:: image

        Either encoded image bytes, decoded when the frame is drawn, or an
        already decoded :py:class:`~momentos.api.raster.RasterImage`.
    """

    image: Union[bytes, RasterImage] = field(repr=False)

    @image.validator
    def _validate_image(self, attribute: Any, value: Any) -> None:
        if not isinstance(value, (bytes, RasterImage)):
            raise TypeError(
                "Custom frame image must be bytes or RasterImage, got %s"
                % type(value).__name__
            )

    @property
    def kind(self) -> FrameType:
        return FrameType.CUSTOM


AnyFrame = Union[Frame, CustomFrame]

NO_FRAME = Frame(FrameType.NONE)


def _frame_converter(value: Union[str, FrameType, AnyFrame, None]) -> AnyFrame:
    if value is None:
        return NO_FRAME
    if isinstance(value, (Frame, CustomFrame)):
        return value
    return Frame(FrameType(value))


@define(frozen=True)
class CompositionState:
    """
    Immutable set of parameters for one render.
    """

    filter: Filter = field(default=Filter.NONE, converter=Filter.get)
    frame: AnyFrame = field(default=NO_FRAME, converter=_frame_converter)
    sticker: Optional[Sticker] = None

    def evolve(self, **changes: Any) -> "CompositionState":
        return attrs.evolve(self, **changes)

    @property
    def frame_kind(self) -> FrameType:
        return self.frame.kind
