"""
Exceptions raised by momentos.
"""


class MomentosError(Exception):
    """Base class of all momentos errors."""


class DecodeError(MomentosError, ValueError):
    """Source or custom frame image could not be decoded."""


class EncodeError(MomentosError, ValueError):
    """Final composition could not be encoded."""


class InvalidPinTarget(MomentosError, ValueError):
    """Attempt to pin a frame that cannot become the default."""


class StaleGeneration(MomentosError):
    """
    A render finished after a newer render was requested.

    The result is discarded; this is not a user-facing failure.
    """

    def __init__(self, generation, latest):
        super(StaleGeneration, self).__init__(
            'Render generation %d superseded by %d' % (generation, latest)
        )
        self.generation = generation
        self.latest = latest
