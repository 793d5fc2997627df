"""
Protocol definitions for the collaborators around the composition core.

The core never captures, stores or shares photos itself. These protocols
describe what it hands over, so the session layer can be wired to any
storage or transport without importing it.
"""

from typing import Optional, Protocol

from attrs import define, field

from momentos.constants import AspectRatio


@define(frozen=True)
class SavedPhoto:
    """
    Record handed to a :py:class:`PhotoStore` on save.

    .. py:attribute:: timestamp

        Milliseconds since the epoch.
    """

    data: bytes = field(repr=False)
    timestamp: int
    aspect_ratio: AspectRatio = field(converter=AspectRatio)


class PreferenceStore(Protocol):
    """
    Key-value store for small persisted preferences.

    Implementations must make :py:meth:`set` and :py:meth:`delete` atomic
    with respect to :py:meth:`get`.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``; no-op when absent."""
        ...


class PhotoStore(Protocol):
    """
    Persistent photo gallery.
    """

    def save_photo(self, photo: SavedPhoto) -> None:
        """Persist an encoded composition."""
        ...


class Exporter(Protocol):
    """
    Export or share transport.
    """

    def export(self, data: bytes, filename: str) -> None:
        """Hand over encoded bytes with a suggested file name."""
        ...
