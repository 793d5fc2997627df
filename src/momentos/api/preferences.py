"""
Pinned default frame.

The pinned frame is the only persisted state of the editor. It lives in
an injected :py:class:`~momentos.api.protocols.PreferenceStore` under
:py:data:`~momentos.constants.PINNED_FRAME_KEY` and seeds the frame of new
sessions.

Example::

    from momentos.api.preferences import JSONPreferenceStore, PinnedFrame
    from momentos.constants import FrameType

    pinned = PinnedFrame(JSONPreferenceStore('preferences.json'))
    pinned.toggle(FrameType.POLAROID)   # pinned
    pinned.toggle(FrameType.POLAROID)   # cleared
"""

import json
import logging
import os
import tempfile
from typing import Dict, Optional, Union

from momentos.api.protocols import PreferenceStore
from momentos.api.state import CompositionState, Frame
from momentos.constants import PINNED_FRAME_KEY, FrameType
from momentos.errors import InvalidPinTarget

logger = logging.getLogger(__name__)


class MemoryPreferenceStore(object):
    """In-memory preference store."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self._values)


class JSONPreferenceStore(object):
    """
    Preference store backed by a JSON object in a file.

    Writes go to a temporary file in the same directory which then
    replaces the target, so readers see either the old or the new content.
    """

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = os.fspath(path)

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                values = json.load(f)
        except FileNotFoundError:
            return {}
        except ValueError as e:
            logger.warning("Ignoring corrupt preference file %s: %s" % (self.path, e))
            return {}
        if not isinstance(values, dict):
            logger.warning("Ignoring unexpected preference file %s" % self.path)
            return {}
        return values

    def _dump(self, values: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(values, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._dump(values)

    def delete(self, key: str) -> None:
        values = self._load()
        if values.pop(key, None) is not None:
            self._dump(values)

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.path)


def _pin_target(frame: Union[str, FrameType, Frame]) -> FrameType:
    kind = getattr(frame, "kind", frame)
    kind = FrameType(kind)
    if not kind.pinnable:
        raise InvalidPinTarget("Custom frames cannot be pinned as default.")
    return kind


class PinnedFrame(object):
    """
    Pinned default frame backed by a preference store.
    """

    def __init__(self, store: PreferenceStore, key: str = PINNED_FRAME_KEY):
        self.store = store
        self.key = key

    def get(self) -> Optional[FrameType]:
        """Return the pinned frame, ignoring values that cannot be pinned."""
        value = self.store.get(self.key)
        if value is None:
            return None
        try:
            kind = FrameType(value)
        except ValueError:
            logger.warning("Unknown pinned frame: %r" % value)
            return None
        if not kind.pinnable:
            logger.warning("Ignoring unpinnable frame: %r" % value)
            return None
        return kind

    def pin(self, frame: Union[str, FrameType, Frame]) -> FrameType:
        """
        Pin ``frame`` as the default.

        :raises InvalidPinTarget: for custom frames; the store is untouched.
        """
        kind = _pin_target(frame)
        self.store.set(self.key, kind.value)
        logger.debug("Pinned frame %s" % kind.value)
        return kind

    def unpin(self) -> None:
        self.store.delete(self.key)
        logger.debug("Unpinned frame")

    def toggle(self, frame: Union[str, FrameType, Frame]) -> Optional[FrameType]:
        """
        Pin ``frame``, or clear the pin if ``frame`` is already pinned.

        Returns the pinned frame after the call, or None when cleared.

        :raises InvalidPinTarget: for custom frames; the store is untouched.
        """
        kind = _pin_target(frame)
        if self.get() is kind:
            self.unpin()
            return None
        return self.pin(kind)

    def is_pinned(self, frame: Union[str, FrameType, Frame]) -> bool:
        kind = FrameType(getattr(frame, "kind", frame))
        return kind.pinnable and self.get() is kind


def toggle_pin(
    store: PreferenceStore, frame: Union[str, FrameType, Frame]
) -> Optional[FrameType]:
    """Shortcut for :py:meth:`PinnedFrame.toggle`."""
    return PinnedFrame(store).toggle(frame)


def initial_state(store: Optional[PreferenceStore] = None) -> CompositionState:
    """Return the state a new session starts with, seeded from the pin."""
    if store is None:
        return CompositionState()
    kind = PinnedFrame(store).get()
    if kind is None:
        return CompositionState()
    logger.debug("Seeding frame from pin: %s" % kind.value)
    return CompositionState(frame=Frame(kind))
