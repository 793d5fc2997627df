import json
import logging

import pytest

from momentos.api.preferences import (
    JSONPreferenceStore,
    PinnedFrame,
    initial_state,
    toggle_pin,
)
from momentos.api.state import CustomFrame, Frame
from momentos.constants import PINNED_FRAME_KEY, FrameType
from momentos.errors import InvalidPinTarget

logger = logging.getLogger(__name__)


def test_pin_then_unpin_leaves_nothing(prefs):
    pinned = PinnedFrame(prefs)
    assert pinned.toggle(FrameType.WHITE_BORDER) is FrameType.WHITE_BORDER
    assert prefs.get(PINNED_FRAME_KEY) == "white-border"
    assert pinned.toggle(FrameType.WHITE_BORDER) is None
    assert PINNED_FRAME_KEY not in prefs
    assert pinned.get() is None


def test_toggle_other_frame_replaces_pin(prefs):
    pinned = PinnedFrame(prefs)
    pinned.toggle("cinema")
    assert pinned.toggle(Frame(FrameType.POLAROID)) is FrameType.POLAROID
    assert pinned.get() is FrameType.POLAROID


@pytest.mark.parametrize("frame", [FrameType.CUSTOM, "custom", CustomFrame(b"x")])
def test_pin_custom_is_rejected(prefs, frame):
    pinned = PinnedFrame(prefs)
    pinned.pin(FrameType.VIGNETTE)
    with pytest.raises(InvalidPinTarget):
        pinned.toggle(frame)
    with pytest.raises(InvalidPinTarget):
        pinned.pin(frame)
    assert pinned.get() is FrameType.VIGNETTE


def test_pin_and_unpin_are_idempotent(prefs):
    pinned = PinnedFrame(prefs)
    pinned.pin("cinema")
    pinned.pin("cinema")
    assert pinned.get() is FrameType.CINEMA
    pinned.unpin()
    pinned.unpin()
    assert pinned.get() is None


@pytest.mark.parametrize("value", ["custom", "sparkles"])
def test_ignores_invalid_stored_value(prefs, value):
    prefs.set(PINNED_FRAME_KEY, value)
    assert PinnedFrame(prefs).get() is None
    assert initial_state(prefs).frame_kind is FrameType.NONE


def test_initial_state_from_pin(prefs):
    assert initial_state(None).frame_kind is FrameType.NONE
    assert initial_state(prefs).frame_kind is FrameType.NONE
    toggle_pin(prefs, FrameType.POLAROID)
    assert initial_state(prefs).frame == Frame(FrameType.POLAROID)


def test_is_pinned(prefs):
    pinned = PinnedFrame(prefs)
    pinned.pin("cinema")
    assert pinned.is_pinned(Frame("cinema"))
    assert not pinned.is_pinned("vignette")
    assert not pinned.is_pinned(CustomFrame(b"x"))


def test_json_store(json_prefs):
    assert json_prefs.get(PINNED_FRAME_KEY) is None
    json_prefs.set(PINNED_FRAME_KEY, "cinema")
    json_prefs.set("other", "value")
    with open(json_prefs.path, encoding="utf-8") as f:
        assert json.load(f) == {PINNED_FRAME_KEY: "cinema", "other": "value"}

    reopened = JSONPreferenceStore(json_prefs.path)
    assert reopened.get(PINNED_FRAME_KEY) == "cinema"
    reopened.delete(PINNED_FRAME_KEY)
    reopened.delete(PINNED_FRAME_KEY)
    assert json_prefs.get(PINNED_FRAME_KEY) is None
    assert json_prefs.get("other") == "value"


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_json_store_ignores_bad_file(tmp_path, content):
    path = tmp_path / "preferences.json"
    path.write_text(content, encoding="utf-8")
    store = JSONPreferenceStore(path)
    assert store.get(PINNED_FRAME_KEY) is None
    PinnedFrame(store).pin("vignette")
    assert store.get(PINNED_FRAME_KEY) == "vignette"
