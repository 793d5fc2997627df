"""Pytest configuration for momentos tests."""

import pytest

from momentos.api.preferences import JSONPreferenceStore, MemoryPreferenceStore


@pytest.fixture
def prefs():
    return MemoryPreferenceStore()


@pytest.fixture
def json_prefs(tmp_path):
    return JSONPreferenceStore(tmp_path / "prefs" / "preferences.json")
