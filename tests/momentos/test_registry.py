import pytest

from momentos.registry import new_registry


def test_new_registry():
    registry, register = new_registry(attribute="key")

    @register("double")
    def double(x):
        return 2 * x

    assert registry["double"](3) == 6
    assert double.key == "double"
    with pytest.raises(ValueError):
        register("double")
