"""
Registry pattern utility.

The color primitives and the frame painters are looked up by key from
registries created with :py:func:`new_registry`::

    from momentos.registry import new_registry

    PRIMITIVES, register = new_registry(attribute='primitive')

    @register('brightness')
    def brightness(rgb, k):
        return rgb * k

    PRIMITIVES['brightness'](rgb, 1.1)
"""

from typing import Any, Callable, Dict, Tuple, TypeVar, Union

T = TypeVar("T")


def new_registry(attribute: Union[str, None] = None) -> Tuple[Dict, Callable]:
    """
    Returns an empty dict and a @register decorator.

    :param attribute: Optional attribute name under which the key is stored
                      on each registered function.
    :return: Tuple of (registry_dict, register_decorator)
    :raises ValueError: from the decorator when a key is registered twice.
    """
    registry: Dict[Any, Callable] = {}

    def register(key: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        if key in registry:
            raise ValueError("Duplicate registry key: %r" % (key,))

        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            registry[key] = func
            if attribute:
                setattr(func, attribute, key)
            return func

        return decorator

    return registry, register
