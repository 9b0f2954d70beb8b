"""Rendering object state as plain data and JSON."""

from __future__ import annotations

import json
from typing import Any

from protoclone.host import ProtoObject, get_property, own_property_names


def _plain(value: Any, list_private: bool, active: set[int]) -> Any:
    if isinstance(value, ProtoObject):
        return state_to_dict(value, list_private, active)
    if isinstance(value, dict):
        return {str(k): _plain(v, list_private, active) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v, list_private, active) for v in value]
    return value


def state_to_dict(
    obj: ProtoObject, list_private: bool = False, _active: set[int] | None = None
) -> dict[str, Any]:
    """Convert the own properties of ``obj`` to a plain dict, recursively.

    Args:
        obj: The object to render.
        list_private: Include non-enumerable properties.

    Raises:
        ValueError: If the object graph contains a cycle.
    """
    active = set() if _active is None else _active
    if id(obj) in active:
        raise ValueError("Cannot render a circular object structure")
    active.add(id(obj))
    try:
        return {
            name: _plain(get_property(obj, name), list_private, active)
            for name in own_property_names(obj, include_hidden=list_private)
        }
    finally:
        active.discard(id(obj))


def _default(value: Any) -> Any:
    name = getattr(value, "__name__", None)
    if callable(value) and name is not None:
        return f"<function {name}>"
    return repr(value)


def to_json(obj: ProtoObject, list_private: bool = False, indent: int | None = None) -> str:
    """Serialize the state of ``obj`` to JSON."""
    return json.dumps(state_to_dict(obj, list_private), default=_default, indent=indent)
