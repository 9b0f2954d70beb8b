"""The root delegation object.

``ROOT`` is the prototype every framework object ultimately delegates to. It
carries the engine, dispatch and host operations as hidden methods, so any
descendant can call ``obj.clone(...)``, ``obj.call_super(...)`` and so on.
"""

from __future__ import annotations

from typing import Any

from protoclone import dispatch, engine, host
from protoclone.compiler import compile_properties
from protoclone.config import config
from protoclone.dump import to_json


def object_constructor(self: host.ProtoObject, properties: Any = None, defaults: Any = None) -> None:
    """Default constructor: install ``properties`` and seal the instance.

    Objects whose constructor was overridden are left open.
    """
    if properties:
        engine.define_properties(self, properties, defaults)

    _, record = host.find_property(self, "constructor")
    if config.seal_default_instances and record is not None and record.value is object_constructor:
        host.seal(self)


def _get_prototype(self: host.ProtoObject) -> host.ProtoObject | None:
    return host.get_parent(self)


def _get_own_property_names(self: host.ProtoObject) -> list[str]:
    return host.own_property_names(self, include_hidden=True)


def _get_enumerable_own_property_names(self: host.ProtoObject) -> list[str]:
    return host.own_property_names(self)


ROOT = host.allocate(None)

engine.define_properties(
    ROOT,
    {
        "constructor": object_constructor,
        "clone": engine.clone,
        "create": engine.create,
        "copy": engine.copy,
        "mix": engine.mix,
        "describe": staticmethod(compile_properties),
        "define_properties": engine.define_properties,
        "define_property": host.define_property,
        "apply_super": dispatch.apply_super,
        "call_super": dispatch.call_super,
        "create_super_safe_callback": dispatch.create_super_safe_callback,
        "get_state": engine.get_state,
        "can": engine.can,
        "cant": engine.cant,
        "to_string": to_json,
        "get_prototype": _get_prototype,
        "get_own_property_names": _get_own_property_names,
        "get_enumerable_own_property_names": _get_enumerable_own_property_names,
        "get_own_property_descriptor": host.get_own_property_descriptor,
        "prevent_extensions": host.prevent_extensions,
        "is_extensible": host.is_extensible,
        "seal": host.seal,
        "is_sealed": host.is_sealed,
        "freeze": host.freeze,
        "is_frozen": host.is_frozen,
    },
)
