"""Delegation engine: building objects from prototypes.

``clone`` and ``create`` derive new objects from a prototype, ``copy``
detaches an object from its chain, and ``mix`` grafts the own properties of
other objects onto a receiver.
"""

from __future__ import annotations

import copy as _copy
import inspect
import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from protoclone.compiler import compile_properties
from protoclone.config import config
from protoclone.descriptors import AttributeRecord
from protoclone.host import (
    ProtoObject,
    allocate,
    define_property,
    get_own_property_descriptor,
    get_parent,
    get_property,
    own_property_names,
)

logger = logging.getLogger(__name__)


class DeepMode(str, Enum):
    """How ``copy`` treats object-valued properties."""

    NONE = "none"    # share nested values
    COPY = "copy"    # copy nested values recursively
    CLONE = "clone"  # replace nested objects by clones of them


def _root() -> ProtoObject:
    from protoclone.root import ROOT

    return ROOT


def define_properties(
    obj: ProtoObject,
    properties: Mapping[str, Any] | None,
    defaults: AttributeRecord | Mapping[str, Any] | None = None,
) -> ProtoObject:
    """Compile ``properties`` and install the records on ``obj``."""
    for name, record in compile_properties(properties, defaults).items():
        define_property(obj, name, record)
    return obj


def clone(
    parent: ProtoObject,
    properties: Mapping[str, Any] | None = None,
    defaults: AttributeRecord | Mapping[str, Any] | None = None,
) -> ProtoObject:
    """Create a new object delegating to ``parent``.

    Args:
        parent: The prototype of the new object.
        properties: Raw (optionally annotated) properties to install.
        defaults: Baseline attribute flags, see ``compile_properties``.

    Returns:
        The new object. A ``constructor`` among the properties gets a
        ``prototype`` attribute pointing at ``parent``.
    """
    obj = allocate(parent)
    if properties:
        records = compile_properties(properties, defaults)
        constructor = records.get("constructor")
        if constructor is not None and callable(constructor.value):
            try:
                constructor.value.prototype = parent
            except AttributeError:
                logger.debug("constructor %r does not accept a prototype link", constructor.value)
        for name, record in records.items():
            define_property(obj, name, record)
    return obj


def create(parent: ProtoObject, *args: Any, **kwargs: Any) -> ProtoObject:
    """Clone ``parent`` and run the inherited constructor on the clone.

    Returns:
        The constructor's return value when it is not None, else the clone.
    """
    obj = clone(parent)
    returned = obj.constructor(*args, **kwargs)
    return obj if returned is None else returned


# ---- copy ----


def _copy_value(value: Any, deep_mode: DeepMode, memo: dict[int, Any]) -> Any:
    if deep_mode is DeepMode.COPY:
        return _copy.deepcopy(value, memo)
    if deep_mode is DeepMode.CLONE:
        if isinstance(value, ProtoObject):
            return clone(value)
        if isinstance(value, (dict, list, set)):
            return _copy.copy(value)
    return value


def _chain_levels(obj: ProtoObject, parent_depth: float) -> list[ProtoObject]:
    """Collect ``obj`` and up to ``parent_depth`` ancestors, root-most last."""
    root = _root()
    levels = [obj]
    level = obj
    while parent_depth > 0:
        level = get_parent(level)
        if level is None or level is root:
            break
        levels.append(level)
        parent_depth -= 1
    return levels


def _copied_records(
    level: ProtoObject, deep_mode: DeepMode, memo: dict[int, Any]
) -> dict[str, AttributeRecord]:
    records: dict[str, AttributeRecord] = {}
    for name in own_property_names(level, include_hidden=True):
        record = get_own_property_descriptor(level, name)
        if not record.is_accessor:
            record.value = _copy_value(record.value, deep_mode, memo)
        records[name] = record
    return records


def copy_object(
    obj: ProtoObject,
    deep_mode: DeepMode | str = DeepMode.NONE,
    root_parent: ProtoObject | None = None,
    parent_depth: float = 0,
    mix_parents: bool = False,
    memo: dict[int, Any] | None = None,
) -> ProtoObject:
    """Detach ``obj`` (and some ancestors) from its chain.

    Args:
        obj: The object to copy.
        deep_mode: Treatment of data values, see ``DeepMode``.
        root_parent: Parent of the top-most copy. None makes it standalone.
        parent_depth: Number of ancestors copied along with ``obj``.
        mix_parents: Flatten all copied levels into one object.
        memo: ``copy.deepcopy`` memo shared with nested copies.

    Returns:
        The copy of ``obj``.
    """
    deep_mode = DeepMode(deep_mode)
    memo = {} if memo is None else memo
    levels = _chain_levels(obj, parent_depth)

    logger.debug(
        "copying %d level(s), deep_mode=%s, mix_parents=%s",
        len(levels),
        deep_mode.value,
        mix_parents,
    )

    if mix_parents:
        result = allocate(root_parent)
        memo[id(obj)] = result
        merged: dict[str, AttributeRecord] = {}
        for level in reversed(levels):
            merged.update(_copied_records(level, deep_mode, memo))
        for name, record in merged.items():
            define_property(result, name, record)
        return result

    current = root_parent
    for level in reversed(levels):
        current = allocate(current)
        memo[id(level)] = current
        for name, record in _copied_records(level, deep_mode, memo).items():
            define_property(current, name, record)
    return current


def _parse_copy_options(options: tuple[Any, ...]) -> dict[str, Any]:
    parsed: dict[str, Any] = {}
    for option in options:
        if isinstance(option, bool):
            parsed["mix_parents"] = option
        elif isinstance(option, (int, float)):
            parsed["parent_depth"] = option
        elif isinstance(option, (str, DeepMode)):
            parsed["deep_mode"] = DeepMode(option)
        elif isinstance(option, ProtoObject):
            parsed["root_parent"] = option
        else:
            raise TypeError(f"Unexpected copy option: {option!r}")
    return parsed


def copy(obj: ProtoObject, *options: Any, **keywords: Any) -> ProtoObject:
    """Copy ``obj`` into a standalone object.

    Positional options may come in any order and are told apart by type: a
    string picks the deep mode, an object the new root parent, a number the
    parent depth (``math.inf`` for the whole chain) and a bool whether to
    flatten the copied levels. Keywords with the same names as
    ``copy_object``'s parameters are also accepted.
    """
    settings: dict[str, Any] = {
        "deep_mode": config.copy_deep_mode,
        "root_parent": None,
        "parent_depth": config.copy_parent_depth,
        "mix_parents": config.copy_mix_parents,
    }
    settings.update(_parse_copy_options(options))
    settings.update(keywords)
    if settings["root_parent"] is None:
        settings["root_parent"] = _root()
    return copy_object(obj, **settings)


# ---- mix ----


def _class_records(cls: type) -> dict[str, AttributeRecord]:
    records: dict[str, AttributeRecord] = {}
    for name, value in vars(cls).items():
        if name.startswith("__") and name.endswith("__"):
            continue
        if isinstance(value, property):
            record = AttributeRecord(enumerable=True, configurable=True)
            if value.fget is not None:
                record.getter = value.fget
            if value.fset is not None:
                record.setter = value.fset
            records[name] = record
        else:
            records.update(compile_properties({name: value}))
    return records


def _source_levels(source: Any, parent_depth: float) -> list[dict[str, AttributeRecord]]:
    """Own records of a mix source and its ancestors, root-most first."""
    if isinstance(source, ProtoObject):
        return [
            {
                name: get_own_property_descriptor(level, name)
                for name in own_property_names(level, include_hidden=True)
            }
            for level in reversed(_chain_levels(source, parent_depth))
        ]
    if isinstance(source, type):
        classes = [c for c in source.__mro__ if c is not object]
        if not math.isinf(parent_depth):
            classes = classes[: int(parent_depth) + 1]
        return [_class_records(c) for c in reversed(classes)]
    if isinstance(source, Mapping):
        return [compile_properties(source)]
    raise TypeError(f"Cannot mix {type(source).__name__!r} into an object")


def mix(
    target: ProtoObject,
    sources: Any,
    parent_depth: float | bool = 0,
    preserve_nesting: bool | None = None,
) -> ProtoObject:
    """Copy the own properties of ``sources`` onto ``target``.

    Args:
        target: The receiver.
        sources: An object, mapping or class, or a list of them. Later
            sources win over earlier ones and descendants over ancestors.
        parent_depth: Ancestors of each source to mix in as well. A bool here
            is taken as ``preserve_nesting``.
        preserve_nesting: Insert one delegation hop per mixed level so that
            super calls between the mixed levels keep working. Otherwise
            everything is installed on ``target`` directly.

    Returns:
        The most-derived new object when nesting, else ``target``.
    """
    if preserve_nesting is None:
        if isinstance(parent_depth, bool):
            preserve_nesting = parent_depth
            parent_depth = 0
        else:
            preserve_nesting = config.mix_preserve_nesting

    if not isinstance(sources, (list, tuple)):
        sources = [sources]

    levels: list[dict[str, AttributeRecord]] = []
    for source in sources:
        levels.extend(_source_levels(source, parent_depth))

    logger.debug("mixing %d level(s), preserve_nesting=%s", len(levels), preserve_nesting)

    if not preserve_nesting:
        merged: dict[str, AttributeRecord] = {}
        for records in levels:
            merged.update(records)
        for name, record in merged.items():
            define_property(target, name, record)
        return target

    updated = target
    for records in levels:
        if not records:
            continue
        updated = allocate(updated)
        for name, record in records.items():
            define_property(updated, name, record)
    return updated


# ---- state and capabilities ----


def get_state(obj: ProtoObject, list_private: bool = False) -> ProtoObject:
    """Snapshot the current own property values of ``obj``.

    Returns:
        A new open object derived from the root holding plain copies of the
        own enumerable properties, or of all own properties with
        ``list_private``.
    """
    state = allocate(_root())
    for name in own_property_names(obj, include_hidden=list_private):
        define_property(state, name, AttributeRecord(value=get_property(obj, name)))
    return state


def _arity(fn: Any) -> int | None:
    try:
        return len(inspect.signature(fn).parameters)
    except (TypeError, ValueError):
        return None


class Capability:
    """Answer to ``can``/``cant``: whether an object offers a method."""

    def __init__(self, obj: Any, method: str, negated: bool = False) -> None:
        self._method = getattr(obj, method, None)
        self._name = method
        self._negated = negated

    def _has(self) -> bool:
        return callable(self._method)

    def __bool__(self) -> bool:
        return self._has() ^ self._negated

    def like(self, other: Any) -> bool:
        """Whether ``other`` has a method of the same name and arity."""
        other_method = getattr(other, self._name, None)
        match = (
            self._has()
            and callable(other_method)
            and _arity(other_method) == _arity(self._method)
        )
        return match ^ self._negated

    def same_as(self, other: Any) -> bool:
        """Whether ``other`` has the very same method implementation."""
        other_method = getattr(other, self._name, None)
        match = self._has() and _unwrap(other_method) is _unwrap(self._method)
        return match ^ self._negated

    def __repr__(self) -> str:
        verb = "cant" if self._negated else "can"
        return f"Capability({verb} {self._name!r}: {bool(self)})"


def _unwrap(method: Any) -> Any:
    return getattr(method, "__func__", method)


def can(obj: Any, method: str) -> Capability:
    return Capability(obj, method)


def cant(obj: Any, method: str) -> Capability:
    return Capability(obj, method, negated=True)
