"""Object store for delegation objects.

A ``ProtoObject`` keeps its own properties as attribute records and forwards
every lookup it cannot answer to its parent. The functions in this module are
the primitives the compiler, engine and dispatcher build on: allocation,
property installation, enumeration, the parent link and sealing.
"""

from __future__ import annotations

import reprlib
import types
from typing import Any, Iterator

from protoclone.descriptors import ABSENT, AttributeRecord


class IllegalMutationError(TypeError):
    """Raised when a property cannot be added, changed or removed."""


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


class ProtoObject:
    """An object whose unresolved attribute lookups delegate to a parent.

    Own properties live in ``__own__`` as attribute records. The instance
    slots are host bookkeeping and are not visible as properties.
    """

    __slots__ = ("__proto__", "__own__", "__extensible__", "__cursor__", "__weakref__")

    def __init__(self, parent: ProtoObject | None = None) -> None:
        if parent is not None and not isinstance(parent, ProtoObject):
            raise TypeError(
                f"Object prototype may only be a ProtoObject or None, got {type(parent).__name__}"
            )
        object.__setattr__(self, "__proto__", parent)
        object.__setattr__(self, "__own__", {})
        object.__setattr__(self, "__extensible__", True)
        object.__setattr__(self, "__cursor__", None)

    def __getattr__(self, name: str) -> Any:
        if _is_dunder(name):
            raise AttributeError(name)
        return get_property(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ProtoObject.__slots__:
            raise AttributeError(f"'{name}' is reserved by the object store")
        set_property(self, name, value)

    def __delattr__(self, name: str) -> None:
        if name in ProtoObject.__slots__:
            raise AttributeError(f"'{name}' is reserved by the object store")
        delete_property(self, name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and has_property(self, name)

    def __dir__(self) -> list[str]:
        names: list[str] = []
        for level in iter_chain(self):
            for name in level.__own__:
                if name not in names:
                    names.append(name)
        return names

    def __copy__(self) -> ProtoObject:
        from protoclone.engine import copy_object

        return copy_object(self, root_parent=self.__proto__)

    def __deepcopy__(self, memo: dict[int, Any]) -> ProtoObject:
        from protoclone.engine import DeepMode, copy_object

        return copy_object(
            self, deep_mode=DeepMode.COPY, root_parent=self.__proto__, memo=memo
        )

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        items = []
        for name, record in self.__own__.items():
            if not record.enumerable:
                continue
            if record.is_accessor:
                items.append(f"{name}: <accessor>")
            else:
                items.append(f"{name}: {record.value!r}")
        return "ProtoObject({" + ", ".join(items) + "})"


def allocate(parent: ProtoObject | None = None) -> ProtoObject:
    """Allocate an empty object that delegates to ``parent``."""
    return ProtoObject(parent)


def get_parent(obj: ProtoObject) -> ProtoObject | None:
    """Return the object's parent link."""
    return obj.__proto__


def iter_chain(obj: ProtoObject | None) -> Iterator[ProtoObject]:
    """Yield ``obj`` followed by each of its ancestors."""
    while obj is not None:
        yield obj
        obj = obj.__proto__


def find_property(
    obj: ProtoObject | None, name: str
) -> tuple[ProtoObject, AttributeRecord] | tuple[None, None]:
    """Find the first level of the chain that owns ``name``.

    Returns:
        The owning object and its record, or ``(None, None)``.
    """
    for level in iter_chain(obj):
        record = level.__own__.get(name)
        if record is not None:
            return level, record
    return None, None


def has_property(obj: ProtoObject, name: str) -> bool:
    owner, _ = find_property(obj, name)
    return owner is not None


def bind_value(value: Any, receiver: Any) -> Any:
    """Bind a stored plain function to the receiver, like a method.

    ``staticmethod`` wrappers opt out of binding and are returned unwrapped.
    """
    if isinstance(value, types.FunctionType):
        return types.MethodType(value, receiver)
    if isinstance(value, staticmethod):
        return value.__func__
    return value


def read_record(record: AttributeRecord, receiver: Any) -> Any:
    """Produce the value a record yields when read through ``receiver``."""
    if record.is_accessor:
        if record.getter is ABSENT:
            return None
        return record.getter(receiver)
    return bind_value(record.value, receiver)


def get_property(obj: ProtoObject, name: str, receiver: Any = None) -> Any:
    """Read ``name`` through the delegation chain of ``obj``.

    Raises:
        AttributeError: If no level of the chain has the property.
    """
    _, record = find_property(obj, name)
    if record is None:
        raise AttributeError(f"'{name}' is not defined on this object or its prototypes")
    return read_record(record, obj if receiver is None else receiver)


def set_property(obj: ProtoObject, name: str, value: Any) -> None:
    """Assign ``name`` on ``obj``, honouring inherited setters and read-only flags.

    Plain functions stored this way are bound to the reader like methods, so
    ``obj.cb = lambda v: v * 2`` makes ``obj.cb(3)`` pass ``obj`` as ``v``.
    Store ``staticmethod(fn)`` to keep a callback unbound.

    Raises:
        IllegalMutationError: If the property is read-only, has no setter, or
            would be added to a non-extensible object.
    """
    owner, record = find_property(obj, name)
    if record is not None:
        if record.is_accessor:
            if record.setter is ABSENT:
                raise IllegalMutationError(
                    f"Cannot set property '{name}' which has only a getter"
                )
            record.setter(obj, value)
            return
        if not record.writable:
            raise IllegalMutationError(f"Cannot assign to read only property '{name}'")
        if owner is obj:
            record.value = value
            return
    if not obj.__extensible__:
        raise IllegalMutationError(
            f"Cannot add property '{name}', object is not extensible"
        )
    obj.__own__[name] = AttributeRecord(value=value)


def delete_property(obj: ProtoObject, name: str) -> None:
    """Remove an own property. Missing names are ignored.

    Raises:
        IllegalMutationError: If the property is not configurable.
    """
    record = obj.__own__.get(name)
    if record is None:
        return
    if not record.configurable:
        raise IllegalMutationError(f"Cannot delete property '{name}'")
    del obj.__own__[name]


def _same_value(left: Any, right: Any) -> bool:
    return left is right or left == right


def _check_redefinition(name: str, current: AttributeRecord, record: AttributeRecord) -> None:
    """Validate a change to a non-configurable property."""
    if record.configurable:
        raise IllegalMutationError(f"Cannot redefine property: {name}")
    if record.enumerable != current.enumerable:
        raise IllegalMutationError(f"Cannot redefine property: {name}")
    if record.is_accessor != current.is_accessor:
        raise IllegalMutationError(f"Cannot redefine property: {name}")
    if current.is_accessor:
        if record.getter is not current.getter or record.setter is not current.setter:
            raise IllegalMutationError(f"Cannot redefine property: {name}")
        return
    if not current.writable:
        if record.writable or not _same_value(record.value, current.value):
            raise IllegalMutationError(f"Cannot redefine property: {name}")


def define_property(
    obj: ProtoObject, name: str, record: AttributeRecord | dict[str, Any]
) -> ProtoObject:
    """Install ``record`` as the own property ``name`` of ``obj``.

    A descriptor mapping redefining an existing property only changes the
    fields it names.

    Raises:
        IllegalMutationError: If the object is not extensible and the property
            is new, or the existing property is not configurable and the
            change is not allowed.
        TypeError: If an accessor is not callable.
    """
    own = obj.__own__
    current = own.get(name)
    record = AttributeRecord.coerce(record, current).normalized()
    for accessor in (record.getter, record.setter):
        if accessor is not ABSENT and not callable(accessor):
            raise TypeError(f"Accessor for '{name}' must be callable, got {accessor!r}")

    if current is None:
        if not obj.__extensible__:
            raise IllegalMutationError(
                f"Cannot define property '{name}', object is not extensible"
            )
    elif not current.configurable:
        _check_redefinition(name, current, record)
    own[name] = record
    return obj


def own_property_names(obj: ProtoObject, include_hidden: bool = False) -> list[str]:
    """List own property names in definition order."""
    return [
        name
        for name, record in obj.__own__.items()
        if include_hidden or record.enumerable
    ]


def get_own_property_descriptor(obj: ProtoObject, name: str) -> AttributeRecord | None:
    """Return a copy of the own record for ``name``, if any."""
    record = obj.__own__.get(name)
    return None if record is None else record.copy()


def prevent_extensions(obj: ProtoObject) -> ProtoObject:
    object.__setattr__(obj, "__extensible__", False)
    return obj


def is_extensible(obj: ProtoObject) -> bool:
    return obj.__extensible__


def seal(obj: ProtoObject) -> ProtoObject:
    """Forbid adding or removing own properties."""
    prevent_extensions(obj)
    for record in obj.__own__.values():
        record.configurable = False
    return obj


def is_sealed(obj: ProtoObject) -> bool:
    if obj.__extensible__:
        return False
    return all(not record.configurable for record in obj.__own__.values())


def freeze(obj: ProtoObject) -> ProtoObject:
    """Seal the object and make its data properties read-only."""
    seal(obj)
    for record in obj.__own__.values():
        if not record.is_accessor:
            record.writable = False
    return obj


def is_frozen(obj: ProtoObject) -> bool:
    if not is_sealed(obj):
        return False
    return all(
        record.is_accessor or not record.writable for record in obj.__own__.values()
    )
