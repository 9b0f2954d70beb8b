"""Descriptor compiler: raw property maps to attribute records.

Keys may carry a flag prefix, e.g. ``"(hidden final get) size"``:

- ``const``    make the property read-only
- ``final``    make it read-only and non-configurable
- ``writable`` make it writable again (``(final writable) x``)
- ``hidden``   make it non-enumerable
- ``get``      install the value as getter; a string names the property to read
- ``set``      install the value as setter; a string names the property to write

Keys that do not match the grammar are used literally.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from protoclone.config import config
from protoclone.descriptors import ABSENT, DEFAULT_ATTRIBUTES, AttributeRecord
from protoclone.parsing import Annotation, AnnotationParser

logger = logging.getLogger(__name__)

# Flags in the order they are applied; later ones win where they conflict
FLAG_ORDER = ("const", "final", "writable", "hidden", "get", "set")

_parser: AnnotationParser | None = None


def parse_annotation(raw_name: str) -> Annotation | None:
    """Split an annotated name into flags and bare name.

    Returns None when ``raw_name`` is not an annotated name.
    """
    global _parser
    if not raw_name.startswith("("):
        return None
    if _parser is None:
        _parser = AnnotationParser()
    try:
        return _parser.parse(raw_name)
    except SyntaxError as exc:
        logger.debug("Using %r as a literal property name: %s", raw_name, exc)
        return None


def make_auto_getter(target: str) -> Callable[[Any], Any]:
    """Build a getter that reads ``target`` from the receiver."""

    def getter(self: Any) -> Any:
        return getattr(self, target)

    getter.__name__ = f"get_{target}"
    getter.__qualname__ = getter.__name__
    return getter


def make_auto_setter(target: str) -> Callable[[Any, Any], None]:
    """Build a setter that writes ``target`` on the receiver."""

    def setter(self: Any, value: Any) -> None:
        setattr(self, target, value)

    setter.__name__ = f"set_{target}"
    setter.__qualname__ = setter.__name__
    return setter


def make_delegating_constructor(type_name: str) -> Callable[..., Any]:
    """Build a constructor named ``type_name`` that defers to the super constructor."""
    from protoclone.dispatch import apply_super

    def constructor(self: Any, *args: Any, **kwargs: Any) -> Any:
        return apply_super(self, "constructor", args, kwargs)

    constructor.__name__ = type_name
    constructor.__qualname__ = type_name
    return constructor


def _accessor(value: Any, factory: Callable[[str], Callable[..., Any]]) -> Any:
    if isinstance(value, str):
        return factory(value)
    return value


def _apply_flags(record: AttributeRecord, flags: frozenset[str], value: Any) -> None:
    for flag in FLAG_ORDER:
        if flag not in flags:
            continue
        if flag == "const":
            record.writable = False
        elif flag == "final":
            record.writable = False
            record.configurable = False
        elif flag == "writable":
            record.writable = True
        elif flag == "hidden":
            record.enumerable = False
        elif flag == "get":
            record.getter = _accessor(value, make_auto_getter)
        elif flag == "set":
            record.setter = _accessor(value, make_auto_setter)


def compile_properties(
    properties: Mapping[str, Any] | None,
    defaults: AttributeRecord | Mapping[str, Any] | None = None,
) -> dict[str, AttributeRecord]:
    """Translate a raw property map into attribute records.

    Args:
        properties: Property names (optionally annotated) mapped to values.
        defaults: Baseline flags for every record. When omitted, properties
            are enumerable, writable and configurable. Passing defaults with
            ``enumerable=True`` disables the implicit hiding of callables and
            private names.

    Returns:
        Records keyed by bare property name, in first-seen order.
    """
    records: dict[str, AttributeRecord] = {}
    if not properties:
        return records

    baseline = DEFAULT_ATTRIBUTES if defaults is None else AttributeRecord.coerce(defaults)
    hiding_allowed = not (defaults is not None and baseline.enumerable)

    for raw_name, value in properties.items():
        name = raw_name
        annotation = parse_annotation(raw_name) if isinstance(raw_name, str) else None

        if annotation is not None:
            name = annotation.name
            existing = records.get(name)
            record = existing.copy() if existing is not None else baseline.flags_only()
            _apply_flags(record, annotation.flags, value)
        else:
            record = baseline.flags_only()

        if record.is_accessor:
            record.value = ABSENT
            if record.getter is not ABSENT:
                # getters do not count as methods for implicit hiding
                value = None
        else:
            if name == "constructor" and isinstance(value, str):
                value = make_delegating_constructor(value)
            record.value = value

        if hiding_allowed and (
            callable(value) or str(name).startswith(config.private_prefix)
        ):
            record.enumerable = False

        records[name] = record

    return records
