"""Attribute records describing how a property is stored on an object."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


class _Absent:
    """Marker for a record field that is not present."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()

# Keys accepted by AttributeRecord.coerce(), mapped to field names
_MAPPING_KEYS = {
    "value": "value",
    "get": "getter",
    "getter": "getter",
    "set": "setter",
    "setter": "setter",
}
_ACCESSOR_KEYS = {"get", "getter", "set", "setter"}
_DATA_KEYS = {"value", "writable"}


@dataclass
class AttributeRecord:
    """Normalized descriptor of one named property.

    A record is either in data form (``value`` present) or in accessor form
    (``getter`` and/or ``setter`` present), never both. ``writable`` only
    matters for the data form.
    """

    enumerable: bool = True
    writable: bool = True
    configurable: bool = True
    value: Any = ABSENT
    getter: Any = ABSENT
    setter: Any = ABSENT

    @property
    def is_accessor(self) -> bool:
        """Return whether this record describes a getter/setter pair."""
        return self.getter is not ABSENT or self.setter is not ABSENT

    @property
    def has_value(self) -> bool:
        """Return whether this record carries a stored value."""
        return self.value is not ABSENT

    def flags_only(self) -> AttributeRecord:
        """Return a copy holding just the three boolean flags."""
        return AttributeRecord(
            enumerable=self.enumerable,
            writable=self.writable,
            configurable=self.configurable,
        )

    def copy(self) -> AttributeRecord:
        return replace(self)

    def normalized(self) -> AttributeRecord:
        """Return a copy in exactly one storage form.

        Accessor records drop their value. Records with neither a value nor
        accessors become data records holding ``None``.
        """
        if self.is_accessor:
            return replace(self, value=ABSENT, writable=False)
        if self.value is ABSENT:
            return replace(self, value=None)
        return replace(self)

    def as_dict(self) -> dict[str, Any]:
        """Render the fields relevant to this record's form."""
        if self.is_accessor:
            result: dict[str, Any] = {}
            if self.getter is not ABSENT:
                result["get"] = self.getter
            if self.setter is not ABSENT:
                result["set"] = self.setter
            result["enumerable"] = self.enumerable
            result["configurable"] = self.configurable
            return result
        return {
            "value": None if self.value is ABSENT else self.value,
            "writable": self.writable,
            "enumerable": self.enumerable,
            "configurable": self.configurable,
        }

    @classmethod
    def coerce(
        cls,
        descriptor: AttributeRecord | Mapping[str, Any],
        current: AttributeRecord | None = None,
    ) -> AttributeRecord:
        """Build a record from another record or a descriptor mapping.

        A mapping only changes the fields it names. The rest come from
        ``current``, the record being redefined, or are False when there is
        none. A mapping that switches ``current`` between data and accessor
        form drops the fields of the old form.

        Raises:
            TypeError: If ``descriptor`` is neither a record nor a mapping.
        """
        if isinstance(descriptor, AttributeRecord):
            return descriptor.copy()
        if not isinstance(descriptor, Mapping):
            raise TypeError(
                f"Property descriptor must be a mapping, got {type(descriptor).__name__}"
            )
        if current is None:
            record = cls(enumerable=False, writable=False, configurable=False)
        else:
            record = current.copy()
            if not _ACCESSOR_KEYS.isdisjoint(descriptor) and not current.is_accessor:
                record.value = ABSENT
                record.writable = False
            elif not _DATA_KEYS.isdisjoint(descriptor) and current.is_accessor:
                record.getter = record.setter = ABSENT
                record.writable = False
        for flag in ("enumerable", "writable", "configurable"):
            if flag in descriptor:
                setattr(record, flag, bool(descriptor[flag]))
        for key, field_name in _MAPPING_KEYS.items():
            if key in descriptor:
                setattr(record, field_name, descriptor[key])
        return record


# Baseline flags used when a caller does not supply defaults
DEFAULT_ATTRIBUTES = AttributeRecord(enumerable=True, writable=True, configurable=True)
