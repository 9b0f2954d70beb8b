"""Tests for the object store primitives."""

import copy

import pytest

from protoclone.descriptors import AttributeRecord
from protoclone.host import (
    IllegalMutationError,
    ProtoObject,
    allocate,
    define_property,
    freeze,
    get_own_property_descriptor,
    get_parent,
    is_extensible,
    is_frozen,
    is_sealed,
    own_property_names,
    prevent_extensions,
    seal,
)


def data(value, enumerable=True, writable=True, configurable=True):
    return AttributeRecord(
        enumerable=enumerable, writable=writable, configurable=configurable, value=value
    )


class TestAllocation:
    """Tests for allocating objects."""

    def test_parent_link(self):
        """Test that the parent link is recorded."""
        parent = allocate()
        child = allocate(parent)
        assert get_parent(child) is parent
        assert get_parent(parent) is None

    def test_rejects_foreign_parent(self):
        """Test that only ProtoObjects can be parents."""
        with pytest.raises(TypeError):
            allocate({"a": 1})  # type: ignore[arg-type]


class TestLookup:
    """Tests for reading through the chain."""

    def test_delegation(self):
        """Test that lookups fall back to the parent."""
        parent = allocate()
        parent.a = 1
        child = allocate(parent)
        assert child.a == 1
        assert "a" in child
        assert own_property_names(child) == []

    def test_missing_attribute(self):
        """Test that missing names raise AttributeError."""
        obj = allocate()
        with pytest.raises(AttributeError):
            obj.missing
        assert not hasattr(obj, "missing")
        assert "missing" not in obj

    def test_functions_are_bound_to_receiver(self):
        """Test that stored functions behave like methods of the reader."""
        parent = allocate()
        define_property(parent, "who", data(lambda self: self, enumerable=False))
        child = allocate(parent)
        assert child.who() is child
        assert parent.who() is parent

    def test_staticmethod_is_not_bound(self):
        """Test that staticmethod values are returned unbound."""
        obj = allocate()
        define_property(obj, "add", data(staticmethod(lambda a, b: a + b)))
        assert obj.add(1, 2) == 3

    def test_getter_receives_original_receiver(self):
        """Test that inherited getters see the object they were read from."""
        parent = allocate()
        define_property(parent, "double", AttributeRecord(getter=lambda self: self.n * 2))
        child = allocate(parent)
        child.n = 21
        assert child.double == 42

    def test_write_only_accessor_reads_none(self):
        """Test that an accessor without getter reads as None."""
        obj = allocate()
        define_property(obj, "sink", AttributeRecord(setter=lambda self, v: None))
        assert obj.sink is None

    def test_dir_lists_chain(self):
        """Test that dir() lists names of the whole chain."""
        parent = allocate()
        parent.a = 1
        child = allocate(parent)
        child.b = 2
        assert dir(child) == ["a", "b"]


class TestAssignment:
    """Tests for writing properties."""

    def test_assignment_shadows_parent(self):
        """Test that writes create own properties."""
        parent = allocate()
        parent.a = 1
        child = allocate(parent)
        child.a = 2
        assert child.a == 2
        assert parent.a == 1
        assert own_property_names(child) == ["a"]

    def test_new_property_attributes(self):
        """Test that assigned properties are enumerable, writable and configurable."""
        obj = allocate()
        obj.a = 1
        assert get_own_property_descriptor(obj, "a").as_dict() == data(1).as_dict()

    def test_read_only_own(self):
        """Test that read-only properties reject writes."""
        obj = allocate()
        define_property(obj, "a", data(1, writable=False))
        with pytest.raises(IllegalMutationError):
            obj.a = 2
        assert obj.a == 1

    def test_read_only_inherited(self):
        """Test that inherited read-only properties cannot be shadowed by assignment."""
        parent = allocate()
        define_property(parent, "a", data(1, writable=False))
        child = allocate(parent)
        with pytest.raises(IllegalMutationError):
            child.a = 2

    def test_inherited_setter(self):
        """Test that inherited setters run against the receiver."""
        parent = allocate()

        def setter(self, value):
            self._value = value * 10

        define_property(parent, "value", AttributeRecord(setter=setter))
        child = allocate(parent)
        child.value = 4
        assert child._value == 40
        assert "_value" not in own_property_names(parent, include_hidden=True)

    def test_getter_without_setter(self):
        """Test that assigning to a getter-only property fails."""
        obj = allocate()
        define_property(obj, "a", AttributeRecord(getter=lambda self: 1))
        with pytest.raises(IllegalMutationError):
            obj.a = 2

    def test_assigned_function_is_bound(self):
        """Test that assigned functions receive the object, unless static."""
        obj = allocate()
        obj.who = lambda self: self
        obj.double = staticmethod(lambda v: v * 2)
        assert obj.who() is obj
        assert obj.double(3) == 6

    def test_reserved_names(self):
        """Test that store slots cannot be assigned as properties."""
        obj = allocate()
        with pytest.raises(AttributeError):
            obj.__proto__ = allocate()


class TestDeletion:
    """Tests for removing properties."""

    def test_delete(self):
        """Test deleting an own configurable property."""
        obj = allocate()
        obj.a = 1
        del obj.a
        assert "a" not in obj

    def test_delete_missing_is_noop(self):
        """Test that deleting a missing name is ignored."""
        obj = allocate()
        del obj.nothing

    def test_delete_non_configurable(self):
        """Test that non-configurable properties cannot be deleted."""
        obj = allocate()
        define_property(obj, "a", data(1, configurable=False))
        with pytest.raises(IllegalMutationError):
            del obj.a


class TestDefineProperty:
    """Tests for define_property."""

    def test_mapping_descriptor(self):
        """Test defining from a descriptor mapping."""
        obj = allocate()
        define_property(obj, "a", {"value": 1, "enumerable": True})
        record = get_own_property_descriptor(obj, "a")
        assert record.value == 1
        assert record.writable is False
        assert own_property_names(obj) == ["a"]

    def test_redefine_configurable(self):
        """Test that configurable properties can be redefined freely."""
        obj = allocate()
        define_property(obj, "a", data(1))
        define_property(obj, "a", AttributeRecord(getter=lambda self: 2))
        assert obj.a == 2

    def test_redefine_non_configurable(self):
        """Test that non-configurable properties reject changes."""
        obj = allocate()
        define_property(obj, "a", data(1, writable=False, configurable=False))
        with pytest.raises(IllegalMutationError):
            define_property(obj, "a", data(2, writable=False, configurable=False))
        with pytest.raises(IllegalMutationError):
            define_property(obj, "a", data(1, configurable=True))
        define_property(obj, "a", data(1, writable=False, configurable=False))

    def test_tighten_writable(self):
        """Test that a non-configurable property may become read-only."""
        obj = allocate()
        define_property(obj, "a", data(1, configurable=False))
        define_property(obj, "a", data(5, writable=False, configurable=False))
        assert obj.a == 5
        with pytest.raises(IllegalMutationError):
            obj.a = 6

    def test_accessor_must_be_callable(self):
        """Test that non-callable accessors are rejected."""
        obj = allocate()
        with pytest.raises(TypeError):
            define_property(obj, "a", AttributeRecord(getter=42))

    def test_partial_mapping_keeps_current_flags(self):
        """Test that redefining from a partial mapping only changes named fields."""
        obj = allocate()
        obj.x = 1
        define_property(obj, "x", {"value": 2})
        assert get_own_property_descriptor(obj, "x").as_dict() == data(2).as_dict()
        define_property(obj, "x", {"enumerable": False})
        record = get_own_property_descriptor(obj, "x")
        assert (record.value, record.enumerable, record.writable) == (2, False, True)

    def test_partial_mapping_switches_form(self):
        """Test that accessor keys replace a data property and keep its flags."""
        obj = allocate()
        define_property(obj, "x", data(1, enumerable=False))
        define_property(obj, "x", {"get": lambda self: 5})
        assert get_own_property_descriptor(obj, "x").as_dict() == {
            "get": get_own_property_descriptor(obj, "x").getter,
            "enumerable": False,
            "configurable": True,
        }
        assert obj.x == 5
        define_property(obj, "x", {"value": 6})
        record = get_own_property_descriptor(obj, "x")
        assert record.is_accessor is False
        assert (record.value, record.writable, record.configurable) == (6, False, True)

    def test_partial_mapping_on_non_configurable(self):
        """Test that restating the value of a final property is allowed."""
        obj = allocate()
        define_property(obj, "x", data(1, writable=False, configurable=False))
        define_property(obj, "x", {"value": 1})
        with pytest.raises(IllegalMutationError):
            define_property(obj, "x", {"value": 2})

    def test_descriptor_is_a_copy(self):
        """Test that callers cannot mutate installed records."""
        obj = allocate()
        record = data(1)
        define_property(obj, "a", record)
        record.value = 2
        get_own_property_descriptor(obj, "a").value = 3
        assert obj.a == 1


class TestSealing:
    """Tests for extensibility, sealing and freezing."""

    def test_prevent_extensions(self):
        """Test that non-extensible objects reject new properties."""
        obj = allocate()
        obj.a = 1
        prevent_extensions(obj)
        assert is_extensible(obj) is False
        obj.a = 2
        with pytest.raises(IllegalMutationError):
            obj.b = 1
        with pytest.raises(IllegalMutationError):
            define_property(obj, "b", data(1))
        del obj.a

    def test_seal(self):
        """Test that sealed objects allow writes but no additions or removals."""
        obj = allocate()
        obj.a = 1
        seal(obj)
        assert is_sealed(obj) is True
        assert is_frozen(obj) is False
        obj.a = 2
        assert obj.a == 2
        with pytest.raises(IllegalMutationError):
            obj.b = 1
        with pytest.raises(IllegalMutationError):
            del obj.a

    def test_freeze(self):
        """Test that frozen objects reject writes."""
        obj = allocate()
        obj.a = 1
        freeze(obj)
        assert is_frozen(obj) is True
        with pytest.raises(IllegalMutationError):
            obj.a = 2

    def test_empty_non_extensible_is_sealed(self):
        """Test sealing state of an empty object."""
        obj = allocate()
        assert is_sealed(obj) is False
        prevent_extensions(obj)
        assert is_sealed(obj) is True
        assert is_frozen(obj) is True


class TestPythonProtocols:
    """Tests for repr and the copy module."""

    def test_repr_shows_enumerable_state(self):
        """Test the repr of an object."""
        obj = allocate()
        obj.a = 1
        define_property(obj, "_hidden", data(2, enumerable=False))
        assert repr(obj) == "ProtoObject({a: 1})"

    def test_recursive_repr(self):
        """Test that self references do not recurse forever."""
        obj = allocate()
        obj.me = obj
        assert repr(obj) == "ProtoObject({me: ...})"

    def test_copy_module(self):
        """Test that copy.copy keeps the parent and shares values."""
        parent = allocate()
        obj = allocate(parent)
        obj.items = [1]
        shallow = copy.copy(obj)
        assert isinstance(shallow, ProtoObject)
        assert get_parent(shallow) is parent
        assert shallow.items is obj.items

    def test_deepcopy_module(self):
        """Test that copy.deepcopy copies nested values and keeps cycles."""
        parent = allocate()
        obj = allocate(parent)
        obj.items = [1]
        obj.me = obj
        deep = copy.deepcopy(obj)
        assert get_parent(deep) is parent
        assert deep.items == [1]
        assert deep.items is not obj.items
        assert deep.me is deep
