"""Tests for the ordinary delegating object model.

Critical Invariants:
- Reads follow the delegation chain, writes land on the receiver
- Non-writable, non-configurable, and non-extensible contracts refuse changes
- Relinking refuses cycles, also when closed through a wrapper
- Shallow copies share nested objects but not the own-property table
"""

import pytest

from protoshadow import make_safe
from protoshadow.host import (
    ProtoObject,
    PropertyAssignmentError,
    PropertyDescriptor,
    accessor,
    data,
    shallow_copy,
)


@pytest.fixture
def base():
    return ProtoObject({"x": 1, "nested": ProtoObject({"y": 2})})


@pytest.fixture
def child(base):
    return ProtoObject(proto=base)


def test_read_follows_delegation_chain(child, base):
    assert child.x == 1
    assert child.nested is base.nested
    assert child["x"] == 1


def test_missing_property_raises_attribute_and_key_errors(child):
    with pytest.raises(AttributeError):
        _ = child.missing
    with pytest.raises(KeyError):
        _ = child["missing"]
    assert child.get_property("missing") is None


def test_assignment_of_inherited_property_creates_own_property(child, base):
    """Assignment shadows the inherited value on the receiver; the delegate is untouched."""
    child.x = 5

    assert child.x == 5
    assert base.x == 1
    assert child.own_keys() == ["x"]


def test_inherited_non_writable_refuses_assignment(base, child):
    base.define("frozen", data(1, writable=False))

    with pytest.raises(PropertyAssignmentError):
        child.frozen = 2
    assert child.get_own_property("frozen") is None


def test_accessor_runs_with_receiver(base, child):
    base.define("double", accessor(get=lambda this: this.x * 2))
    child.x = 10

    assert base.double == 2
    assert child.double == 20


def test_accessor_setter_receives_receiver(base, child):
    base.define("alias", accessor(set=lambda this, value: this.define("x", data(value))))

    child.alias = 7

    assert child.get_own_property("x").value == 7
    assert base.x == 1


def test_accessor_without_setter_refuses_assignment(base):
    base.define("ro", accessor(get=lambda this: 1))

    with pytest.raises(PropertyAssignmentError):
        base.ro = 2


def test_non_configurable_property_refuses_redefinition_and_delete(base):
    base.define("fixed", PropertyDescriptor(value=1, writable=True, enumerable=True))

    assert base.define_own_property("fixed", data(2, configurable=False))
    assert not base.define_own_property("fixed", data(3))
    assert not base.delete_property("fixed")
    assert base.fixed == 2


def test_non_writable_non_configurable_accepts_only_same_value(base):
    base.define("const", PropertyDescriptor(value=1))

    assert base.define_own_property("const", PropertyDescriptor(value=1))
    assert not base.define_own_property("const", PropertyDescriptor(value=2))


def test_non_extensible_object_refuses_new_properties(base):
    base.prevent_extensions()

    assert not base.is_extensible()
    with pytest.raises(PropertyAssignmentError):
        base.z = 1
    base.x = 3
    assert base.x == 3


def test_non_extensible_object_refuses_relink(base):
    obj = ProtoObject()
    obj.prevent_extensions()

    assert not obj.set_prototype_of(base)
    assert obj.set_prototype_of(None)


def test_relink_refuses_cycles(base, child):
    assert not base.set_prototype_of(child)
    assert base.get_prototype_of() is None


def test_relink_refuses_cycles_through_wrappers():
    """CRITICAL: A cycle closed through a wrapper is refused like a direct one.

    Why: Made-safe instances reach each other only through wrappers, and an
    accepted cycle makes every missing-property lookup recurse forever.
    """
    first = make_safe(ProtoObject())
    second = make_safe(ProtoObject(proto=first))

    assert not first.set_prototype_of(second)
    assert first.get_prototype_of() is None
    assert second.get_property("missing") is None


def test_delete_missing_property_succeeds(base):
    del base.x
    assert "x" not in base
    assert base.delete_property("never-defined")


def test_shallow_copy_shares_nested_objects(base):
    base.define("hidden", data("h", enumerable=False))

    copy = shallow_copy(base)

    assert copy is not base
    assert copy.nested is base.nested
    assert copy.get_own_property("hidden").value == "h"
    assert copy.get_prototype_of() is base.get_prototype_of()


def test_shallow_copy_has_independent_property_table(base):
    copy = shallow_copy(base)

    copy.x = 99

    assert base.x == 1


def test_shallow_copy_keeps_extensibility_but_not_markers(base):
    base.meta.opt_in = True
    base.prevent_extensions()

    copy = shallow_copy(base)

    assert not copy.is_extensible()
    assert not copy.meta.opt_in
    assert copy.meta.token != base.meta.token


def test_to_dict_skips_accessors_and_non_enumerable(base):
    base.define("calc", accessor(get=lambda this: 1))
    base.define("secret", data(1, enumerable=False))

    assert base.to_dict() == {"x": 1, "nested": {"y": 2}}


def test_to_dict_and_repr_render_cycles(base):
    """An object reached again on its own path is rendered as a marker."""
    base.nested.back = base
    base.define("me", data(base))

    assert base.to_dict() == {"x": 1, "nested": {"y": 2, "back": "..."}, "me": "..."}
    assert repr(base) == "ProtoObject({'x': 1, 'nested': {'y': 2, 'back': '...'}, 'me': '...'})"


def test_underscore_names_are_not_properties(base):
    with pytest.raises(AttributeError):
        _ = base._missing
    base["_private"] = 1
    assert base["_private"] == 1
