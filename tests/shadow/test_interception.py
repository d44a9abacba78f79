"""Tests for the interception layer read and mutation paths.

Critical Invariants:
- Mutating a shadowed read never affects other instances
- Repeated reads before a write return the identical wrapper
- Terminators, accessors, and excluded objects are never wrapped
- A refused mutation never commits
"""

import pytest

from protoshadow import (
    PropertyAssignmentError,
    PropertyDescriptor,
    ProtoObject,
    ShadowProxy,
    accessor,
    data,
    make_safe,
    mark_terminator,
    opt_in,
    opt_out,
)
from protoshadow.shadow import PASSTHROUGH, SHADOW, registry_for

# Read path


def test_structural_read_returns_wrapper_over_copy(instance, proto):
    wrapper = instance.c

    assert isinstance(wrapper, ShadowProxy)
    assert wrapper.unwrap() is not proto.c
    assert wrapper.to_dict() == {"d": "x"}


def test_primitive_values_pass_through(instance):
    assert instance.a == 1
    assert instance.b == 2


def test_isolation_across_instances(instance, other, proto):
    """CRITICAL: Mutating a shadowed read is invisible to other instances.

    Why: This is the whole point of shadowing shared structural data.
    """
    instance.c.d = "changed"

    assert other.c.d == "x"
    assert proto.c.d == "x"
    assert instance.c.d == "changed"


def test_identity_stability_before_write(instance):
    """CRITICAL: Two reads of the same path return the same wrapper."""
    assert instance.c is instance.c


def test_identity_stability_for_nested_paths(deep_proto):
    obj = make_safe(ProtoObject(proto=deep_proto))

    assert obj.a.b.c is obj.a.b.c


def test_aliased_sub_objects_share_one_pending_copy():
    """Two keys aliasing one object observe one pending copy within a traversal."""
    shared = ProtoObject({"v": 0})
    proto = opt_in(ProtoObject({"group": ProtoObject({"left": shared, "right": shared})}))
    obj = make_safe(ProtoObject(proto=proto))

    assert obj.group.left is obj.group.right


def test_wrappers_are_per_instance(instance, other):
    assert instance.c is not other.c


def test_terminator_value_is_returned_unwrapped(proto, instance, other):
    """CRITICAL: Terminators break the shadow chain and stay shared."""
    template = mark_terminator(ProtoObject({"n": 1}))
    proto.define("template", data(template))

    assert instance.template is template
    instance.template.n = 2
    assert other.template.n == 2


def test_accessor_results_are_never_wrapped(proto, instance):
    """CRITICAL: Derived state returned by getters is not shadowed."""
    computed = ProtoObject({"k": 1})
    proto.define("computed", accessor(get=lambda this: computed))

    for _ in range(3):
        assert instance.computed is computed


def test_excluded_value_is_returned_unwrapped(proto, instance):
    legacy = opt_out(ProtoObject({"k": 1}))
    proto.define("legacy", data(legacy))

    assert instance.legacy is legacy


def test_data_held_by_excluded_delegate_stays_shared():
    """Structural data inherited from an excluded object keeps shared semantics."""
    shared = ProtoObject({"k": 1})
    base = opt_out(ProtoObject({"shared": shared}))
    proto = opt_in(ProtoObject(proto=base))
    obj = make_safe(ProtoObject(proto=proto))

    assert obj.shared is shared


def test_data_inherited_from_unmarked_delegate_is_shadowed():
    deep = ProtoObject({"z": ProtoObject({"k": 1})})
    proto = opt_in(ProtoObject(proto=deep))
    obj = make_safe(ProtoObject(proto=proto))

    obj.z.k = 2

    assert obj.get_own_property("z").value.to_dict() == {"k": 2}
    assert deep.z.k == 1


def test_unmarked_proto_is_not_shadowed():
    proto = ProtoObject({"c": ProtoObject({"d": "x"})})
    obj = make_safe(ProtoObject(proto=proto))

    assert obj.c is proto.c
    assert obj.get_prototype_of().handler is PASSTHROUGH


def test_opting_in_after_make_safe_takes_effect():
    proto = ProtoObject({"c": ProtoObject({"d": "x"})})
    obj = make_safe(ProtoObject(proto=proto))

    opt_in(proto)

    assert obj.get_prototype_of().handler is SHADOW
    assert isinstance(obj.c, ShadowProxy)


def test_direct_read_through_shared_wrapper_is_not_shadowed(instance, proto):
    wrapper = instance.get_prototype_of()

    assert wrapper.c is proto.c


def test_self_reference_is_not_shadowed():
    proto = opt_in(ProtoObject())
    proto.define("me", data(proto))
    obj = make_safe(ProtoObject(proto=proto))

    assert obj.get_prototype_of().get_property("me", obj) is proto


def test_reading_creates_no_own_property(instance):
    _ = instance.c

    assert instance.own_keys() == ["a"]


# Opt-out precedence


@pytest.mark.parametrize(
    "mutate",
    [
        lambda c: setattr(c, "e", 1),
        lambda c: c.define("e", data(1)),
        lambda c: c.delete_property("d"),
        lambda c: c.prevent_extensions(),
        lambda c: c.set_prototype_of(ProtoObject()),
    ],
    ids=["write", "define", "remove", "prevent_extension", "relink"],
)
def test_double_marked_proto_behaves_like_unmarked(mutate):
    """CRITICAL: opt-in plus opt-out behaves identically to an unmarked object."""
    outcomes = []
    for mark in (lambda p: p, lambda p: opt_out(opt_in(p))):
        proto = mark(ProtoObject({"c": ProtoObject({"d": "x"})}))
        obj = make_safe(ProtoObject(proto=proto))

        mutate(obj.c)

        outcomes.append(
            (
                obj.c is proto.c,
                obj.own_keys(),
                proto.c.to_dict(),
                proto.c.is_extensible(),
            )
        )

    assert outcomes[0] == outcomes[1]


# Mutation path


def test_remove_commits_copy(instance, proto):
    del instance.c.d

    assert instance.get_own_property("c").value.to_dict() == {}
    assert proto.c.to_dict() == {"d": "x"}


def test_define_commits_copy(instance, proto):
    instance.c.define("hidden", data(1, enumerable=False))

    committed = instance.get_own_property("c").value
    assert committed.get_own_property("hidden").value == 1
    assert proto.c.get_own_property("hidden") is None


def test_prevent_extension_commits_copy(instance, proto):
    assert instance.c.prevent_extensions()

    assert not instance.get_own_property("c").value.is_extensible()
    assert proto.c.is_extensible()


def test_relink_commits_copy(instance, proto):
    parent = ProtoObject({"inherited": True})

    assert instance.c.set_prototype_of(parent)

    committed = instance.get_own_property("c").value
    assert committed.get_prototype_of() is parent
    assert committed.inherited is True
    assert proto.c.get_prototype_of() is None


def test_refused_write_does_not_commit(proto, instance):
    """CRITICAL: A failed mutation propagates and leaves shadow state intact."""
    proto.c.define("locked", PropertyDescriptor(value=1))

    wrapper = instance.c
    with pytest.raises(PropertyAssignmentError):
        wrapper.locked = 2

    assert instance.get_own_property("c") is None
    assert len(registry_for(instance)) == 1
    assert instance.c is wrapper


def test_raising_setter_does_not_commit():
    def reject(this, value):
        raise RuntimeError("rejected")

    inner = ProtoObject()
    inner.define("guarded", accessor(set=reject))
    proto = opt_in(ProtoObject({"inner": inner}))
    obj = make_safe(ProtoObject(proto=proto))

    with pytest.raises(RuntimeError, match="rejected"):
        obj.inner.guarded = 1

    assert obj.get_own_property("inner") is None


def test_first_level_assignment_lands_on_instance(instance, proto):
    replacement = ProtoObject({"z": 1})

    instance.c = replacement

    assert instance.get_own_property("c").value is replacement
    assert proto.c.to_dict() == {"d": "x"}


def test_committed_wrapper_degrades_to_passthrough(instance):
    wrapper = instance.c
    wrapper.e = 1

    assert wrapper.handler is PASSTHROUGH
    wrapper.f = 2
    assert instance.c.to_dict() == {"d": "x", "e": 1, "f": 2}
