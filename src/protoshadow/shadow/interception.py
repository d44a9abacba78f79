"""Interception layer between instances and their delegated object graph.

A ShadowProxy wraps either a delegation target (first level, shared by every
instance linking to it) or a shadow copy (nested levels, private to one
instance). Each operation is dispatched to one of two strategies:

- PASSTHROUGH: forward to the wrapped object unchanged.
- SHADOW: on reads, hand out lazily created copies of structural sub-objects;
  on mutations, mutate the copy and commit it back onto the owning instance.

First-level wrappers pick SHADOW when their target participates under the
marking policy. Nested wrappers pick SHADOW while their node is live, and
degrade to PASSTHROUGH once it has been committed.
"""

from __future__ import annotations

import logging
import weakref
from typing import Any, Protocol

from protoshadow.core.marking import is_excluded, is_participating, is_terminator
from protoshadow.core.resolver import resolve_holder
from protoshadow.host.descriptors import PropertyDescriptor
from protoshadow.host.meta import ObjectMeta
from protoshadow.host.objects import shallow_copy
from protoshadow.host.protocol import ObjectBase
from protoshadow.shadow.commit import commit
from protoshadow.shadow.models import ShadowNode
from protoshadow.shadow.registry import link_cache, registry_for

logger = logging.getLogger(__name__)


class Handler(Protocol):
    """Named operations an interception strategy implements."""

    def read(self, proxy: ShadowProxy, key: str, receiver: ObjectBase) -> Any: ...

    def write(self, proxy: ShadowProxy, key: str, value: Any, receiver: ObjectBase) -> bool: ...

    def define(self, proxy: ShadowProxy, key: str, descriptor: PropertyDescriptor) -> bool: ...

    def remove(self, proxy: ShadowProxy, key: str) -> bool: ...

    def prevent_extension(self, proxy: ShadowProxy) -> bool: ...

    def relink(self, proxy: ShadowProxy, proto: ObjectBase | None) -> bool: ...


class PassthroughHandler:
    """Forwards every operation to the wrapped object."""

    def read(self, proxy: ShadowProxy, key: str, receiver: ObjectBase) -> Any:
        return proxy.unwrap().get_property(key, receiver)

    def write(self, proxy: ShadowProxy, key: str, value: Any, receiver: ObjectBase) -> bool:
        return proxy.unwrap().set_property(key, value, receiver)

    def define(self, proxy: ShadowProxy, key: str, descriptor: PropertyDescriptor) -> bool:
        return proxy.unwrap().define_own_property(key, descriptor)

    def remove(self, proxy: ShadowProxy, key: str) -> bool:
        return proxy.unwrap().delete_property(key)

    def prevent_extension(self, proxy: ShadowProxy) -> bool:
        return proxy.unwrap().prevent_extensions()

    def relink(self, proxy: ShadowProxy, proto: ObjectBase | None) -> bool:
        return proxy.unwrap().set_prototype_of(proto)


def _shadow_value(
    target: ObjectBase,
    key: str,
    value: Any,
    receiver: ObjectBase,
    owner: ObjectBase,
    root_key: str,
    depth: int,
) -> Any:
    """Return what ``owner`` observes for ``value``, read from ``target[key]``.

    Structural values come back as the owner's shadow wrapper (reused while
    pending) or as the copy it already committed for the same original.
    Everything else is returned unchanged.
    """
    found = resolve_holder(target, key)
    if found is None or found[1].is_accessor:
        return value
    # Data held by excluded objects (intrinsics) keeps its shared semantics
    if is_excluded(found[0]):
        return value
    if not isinstance(value, ObjectBase) or isinstance(value, ShadowProxy):
        return value
    if value is receiver or value is target:
        return value
    # Terminators are independent template roots: shared, never wrapped
    if is_terminator(value) or is_excluded(value):
        return value
    # Already an owned copy
    if value.meta.read_hook is not None:
        return value

    registry = registry_for(owner)
    existing = registry.get(root_key, value)
    if existing is not None:
        return existing
    # A root read means the owner holds no copy under root_key any more
    committed = registry.materialized(root_key, value) if depth > 0 else None
    if committed is not None:
        return committed

    shadow = ShadowNode(
        original=value,
        value=shallow_copy(value),
        parent=target,
        property_key=key,
        root_key=root_key,
        depth=depth,
        owner_ref=weakref.ref(owner),
    )
    wrapper = ShadowProxy(shadow.value, shadow)
    registry.register(shadow, wrapper)
    logger.debug(
        "Shadowed %r at depth %d under root %r for object #%d",
        key,
        depth,
        root_key,
        owner.meta.token,
    )
    return wrapper


class ShadowHandler:
    """Copy-on-read, commit-on-write strategy."""

    def read(self, proxy: ShadowProxy, key: str, receiver: ObjectBase) -> Any:
        target = proxy.unwrap()
        value = target.get_property(key, receiver)
        if value is proxy:
            return value

        node = proxy.node
        if node is None:
            # Read made on the shared wrapper itself, not on behalf of an instance
            if receiver is proxy:
                return value
            owner = receiver
            root_key, depth = key, 0
        else:
            owner = node.owner
            if owner is None:
                return value
            root_key, depth = node.root_key, node.depth + 1
        return _shadow_value(target, key, value, receiver, owner, root_key, depth)

    def write(self, proxy: ShadowProxy, key: str, value: Any, receiver: ObjectBase) -> bool:
        node = proxy.node
        if node is None:
            # Ordinary delegation: the assignment lands on the receiver
            return proxy.unwrap().set_property(key, value, receiver)
        ok = proxy.unwrap().set_property(key, value)
        if ok:
            commit(node)
        return ok

    def define(self, proxy: ShadowProxy, key: str, descriptor: PropertyDescriptor) -> bool:
        ok = proxy.unwrap().define_own_property(key, descriptor)
        return self._settle(proxy, ok)

    def remove(self, proxy: ShadowProxy, key: str) -> bool:
        ok = proxy.unwrap().delete_property(key)
        return self._settle(proxy, ok)

    def prevent_extension(self, proxy: ShadowProxy) -> bool:
        ok = proxy.unwrap().prevent_extensions()
        return self._settle(proxy, ok)

    def relink(self, proxy: ShadowProxy, proto: ObjectBase | None) -> bool:
        ok = proxy.unwrap().set_prototype_of(proto)
        return self._settle(proxy, ok)

    @staticmethod
    def _settle(proxy: ShadowProxy, ok: bool) -> bool:
        if ok and proxy.node is not None:
            commit(proxy.node)
        return ok


PASSTHROUGH = PassthroughHandler()
SHADOW = ShadowHandler()


def _is_live(node: ShadowNode) -> bool:
    owner = node.owner
    if owner is None:
        return False
    registry = owner.meta.shadows
    return registry is not None and registry.is_live(node)


class ShadowProxy(ObjectBase):
    """Wrapper routing an object's operations through an interception strategy.

    Args:
        target: Wrapped delegation target or shadow copy.
        node: Shadow node staging ``target``; None for first-level wrappers.
    """

    __slots__ = ("_target", "_node", "__weakref__")

    def __init__(self, target: ObjectBase, node: ShadowNode | None = None) -> None:
        self._target = target
        self._node = node

    def unwrap(self) -> ObjectBase:
        """Return the wrapped object."""
        return self._target

    @property
    def node(self) -> ShadowNode | None:
        return self._node

    @property
    def handler(self) -> Handler:
        """Strategy currently applying to this wrapper."""
        if self._node is not None:
            return SHADOW if _is_live(self._node) else PASSTHROUGH
        return SHADOW if is_participating(self._target) else PASSTHROUGH

    @property
    def meta(self) -> ObjectMeta:
        return self._target.meta

    def get_own_property(self, key: str) -> PropertyDescriptor | None:
        return self._target.get_own_property(key)

    def own_keys(self) -> list[str]:
        return self._target.own_keys()

    def has_property(self, key: str) -> bool:
        return self._target.has_property(key)

    def get_prototype_of(self) -> ObjectBase | None:
        return self._target.get_prototype_of()

    def is_extensible(self) -> bool:
        return self._target.is_extensible()

    def get_property(self, key: str, receiver: ObjectBase | None = None) -> Any:
        return self.handler.read(self, key, self if receiver is None else receiver)

    def set_property(self, key: str, value: Any, receiver: ObjectBase | None = None) -> bool:
        return self.handler.write(self, key, value, self if receiver is None else receiver)

    def define_own_property(self, key: str, descriptor: PropertyDescriptor) -> bool:
        return self.handler.define(self, key, descriptor)

    def delete_property(self, key: str) -> bool:
        return self.handler.remove(self, key)

    def prevent_extensions(self) -> bool:
        return self.handler.prevent_extension(self)

    def set_prototype_of(self, proto: ObjectBase | None) -> bool:
        return self.handler.relink(self, proto)

    def __repr__(self) -> str:
        return f"ShadowProxy({self._target!r})"


def wrap_link(target: ObjectBase) -> ShadowProxy:
    """Return the shared first-level wrapper for a delegation target."""
    if isinstance(target, ShadowProxy):
        return target
    wrapper = link_cache.get(target)
    if wrapper is None:
        wrapper = ShadowProxy(target)
        link_cache.register(target, wrapper)
        logger.debug("Wrapped delegation target #%d", target.meta.token)
    return wrapper


class CommittedReads:
    """Read hook keeping a committed copy's still-shared sub-objects shadowed.

    A committed copy is plain owned data, but its untouched nested values are
    still the prototype's objects. Reads through it go on handing out the
    owner's shadows of those, one level deeper than the copy itself.

    Args:
        owner: Instance that owns the committed copy (held weakly).
        root_key: Top-level key of the traversal the copy belongs to.
        depth: Depth of the committed copy in that traversal.
    """

    __slots__ = ("_owner_ref", "root_key", "depth")

    def __init__(self, owner: ObjectBase, root_key: str, depth: int) -> None:
        self._owner_ref = weakref.ref(owner)
        self.root_key = root_key
        self.depth = depth

    @property
    def owner(self) -> ObjectBase | None:
        return self._owner_ref()

    def __call__(self, obj: ObjectBase, key: str, value: Any, receiver: ObjectBase) -> Any:
        owner = self._owner_ref()
        if owner is None:
            return value
        return _shadow_value(obj, key, value, receiver, owner, self.root_key, self.depth + 1)
