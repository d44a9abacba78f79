"""Ordinary delegating objects.

Usage:
    point = ProtoObject({"x": 0, "y": 0})
    child = ProtoObject(proto=point)
    child.x               # 0, found through the delegation link
    child.x = 5           # creates an own property on child; point is untouched
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from protoshadow.host.descriptors import PropertyDescriptor, data
from protoshadow.host.meta import ObjectMeta
from protoshadow.host.protocol import ObjectBase


def _same_value(a: Any, b: Any) -> bool:
    return a is b or (type(a) is type(b) and a == b)


def _is_compatible(current: PropertyDescriptor, descriptor: PropertyDescriptor) -> bool:
    """Whether a non-configurable property accepts the redefinition."""
    if descriptor.configurable or descriptor.enumerable != current.enumerable:
        return False
    if descriptor.is_accessor != current.is_accessor:
        return False
    if current.is_accessor:
        return descriptor.get is current.get and descriptor.set is current.set
    if not current.writable:
        return not descriptor.writable and _same_value(descriptor.value, current.value)
    return True


class ProtoObject(ObjectBase):
    """Object with an own-property table and a single delegation link.

    Args:
        properties: Initial own properties, installed as ordinary data properties.
        proto: Delegation target consulted for properties not found here.
        meta: Metadata record (a fresh one by default).
    """

    __slots__ = ("_props", "_proto", "_extensible", "_meta", "__weakref__")

    def __init__(
        self,
        properties: Mapping[str, Any] | None = None,
        *,
        proto: ObjectBase | None = None,
        meta: ObjectMeta | None = None,
    ) -> None:
        self._props: dict[str, PropertyDescriptor] = {}
        self._proto = proto
        self._extensible = True
        self._meta = meta if meta is not None else ObjectMeta()
        for key, value in (properties or {}).items():
            self._props[key] = data(value)

    @property
    def meta(self) -> ObjectMeta:
        return self._meta

    def get_own_property(self, key: str) -> PropertyDescriptor | None:
        return self._props.get(key)

    def own_keys(self) -> list[str]:
        return list(self._props)

    def define_own_property(self, key: str, descriptor: PropertyDescriptor) -> bool:
        current = self._props.get(key)
        if current is None:
            if not self._extensible:
                return False
        elif not current.configurable and not _is_compatible(current, descriptor):
            return False
        self._props[key] = descriptor
        return True

    def delete_property(self, key: str) -> bool:
        current = self._props.get(key)
        if current is None:
            return True
        if not current.configurable:
            return False
        del self._props[key]
        return True

    def has_property(self, key: str) -> bool:
        if key in self._props:
            return True
        return self._proto is not None and self._proto.has_property(key)

    def get_property(self, key: str, receiver: ObjectBase | None = None) -> Any:
        """Read a property through the delegation chain.

        Accessors run with ``receiver`` (this object by default) as their
        subject. Undefined properties read as None. The result passes through
        the metadata read hook, if one is set.
        """
        receiver = self if receiver is None else receiver
        descriptor = self._props.get(key)
        if descriptor is None:
            value = self._proto.get_property(key, receiver) if self._proto is not None else None
        elif descriptor.is_accessor:
            value = descriptor.get(receiver) if descriptor.get is not None else None
        else:
            value = descriptor.value
        hook = self._meta.read_hook
        return value if hook is None else hook(self, key, value, receiver)

    def set_property(self, key: str, value: Any, receiver: ObjectBase | None = None) -> bool:
        """Assign a property, delegating the lookup but writing on the receiver.

        An inherited writable data property is shadowed by a new own property on
        the receiver; an inherited non-writable one refuses the assignment.
        """
        receiver = self if receiver is None else receiver
        descriptor = self._props.get(key)
        if descriptor is None:
            if self._proto is not None:
                return self._proto.set_property(key, value, receiver)
            descriptor = data(None)

        if descriptor.is_accessor:
            if descriptor.set is None:
                return False
            descriptor.set(receiver, value)
            return True

        if not descriptor.writable:
            return False
        existing = receiver.get_own_property(key)
        if existing is not None:
            if existing.is_accessor or not existing.writable:
                return False
            return receiver.define_own_property(key, existing.with_value(value))
        return receiver.define_own_property(key, data(value))

    def get_prototype_of(self) -> ObjectBase | None:
        return self._proto

    def set_prototype_of(self, proto: ObjectBase | None) -> bool:
        if not self._extensible and proto is not self._proto:
            return False
        current = proto
        while current is not None:
            # Wrappers share the meta of what they wrap
            if current.meta is self._meta:
                return False
            current = current.get_prototype_of()
        hook = self._meta.link_hook
        self._proto = hook(proto) if hook is not None and proto is not None else proto
        return True

    def is_extensible(self) -> bool:
        return self._extensible

    def prevent_extensions(self) -> bool:
        self._extensible = False
        return True

    def __repr__(self) -> str:
        return f"ProtoObject({self.to_dict()!r})"


def shallow_copy(obj: ObjectBase) -> ProtoObject:
    """Copy every own descriptor of ``obj`` (enumerable or not) into a new object.

    The copy keeps the original's delegation link and extensibility but none
    of its markers. Nested objects are shared, not copied.
    """
    copy = ProtoObject(proto=obj.get_prototype_of())
    for key in obj.own_keys():
        descriptor = obj.get_own_property(key)
        if descriptor is not None:
            copy._props[key] = descriptor
    if not obj.is_extensible():
        copy.prevent_extensions()
    return copy
