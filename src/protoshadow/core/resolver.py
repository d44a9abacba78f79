"""Descriptor resolution along a delegation chain."""

from __future__ import annotations

from protoshadow.host.descriptors import PropertyDescriptor
from protoshadow.host.protocol import ObjectBase


def resolve_holder(obj: ObjectBase, key: str) -> tuple[ObjectBase, PropertyDescriptor] | None:
    """Return the object defining ``key`` nearest to ``obj``, with its descriptor.

    Args:
        obj: Object to start the walk from.
        key: Property name.

    Returns:
        (holder, descriptor), or None if no object in the chain defines ``key``.
    """
    current: ObjectBase | None = obj
    while current is not None:
        descriptor = current.get_own_property(key)
        if descriptor is not None:
            return current, descriptor
        current = current.get_prototype_of()
    return None


def resolve(obj: ObjectBase, key: str) -> PropertyDescriptor | None:
    """Return the first own definition of ``key`` on ``obj`` or its delegates.

    Accessors are returned as descriptors, never invoked.
    """
    found = resolve_holder(obj, key)
    return found[1] if found is not None else None
