"""Host object protocol: the internal operations every object-like value supports.

Internal operations report refusal through their return value and never raise
for it. The Python sugar on top (attribute and item access) turns refusals
into exceptions.

Usage:
    obj.get_property("c")          # internal read, None when undefined
    obj.c                          # sugar, AttributeError when undefined
    obj["c"] = 1                   # sugar, PropertyAssignmentError on refusal
    if "c" in obj:
        ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from protoshadow.host.descriptors import PropertyDescriptor
from protoshadow.host.meta import ObjectMeta


class PropertyAssignmentError(TypeError):
    """Raised when an assignment, deletion, or definition is refused."""

    pass


class ObjectBase(ABC):
    """Abstract base for objects taking part in delegation chains.

    Property names starting with an underscore are reserved for implementation
    state and are not reachable through attribute sugar; use item access for
    them, and for properties whose names collide with the methods below.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def meta(self) -> ObjectMeta: ...

    @abstractmethod
    def get_own_property(self, key: str) -> PropertyDescriptor | None: ...

    @abstractmethod
    def own_keys(self) -> list[str]: ...

    @abstractmethod
    def define_own_property(self, key: str, descriptor: PropertyDescriptor) -> bool: ...

    @abstractmethod
    def delete_property(self, key: str) -> bool: ...

    @abstractmethod
    def has_property(self, key: str) -> bool: ...

    @abstractmethod
    def get_property(self, key: str, receiver: ObjectBase | None = None) -> Any: ...

    @abstractmethod
    def set_property(self, key: str, value: Any, receiver: ObjectBase | None = None) -> bool: ...

    @abstractmethod
    def get_prototype_of(self) -> ObjectBase | None: ...

    @abstractmethod
    def set_prototype_of(self, proto: ObjectBase | None) -> bool: ...

    @abstractmethod
    def is_extensible(self) -> bool: ...

    @abstractmethod
    def prevent_extensions(self) -> bool: ...

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or not self.has_property(name):
            raise AttributeError(f"{type(self).__name__} has no property {name!r}")
        return self.get_property(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        if not self.set_property(name, value):
            raise PropertyAssignmentError(f"Cannot assign to property {name!r}")

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        if not self.delete_property(name):
            raise PropertyAssignmentError(f"Cannot delete property {name!r}")

    def __getitem__(self, key: str) -> Any:
        if not self.has_property(key):
            raise KeyError(key)
        return self.get_property(key)

    def __setitem__(self, key: str, value: Any) -> None:
        if not self.set_property(key, value):
            raise PropertyAssignmentError(f"Cannot assign to property {key!r}")

    def __delitem__(self, key: str) -> None:
        if not self.delete_property(key):
            raise PropertyAssignmentError(f"Cannot delete property {key!r}")

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has_property(key)

    def define(self, key: str, descriptor: PropertyDescriptor) -> None:
        """Define an own property, raising if the definition is refused."""
        if not self.define_own_property(key, descriptor):
            raise PropertyAssignmentError(f"Cannot define property {key!r}")

    def to_dict(self, _active: frozenset[int] = frozenset()) -> dict[str, Any]:
        """Snapshot own enumerable data properties, converting nested objects.

        Reads descriptors directly, so accessors are not invoked and no
        shadow copies are created. An object met again on its own path is
        rendered as ``"..."``.
        """
        active = _active | {self.meta.token}
        result: dict[str, Any] = {}
        for key in self.own_keys():
            descriptor = self.get_own_property(key)
            if descriptor is None or descriptor.is_accessor or not descriptor.enumerable:
                continue
            value = descriptor.value
            if not isinstance(value, ObjectBase):
                result[key] = value
            elif value.meta.token in active:
                result[key] = "..."
            else:
                result[key] = value.to_dict(active)
        return result
