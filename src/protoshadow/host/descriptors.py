"""Property descriptors: the structural definition of a single own property.

Usage:
    count = data(0)                                  # writable, enumerable, configurable
    version = data("1.0", writable=False)
    area = accessor(get=lambda this: this.width * this.height)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """Data or accessor definition of one property.

    A descriptor carrying a getter or a setter is an accessor; otherwise it is a
    data descriptor. Attribute defaults are all False, matching an explicit
    definition that names nothing but the value.
    """

    value: Any = None
    get: Getter | None = None
    set: Setter | None = None
    writable: bool = False
    enumerable: bool = False
    configurable: bool = False

    def __post_init__(self) -> None:
        if self.is_accessor and (self.writable or self.value is not None):
            raise ValueError("Accessor descriptors cannot carry a value or be writable")

    @property
    def is_accessor(self) -> bool:
        return self.get is not None or self.set is not None

    @property
    def is_data(self) -> bool:
        return not self.is_accessor

    def with_value(self, value: Any) -> PropertyDescriptor:
        """Return a data descriptor with the same attributes and a new value.

        Raises:
            ValueError: If this descriptor is an accessor.
        """
        if self.is_accessor:
            raise ValueError("Cannot attach a value to an accessor descriptor")
        return replace(self, value=value)


def data(
    value: Any,
    *,
    writable: bool = True,
    enumerable: bool = True,
    configurable: bool = True,
) -> PropertyDescriptor:
    """Data descriptor with the attributes an ordinary assignment produces."""
    return PropertyDescriptor(
        value=value, writable=writable, enumerable=enumerable, configurable=configurable
    )


def accessor(
    get: Getter | None = None,
    set: Setter | None = None,
    *,
    enumerable: bool = True,
    configurable: bool = True,
) -> PropertyDescriptor:
    """Accessor descriptor. Getters receive the receiver, setters (receiver, value)."""
    if get is None and set is None:
        raise ValueError("Accessor descriptors need a getter or a setter")
    return PropertyDescriptor(get=get, set=set, enumerable=enumerable, configurable=configurable)
