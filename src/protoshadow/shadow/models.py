"""Shadow node records.

A node stages a pending copy of one structural object reached through an
instance's delegation chain. It never references another node: ``parent`` is
the parent level's copy (or, at depth 0, the delegation target the value was
read from), and the owning instance is held weakly.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field

from protoshadow.host.objects import ProtoObject
from protoshadow.host.protocol import ObjectBase


@dataclass(eq=False, slots=True)
class ShadowNode:
    """Bookkeeping for one lazily created shallow copy.

    Attributes:
        original: Object the copy was taken from (shared, never mutated).
        value: The shallow copy receiving mutations.
        parent: Object the value hangs off: parent copy, or the delegation target at depth 0.
        property_key: Key under which the value hangs off ``parent``.
        root_key: Top-level key of the traversal this node belongs to.
        depth: Distance from the traversal root (0 for the root itself).
    """

    original: ObjectBase
    value: ProtoObject
    parent: ObjectBase
    property_key: str
    root_key: str
    depth: int
    owner_ref: weakref.ReferenceType[ObjectBase] = field(repr=False)

    @property
    def token(self) -> int:
        """Identity token of the copy, keying the node in its registry."""
        return self.value.meta.token

    @property
    def owner(self) -> ObjectBase | None:
        """Instance on whose behalf the copy exists, or None once reclaimed."""
        return self.owner_ref()

    @property
    def is_root(self) -> bool:
        return self.depth == 0
