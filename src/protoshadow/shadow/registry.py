"""Shadow registries: per-instance arenas of live shadow nodes.

Each made-safe instance lazily gets one ShadowRegistry, stored on its metadata
record and reclaimed together with the instance. Nodes are indexed by
(root key, original token) so that aliasing paths within one traversal
observe one pending copy, and are removed explicitly when committed. Committed
copies stay indexed the same way (weakly) so later reads of another alias find
them.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING

from protoshadow.host.protocol import ObjectBase
from protoshadow.shadow.models import ShadowNode

if TYPE_CHECKING:
    from protoshadow.shadow.interception import ShadowProxy


class ShadowRegistry:
    """Arena of live shadow nodes owned by one instance.

    Args:
        owner: Instance the registry belongs to (held weakly).
    """

    def __init__(self, owner: ObjectBase):
        self._owner_ref = weakref.ref(owner)
        self._nodes: dict[int, ShadowNode] = {}  # copy token -> node
        self._proxies: dict[int, ShadowProxy] = {}  # copy token -> wrapper
        self._index: dict[tuple[str, int], int] = {}  # (root key, original token) -> copy token
        # (root key, original token) -> copy committed onto the owner
        self._materialized: weakref.WeakValueDictionary[tuple[str, int], ObjectBase] = (
            weakref.WeakValueDictionary()
        )

    @property
    def owner(self) -> ObjectBase | None:
        return self._owner_ref()

    def get(self, root_key: str, original: ObjectBase) -> ShadowProxy | None:
        """Return the live wrapper staging ``original`` within the ``root_key`` traversal."""
        token = self._index.get((root_key, original.meta.token))
        if token is None:
            return None
        return self._proxies[token]

    def materialized(self, root_key: str, original: ObjectBase) -> ObjectBase | None:
        """Return the copy of ``original`` already committed within the ``root_key`` traversal."""
        return self._materialized.get((root_key, original.meta.token))

    def register(self, node: ShadowNode, proxy: ShadowProxy) -> None:
        key = (node.root_key, node.original.meta.token)
        if key in self._index:
            raise ValueError(f"Object #{key[1]} already shadowed under root {key[0]!r}")
        if node.is_root:
            # A fresh traversal of the root starts from the prototype again
            for stale in [k for k in self._materialized if k[0] == node.root_key]:
                self._materialized.pop(stale, None)
        self._nodes[node.token] = node
        self._proxies[node.token] = proxy
        self._index[key] = node.token

    def node_for(self, copy: ObjectBase) -> ShadowNode | None:
        """Return the live node whose copy is ``copy``, if any."""
        return self._nodes.get(copy.meta.token)

    def is_live(self, node: ShadowNode) -> bool:
        return self._nodes.get(node.token) is node

    def discard(self, node: ShadowNode) -> None:
        """Remove a committed node. Its wrapper degrades to passthrough."""
        if self._nodes.pop(node.token, None) is None:
            return
        self._proxies.pop(node.token, None)
        self._index.pop((node.root_key, node.original.meta.token), None)

    def retire(self, node: ShadowNode) -> None:
        """Discard a committed node, remembering its copy for later alias reads."""
        if self.is_live(node):
            self._materialized[(node.root_key, node.original.meta.token)] = node.value
        self.discard(node)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return isinstance(node, ShadowNode) and self.is_live(node)


def registry_for(owner: ObjectBase) -> ShadowRegistry:
    """Get the shadow registry of ``owner``, creating it on first use."""
    meta = owner.meta
    if meta.shadows is None:
        meta.shadows = ShadowRegistry(owner)
    return meta.shadows


class LinkCache:
    """Process-wide cache of first-level wrappers, one per delegation target.

    Every made-safe instance delegating to the same prototype shares that
    prototype's wrapper. Entries vanish once no instance links the wrapper.
    """

    def __init__(self) -> None:
        self._wrappers: weakref.WeakValueDictionary[int, ShadowProxy] = (
            weakref.WeakValueDictionary()
        )

    def get(self, target: ObjectBase) -> ShadowProxy | None:
        return self._wrappers.get(target.meta.token)

    def register(self, target: ObjectBase, proxy: ShadowProxy) -> None:
        self._wrappers[target.meta.token] = proxy

    def __len__(self) -> int:
        return len(self._wrappers)


link_cache = LinkCache()
