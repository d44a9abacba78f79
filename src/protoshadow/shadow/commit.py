"""Commit engine: materialize pending shadow copies onto their owning instance.

A commit walks from a node toward its traversal root, attaching each copy to
its parent copy, and finally installs the root copy as an own property of the
owning instance. The walk is an explicit stack of live nodes collected from
the registry; it stops early when a parent level was already materialized by
an earlier commit, since attaching to that parent copy completes the change.
Committed copies get a read hook that keeps their shared sub-objects shadowed.
"""

from __future__ import annotations

import logging

from protoshadow.core.resolver import resolve
from protoshadow.host.descriptors import data
from protoshadow.host.protocol import ObjectBase
from protoshadow.shadow.models import ShadowNode
from protoshadow.shadow.registry import ShadowRegistry, registry_for

logger = logging.getLogger(__name__)


class ShadowError(Exception):
    """Base class for shadowing failures."""

    pass


class CommitError(ShadowError):
    """Raised when a pending copy cannot be materialized."""

    pass


def _path_to_root(registry: ShadowRegistry, node: ShadowNode) -> list[ShadowNode]:
    """Collect live nodes from ``node`` up to its root, leaf first."""
    path = [node]
    current = node
    while not current.is_root:
        parent = registry.node_for(current.parent)
        if parent is None:
            break
        path.append(parent)
        current = parent
    return path


def _attach(node: ShadowNode) -> None:
    """Make ``node.value`` an own property of the parent copy.

    Other own data properties of the parent aliasing the same original are
    pointed at the copy too.
    """
    existing = node.parent.get_own_property(node.property_key)
    if existing is not None and existing.is_data:
        if existing.value is node.value:
            return
        descriptor = existing.with_value(node.value)
    else:
        descriptor = data(node.value)
    if not node.parent.define_own_property(node.property_key, descriptor):
        raise CommitError(f"Parent copy refused property {node.property_key!r}")

    for key in node.parent.own_keys():
        alias = node.parent.get_own_property(key)
        if alias is not None and alias.is_data and alias.value is node.original:
            node.parent.define_own_property(key, alias.with_value(node.value))


def _install(owner: ObjectBase, node: ShadowNode) -> bool:
    """Install the root copy on the owner with the root property's attributes.

    Returns False when the commit is stale and nothing was installed.
    """
    key = node.property_key
    current = owner.get_own_property(key)
    if current is not None and not (current.is_data and current.value is node.value):
        logger.debug("Skipped stale commit of %r on object #%d", key, owner.meta.token)
        return False
    template = resolve(node.parent, key)
    if template is not None and template.is_data:
        descriptor = template.with_value(node.value)
    else:
        descriptor = data(node.value)
    if not owner.define_own_property(key, descriptor):
        raise CommitError(f"Object #{owner.meta.token} refused own property {key!r}")
    return True


def commit(node: ShadowNode) -> ObjectBase:
    """Materialize ``node`` and its pending ancestors onto the owning instance.

    Each level is retired from the registry once attached, turning its
    wrapper into a passthrough over what is now owned data. Committed copies
    keep shadowing the sub-objects they still share with the prototype, so
    later writes through them never reach it.

    Args:
        node: Node whose copy was just mutated.

    Returns:
        The owning instance.

    Raises:
        CommitError: If the owner was reclaimed or a level refuses its copy.
    """
    from protoshadow.shadow.interception import CommittedReads

    owner = node.owner
    if owner is None:
        raise CommitError("Owner of the shadow copy no longer exists")
    registry = registry_for(owner)
    if not registry.is_live(node):
        return owner

    path = _path_to_root(registry, node)
    for level in path:
        if level.is_root and not _install(owner, level):
            registry.discard(level)
            continue
        if not level.is_root:
            _attach(level)
        level.value.meta.read_hook = CommittedReads(owner, level.root_key, level.depth)
        registry.retire(level)

    logger.debug(
        "Committed %d level(s) under root %r on object #%d",
        len(path),
        node.root_key,
        owner.meta.token,
    )
    return owner
