"""Entry point turning an instance's delegation into copy-on-write shadowing.

Usage:
    proto = opt_in(ProtoObject({"tags": ProtoObject({"a": 1})}))
    instance = make_safe(ProtoObject(proto=proto))
    instance.tags.b = 2          # instance gets its own copy of tags
    proto.tags.to_dict()         # {"a": 1}
"""

from __future__ import annotations

import logging
from typing import TypeVar

from protoshadow.host.protocol import ObjectBase
from protoshadow.shadow.commit import ShadowError
from protoshadow.shadow.interception import ShadowProxy, wrap_link
from protoshadow.shadow.registry import registry_for

logger = logging.getLogger(__name__)

ObjT = TypeVar("ObjT", bound=ObjectBase)


def make_safe(instance: ObjT) -> ObjT:
    """Wrap the instance's delegation target and keep wrapping future ones.

    Mutates ``instance`` in place: its current link is replaced by the shared
    interception wrapper of the same target, and later relinks pass through
    the same wrapping. Calling it again is a no-op.

    Args:
        instance: Freshly constructed instance.

    Returns:
        The same instance.

    Raises:
        TypeError: If ``instance`` is not a host object.
        ShadowError: If the instance refuses the relink.
    """
    if not isinstance(instance, ObjectBase):
        raise TypeError(f"Cannot make {type(instance).__name__} safe: not a host object")
    if isinstance(instance, ShadowProxy):
        raise TypeError("Cannot make an interception wrapper safe")

    meta = instance.meta
    meta.link_hook = wrap_link
    registry_for(instance)

    proto = instance.get_prototype_of()
    if proto is not None and not isinstance(proto, ShadowProxy):
        if not instance.set_prototype_of(proto):
            raise ShadowError(f"Object #{meta.token} refused to relink its delegation target")
        logger.debug("Made object #%d safe over target #%d", meta.token, proto.meta.token)
    return instance
