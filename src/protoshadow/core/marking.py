"""Marking policy: which objects take part in copy-on-write shadowing.

Three independent flags live on each object's metadata record:

- opt-in: the object's structural data is shadowed per instance.
- opt-out: the object is excluded. Always wins over opt-in.
- terminator: the object is a delegation root (a constructor template).
  Shadowing never wraps it, and the flag cannot be cleared.

Usage:
    proto = opt_in(ProtoObject({"settings": ProtoObject({"depth": 1})}))
    assert is_participating(proto)
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TypeVar

from protoshadow.host.meta import ObjectMeta
from protoshadow.host.protocol import ObjectBase

ObjT = TypeVar("ObjT", bound=ObjectBase)


class Participation(Enum):
    """Classification of an object under the marking policy."""

    PARTICIPATING = auto()
    EXCLUDED = auto()
    UNMARKED = auto()


def _meta(obj: object) -> ObjectMeta:
    if not isinstance(obj, ObjectBase):
        raise TypeError(f"Cannot mark {type(obj).__name__}: not a host object")
    return obj.meta


def opt_in(obj: ObjT) -> ObjT:
    """Mark ``obj`` as participating. Returns ``obj`` for inline use."""
    _meta(obj).opt_in = True
    return obj


def opt_out(obj: ObjT) -> ObjT:
    """Exclude ``obj`` from shadowing, regardless of any opt-in marker."""
    _meta(obj).opt_out = True
    return obj


def mark_terminator(obj: ObjT) -> ObjT:
    """Flag ``obj`` as a delegation root. Permanent for the object's lifetime."""
    _meta(obj).terminator = True
    return obj


def classify(obj: object) -> Participation:
    if not isinstance(obj, ObjectBase):
        return Participation.UNMARKED
    meta = obj.meta
    if meta.opt_out:
        return Participation.EXCLUDED
    if meta.opt_in:
        return Participation.PARTICIPATING
    return Participation.UNMARKED


def is_participating(obj: object) -> bool:
    return classify(obj) is Participation.PARTICIPATING


def is_excluded(obj: object) -> bool:
    return classify(obj) is Participation.EXCLUDED


def is_terminator(obj: object) -> bool:
    return isinstance(obj, ObjectBase) and obj.meta.terminator
