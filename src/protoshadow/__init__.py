"""protoshadow: copy-on-write shadowing of shared prototype data.

Objects delegating to a shared prototype normally share every nested object
the prototype holds; mutating ``instance.settings.depth`` mutates it for all
instances. A made-safe instance instead reads shallow copies of those nested
objects and, on the first write, commits the touched path back as its own
property.

Usage:
    from protoshadow import ProtoObject, make_safe, opt_in

    proto = opt_in(ProtoObject({"b": 2, "c": ProtoObject({"d": "x"})}))
    first = make_safe(ProtoObject({"a": 1}, proto=proto))
    second = make_safe(ProtoObject(proto=proto))

    first.c.e = 1
    first.to_dict()      # {"a": 1, "c": {"d": "x", "e": 1}}
    second.c.to_dict()   # {"d": "x"}
    proto.c.to_dict()    # {"d": "x"}
"""

__version__ = "0.1.0"

# Configuration
from protoshadow.config import ShadowSettings

# Constructors
from protoshadow.constructors import Constructor

# Marking policy and resolution
from protoshadow.core import (
    Participation,
    classify,
    is_excluded,
    is_participating,
    is_terminator,
    mark_terminator,
    opt_in,
    opt_out,
    resolve,
)

# Host object model
from protoshadow.host import (
    ObjectBase,
    ObjectMeta,
    PropertyAssignmentError,
    PropertyDescriptor,
    ProtoObject,
    TerminatorFlagError,
    accessor,
    data,
    shallow_copy,
)
from protoshadow.host.intrinsics import INTRINSICS, OBJECT_TEMPLATE

# Shadowing
from protoshadow.shadow import (
    CommitError,
    ShadowError,
    ShadowNode,
    ShadowProxy,
    ShadowRegistry,
    commit,
    make_safe,
)

__all__ = [
    # Version
    "__version__",
    # Entry point
    "make_safe",
    # Host
    "ObjectBase",
    "ObjectMeta",
    "ProtoObject",
    "PropertyDescriptor",
    "data",
    "accessor",
    "shallow_copy",
    "OBJECT_TEMPLATE",
    "INTRINSICS",
    # Marking
    "Participation",
    "classify",
    "opt_in",
    "opt_out",
    "mark_terminator",
    "is_participating",
    "is_excluded",
    "is_terminator",
    "resolve",
    # Shadowing
    "ShadowProxy",
    "ShadowNode",
    "ShadowRegistry",
    "commit",
    # Construction
    "Constructor",
    # Config
    "ShadowSettings",
    # Errors
    "ShadowError",
    "CommitError",
    "PropertyAssignmentError",
    "TerminatorFlagError",
]
