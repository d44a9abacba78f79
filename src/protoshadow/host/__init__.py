"""Host object model: descriptors, metadata records, and delegating objects."""

from protoshadow.host.descriptors import PropertyDescriptor, accessor, data
from protoshadow.host.meta import ObjectMeta, TerminatorFlagError
from protoshadow.host.objects import ProtoObject, shallow_copy
from protoshadow.host.protocol import ObjectBase, PropertyAssignmentError

__all__ = [
    # Descriptors
    "PropertyDescriptor",
    "data",
    "accessor",
    # Metadata
    "ObjectMeta",
    "TerminatorFlagError",
    # Objects
    "ObjectBase",
    "ProtoObject",
    "PropertyAssignmentError",
    "shallow_copy",
]
