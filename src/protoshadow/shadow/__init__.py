"""Copy-on-write shadowing: registries, interception wrappers, and commits."""

from protoshadow.shadow.commit import CommitError, ShadowError, commit
from protoshadow.shadow.interception import (
    PASSTHROUGH,
    SHADOW,
    CommittedReads,
    Handler,
    PassthroughHandler,
    ShadowHandler,
    ShadowProxy,
    wrap_link,
)
from protoshadow.shadow.models import ShadowNode
from protoshadow.shadow.registry import LinkCache, ShadowRegistry, link_cache, registry_for
from protoshadow.shadow.safe import make_safe

__all__ = [
    # Entry point
    "make_safe",
    # Interception
    "Handler",
    "PassthroughHandler",
    "ShadowHandler",
    "PASSTHROUGH",
    "SHADOW",
    "ShadowProxy",
    "CommittedReads",
    "wrap_link",
    # Bookkeeping
    "ShadowNode",
    "ShadowRegistry",
    "LinkCache",
    "link_cache",
    "registry_for",
    # Commit
    "commit",
    "ShadowError",
    "CommitError",
]
