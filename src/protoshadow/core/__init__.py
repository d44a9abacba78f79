"""Core policy: marking scheme and descriptor resolution.

Architecture Note:
    core/ holds stateless decisions over host objects. The stateful shadowing
    machinery (registries, wrappers, commits) lives in shadow/.
"""

from protoshadow.core.marking import (
    Participation,
    classify,
    is_excluded,
    is_participating,
    is_terminator,
    mark_terminator,
    opt_in,
    opt_out,
)
from protoshadow.core.resolver import resolve, resolve_holder

__all__ = [
    # Marking
    "Participation",
    "classify",
    "opt_in",
    "opt_out",
    "mark_terminator",
    "is_participating",
    "is_excluded",
    "is_terminator",
    # Resolution
    "resolve",
    "resolve_holder",
]
