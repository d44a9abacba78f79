"""Per-object metadata records.

Every host object owns exactly one ObjectMeta. It holds the object's stable
identity token and the marking flags consumed by the marking policy, plus the
hooks the shadowing layer attaches to made-safe instances.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from protoshadow.shadow.registry import ShadowRegistry

_tokens = itertools.count(1)


class TerminatorFlagError(ValueError):
    """Raised when clearing the terminator flag of an object."""

    pass


class ObjectMeta:
    """Metadata record attached to a host object.

    Tokens are handed out from a process-wide counter and never reused, so they
    can key arenas and caches without holding the object itself.

    Args:
        opt_in: Object's structural properties are shadowed per instance.
        opt_out: Object is excluded from shadowing. Wins over opt_in.
        terminator: Object is a delegation root; shadowing stops at it.
    """

    __slots__ = (
        "token",
        "opt_in",
        "opt_out",
        "_terminator",
        "link_hook",
        "read_hook",
        "shadows",
    )

    def __init__(
        self, *, opt_in: bool = False, opt_out: bool = False, terminator: bool = False
    ) -> None:
        self.token: int = next(_tokens)
        self.opt_in = opt_in
        self.opt_out = opt_out
        self._terminator = terminator
        # Applied to every new delegation target (set by make_safe)
        self.link_hook: Callable[[Any], Any] | None = None
        # Applied to every property read (set on committed shadow copies)
        self.read_hook: Callable[[Any, str, Any, Any], Any] | None = None
        self.shadows: ShadowRegistry | None = None

    @property
    def terminator(self) -> bool:
        return self._terminator

    @terminator.setter
    def terminator(self, value: bool) -> None:
        if self._terminator and not value:
            raise TerminatorFlagError(f"Terminator status of object #{self.token} is permanent")
        self._terminator = value

    def __repr__(self) -> str:
        flags = [
            name
            for name, on in (
                ("opt_in", self.opt_in),
                ("opt_out", self.opt_out),
                ("terminator", self._terminator),
            )
            if on
        ]
        return f"ObjectMeta(token={self.token}, flags={flags})"
