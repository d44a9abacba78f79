"""Instance construction: templates, initializers, and safe instances.

Usage:
    def init_widget(this, name):
        this.name = name

    Widget = Constructor("Widget", init_widget, safe=True)
    opt_in(Widget.template)
    Widget.template.define("style", data(ProtoObject({"color": "red"})))

    w = Widget("ok")
    w.style.color = "blue"       # w gets its own style; the template keeps red
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from protoshadow.config import ShadowSettings
from protoshadow.core.marking import mark_terminator
from protoshadow.host.intrinsics import OBJECT_TEMPLATE
from protoshadow.host.objects import ProtoObject
from protoshadow.host.protocol import ObjectBase
from protoshadow.shadow.safe import make_safe

Initializer = Callable[..., None]


class Constructor:
    """Creates instances delegating to a shared template object.

    Any object assigned as a template becomes a terminator: other instances'
    shadowing never copies through it.

    Args:
        name: Constructor name, for diagnostics.
        initializer: Called as ``initializer(instance, *args, **kwargs)``.
        template: Delegation target of new instances. A fresh object delegating
            to OBJECT_TEMPLATE when omitted.
        safe: Make every instance safe. Defaults to ``ShadowSettings().auto_safe``.
    """

    def __init__(
        self,
        name: str,
        initializer: Initializer | None = None,
        *,
        template: ObjectBase | None = None,
        safe: bool | None = None,
    ):
        self.name = name
        self._initializer = initializer
        self._template: ObjectBase = ProtoObject(proto=OBJECT_TEMPLATE)
        self.template = template if template is not None else self._template
        self.safe = ShadowSettings().auto_safe if safe is None else safe

    @property
    def template(self) -> ObjectBase:
        return self._template

    @template.setter
    def template(self, value: ObjectBase) -> None:
        self._template = mark_terminator(value)

    def __call__(self, *args: Any, **kwargs: Any) -> ProtoObject:
        """Construct an instance: link, make safe if enabled, then initialize."""
        instance = ProtoObject(proto=self._template)
        if self.safe:
            make_safe(instance)
        if self._initializer is not None:
            self._initializer(instance, *args, **kwargs)
        return instance

    def __repr__(self) -> str:
        return f"Constructor({self.name!r}, safe={self.safe})"
