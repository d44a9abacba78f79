"""Foundational templates every delegation chain eventually reaches.

These are terminators (delegation roots) and, unless disabled through
``PROTOSHADOW_BUILTINS_OPT_OUT``, carry the opt-out marker so that data they
hold keeps its historical shared semantics.
"""

from __future__ import annotations

from protoshadow.config import ShadowSettings
from protoshadow.host.meta import ObjectMeta
from protoshadow.host.objects import ProtoObject


def _intrinsic(proto: ProtoObject | None, opt_out: bool) -> ProtoObject:
    return ProtoObject(proto=proto, meta=ObjectMeta(opt_out=opt_out, terminator=True))


_opt_out = ShadowSettings().builtins_opt_out

OBJECT_TEMPLATE = _intrinsic(None, _opt_out)
FUNCTION_TEMPLATE = _intrinsic(OBJECT_TEMPLATE, _opt_out)
ARRAY_TEMPLATE = _intrinsic(OBJECT_TEMPLATE, _opt_out)
ERROR_TEMPLATE = _intrinsic(OBJECT_TEMPLATE, _opt_out)

INTRINSICS: dict[str, ProtoObject] = {
    "Object": OBJECT_TEMPLATE,
    "Function": FUNCTION_TEMPLATE,
    "Array": ARRAY_TEMPLATE,
    "Error": ERROR_TEMPLATE,
}
