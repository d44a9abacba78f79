"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from protoshadow import ProtoObject, make_safe, opt_in


@pytest.fixture
def proto():
    """Opted-in prototype: {b: 2, c: {d: 'x'}}."""
    return opt_in(ProtoObject({"b": 2, "c": ProtoObject({"d": "x"})}))


@pytest.fixture
def instance(proto):
    """Made-safe instance {a: 1} delegating to proto."""
    return make_safe(ProtoObject({"a": 1}, proto=proto))


@pytest.fixture
def other(proto):
    """Second made-safe instance delegating to the same proto."""
    return make_safe(ProtoObject(proto=proto))


@pytest.fixture
def deep_proto():
    """Opted-in prototype with a three-level structural path a.b.c.leaf."""
    return opt_in(
        ProtoObject({"a": ProtoObject({"b": ProtoObject({"c": ProtoObject({"leaf": 0})})})})
    )
