"""Shortcut functions bound to the default registry."""

from __future__ import annotations

from .expectations import Expectation, expect_spy
from .mock_object import MockObject, mock_object
from .registry import get_registry
from .spy import PassedArgument, Spy, passed_arg


def make_spy(name: str | None = None) -> Spy:
    """Return a new spy that is not registered under any name."""
    return Spy(name)


def get_spy_for(name: str) -> Spy:
    """Return the named spy from the default registry, creating it if needed."""
    return get_registry().get_or_create(name)


def stub_function(name: str) -> Spy:
    """Return the named spy, ready to be programmed as a stub."""
    return get_spy_for(name)


def mock_function(name: str) -> Spy:
    """Alias for :func:`stub_function`."""
    return get_spy_for(name)


def intercept(target: str, *, call_original: bool = False) -> Spy:
    """Replace the attribute at dotted path *target* with a named spy."""
    return get_registry().intercept(target, call_original=call_original)


def finish_spying() -> str | None:
    """Verify pending expectations and reset the default registry."""
    return get_registry().finish()


__all__ = [
    "Expectation",
    "MockObject",
    "PassedArgument",
    "Spy",
    "expect_spy",
    "finish_spying",
    "get_spy_for",
    "intercept",
    "make_spy",
    "mock_function",
    "mock_object",
    "passed_arg",
    "stub_function",
]
