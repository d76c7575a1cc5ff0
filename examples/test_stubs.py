"""Example tests demonstrating stub usage."""

from __future__ import annotations

import typing as t

from spymox import Any, IsA, passed_arg, stub_function

pytest_plugins = ("spymox.pytest_plugin",)

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from spymox.registry import SpyRegistry


def test_stub_returns_values_per_arguments(spymox: SpyRegistry) -> None:
    """Stubs return the value programmed for matching arguments."""
    add_one = stub_function("add_one")
    add_one.with_args(5).and_return(6)
    add_one.with_args(1).and_return(2)

    assert add_one(5) == 6
    assert add_one(1) == 2
    assert add_one(99) is None


def test_stub_runs_dynamic_handler(spymox: SpyRegistry) -> None:
    """Callables given as return values compute the result from the call."""

    def handler(name: str, *, greeting: str = "hi") -> str:
        return f"{greeting} {name}"

    greeter = spymox.get_or_create("greeter").and_return(handler)

    assert greeter("spymox") == "hi spymox"
    assert greeter("spymox", greeting="hello") == "hello spymox"


def test_stub_with_comparators_and_default(spymox: SpyRegistry) -> None:
    """Comparators loosen argument matching, and the default covers the rest."""
    fetch = spymox.get_or_create("fetch")
    fetch.with_args(IsA(int), retries=Any()).and_return("by id")
    fetch.and_return("fallback")

    assert fetch(42, retries=3) == "by id"
    assert fetch("latest", retries=3) == "fallback"


def test_stub_echoes_arguments(spymox: SpyRegistry) -> None:
    """Stubs can hand back one of the arguments they were called with."""
    identity = spymox.get_or_create("identity").and_return_first_argument()
    pick = spymox.get_or_create("pick").and_return(passed_arg("key"))

    assert identity("value", "ignored") == "value"
    assert pick(key="chosen") == "chosen"
