"""Unit tests for attribute interception."""

from __future__ import annotations

import inspect

import pytest

from spymox import (
    AttributeInterceptor,
    InvalidArgumentError,
    Spy,
    SpyRegistry,
    intercept,
)
from spymox.registry import get_registry

from . import targets


def test_intercepted_function_is_recorded() -> None:
    """Module globals resolved at call time see the spy."""
    registry = SpyRegistry()
    spy = registry.intercept("spymox.unittests.targets.greet")
    spy.and_return("stubbed")

    assert targets.shout("bob") == "STUBBED"
    assert spy.was_called_with("bob")
    assert registry.get_spy("spymox.unittests.targets.greet") is spy

    registry.finish()
    assert targets.shout("bob") == "HELLO BOB"


def test_call_original_keeps_behaviour() -> None:
    """Delegating spies record calls and return the real result."""
    registry = SpyRegistry()
    spy = registry.intercept("spymox.unittests.targets.greet", call_original=True)

    assert targets.greet("ann") == "hello ann"
    assert spy.call_count == 1
    registry.clear_all_spies()


def test_call_original_can_be_overridden_per_arguments() -> None:
    """Argument-specific returns take precedence over the original."""
    registry = SpyRegistry()
    spy = registry.intercept("spymox.unittests.targets.greet", call_original=True)
    spy.with_args("eve").and_return("blocked")

    assert targets.greet("eve") == "blocked"
    assert targets.greet("ann") == "hello ann"
    registry.clear_all_spies()


def test_static_method_is_restored_as_defined() -> None:
    """Class attributes are put back exactly as they were stored."""
    stored = inspect.getattr_static(targets.Greeter, "render")
    registry = SpyRegistry()
    registry.intercept("spymox.unittests.targets.Greeter.render").and_return("x")

    assert targets.Greeter.render("bob") == "x"
    registry.clear_all_spies()
    assert inspect.getattr_static(targets.Greeter, "render") is stored
    assert targets.Greeter.render("bob") == "hi bob"


def test_inherited_attribute_is_removed_on_restore() -> None:
    """Attributes found on a base class are deleted from the subclass again."""
    registry = SpyRegistry()
    registry.intercept("spymox.unittests.targets.PoliteGreeter.render")
    assert "render" in vars(targets.PoliteGreeter)

    registry.clear_all_spies()
    assert "render" not in vars(targets.PoliteGreeter)
    assert targets.PoliteGreeter.render("amy") == "hi amy"


def test_reinstall_keeps_first_original() -> None:
    """Intercepting twice restores the real object, not the first spy."""
    interceptor = AttributeInterceptor()
    target = "spymox.unittests.targets.greet"
    original = targets.greet
    first = interceptor.install(target, Spy())
    interceptor.install(target, Spy())

    assert interceptor.original(target) is original
    assert interceptor.original(target) is not first
    assert interceptor.targets == [target]
    interceptor.restore_all()
    assert targets.greet is original
    assert target not in interceptor


def test_restore_is_newest_first() -> None:
    """Nested interceptions unwind in reverse order."""
    interceptor = AttributeInterceptor()
    interceptor.install("spymox.unittests.targets.greet", Spy())
    interceptor.install("spymox.unittests.targets.shout", Spy())
    assert interceptor.targets == [
        "spymox.unittests.targets.greet",
        "spymox.unittests.targets.shout",
    ]
    interceptor.restore_all()
    assert interceptor.targets == []
    assert targets.shout("x") == "HELLO X"


@pytest.mark.parametrize(
    ("target", "fragment"),
    [
        ("greet", "dotted"),
        ("spymox.unittests.no_such_module.greet", "could not be resolved"),
        ("spymox.unittests.targets.missing", "has no 'missing'"),
    ],
)
def test_invalid_targets(target: str, fragment: str) -> None:
    """Unresolvable paths raise InvalidArgumentError."""
    with pytest.raises(InvalidArgumentError, match=fragment):
        AttributeInterceptor().install(target, Spy())


def test_original_of_unknown_target() -> None:
    """Asking for the original of an untouched target is an error."""
    with pytest.raises(InvalidArgumentError, match="is not intercepted"):
        AttributeInterceptor().original("spymox.unittests.targets.greet")


def test_module_level_intercept_uses_default_registry() -> None:
    """intercept() registers the spy by its target path."""
    spy = intercept("spymox.unittests.targets.greet")
    assert get_registry().get_spy("spymox.unittests.targets.greet") is spy
    assert targets.greet("z") is None
    get_registry().finish()
    assert targets.greet("z") == "hello z"
