"""Step definitions for spymox behavioural tests."""
# pyright: reportMissingImports=false, reportUnknownMemberType=false

from __future__ import annotations

import typing as t

from behave import given, then, when  # type: ignore[attr-defined]

from spymox.errors import VerificationError
from spymox.expectations import Expectation
from spymox.registry import SpyRegistry


class BehaveContext(t.Protocol):
    """Behave step context with attributes used in tests."""

    registry: SpyRegistry
    result: t.Any
    finish_error: VerificationError | None


@given("a spy registry")
def step_create_registry(context: BehaveContext) -> None:
    """Create a :class:`SpyRegistry` for the scenario."""
    context.registry = SpyRegistry()


@given('the function "{name}" returns {value:d} when called with {arg:d}')
def step_stub_return(context: BehaveContext, name: str, value: int, arg: int) -> None:
    """Program an argument-specific return value."""
    context.registry.get_or_create(name).with_args(arg).and_return(value)


@given('I expect "{name}" to be called')
def step_expect_called(context: BehaveContext, name: str) -> None:
    """Queue an expectation that the spy is called."""
    spy = context.registry.get_or_create(name)
    Expectation(spy, registry=context.registry).to_be_called()


@given('I expect "{name}" never to be called')
def step_expect_not_called(context: BehaveContext, name: str) -> None:
    """Queue an expectation that the spy is never called."""
    spy = context.registry.get_or_create(name)
    Expectation(spy, registry=context.registry).not_().to_be_called()


@when('I call "{name}" with {arg:d}')
def step_call_spy(context: BehaveContext, name: str, arg: int) -> None:
    """Call the named spy and keep its return value."""
    context.result = context.registry.get_or_create(name)(arg)


@when("I finish spying")
def step_finish(context: BehaveContext) -> None:
    """Finish the registry, capturing any verification failure."""
    context.finish_error = None
    try:
        context.registry.finish()
    except VerificationError as err:
        context.finish_error = err


@then("the result should be {value:d}")
def step_check_result(context: BehaveContext, value: int) -> None:
    """Assert the last call returned *value*."""
    assert context.result == value


@then("the result should be None")
def step_check_result_none(context: BehaveContext) -> None:
    """Assert the last call returned ``None``."""
    assert context.result is None


@then('finishing should fail with "{text}"')
def step_check_finish_failed(context: BehaveContext, text: str) -> None:
    """Assert finishing raised an error mentioning *text*."""
    assert context.finish_error is not None
    assert text in str(context.finish_error)


@then("finishing should succeed")
def step_check_finish_succeeded(context: BehaveContext) -> None:
    """Assert finishing raised nothing."""
    assert context.finish_error is None


@then('"{name}" should have {count:d} recorded calls')
def step_check_call_count(context: BehaveContext, name: str, count: int) -> None:
    """Assert the named spy recorded *count* calls."""
    assert context.registry.get_or_create(name).call_count == count


@then('"{first}" should have been called before "{second}"')
def step_check_order(context: BehaveContext, first: str, second: str) -> None:
    """Assert *first* was called before *second*."""
    spy = context.registry.get_or_create(first)
    assert spy.was_called_before(context.registry.get_or_create(second))


@then('"{first}" should not have been called before "{second}"')
def step_check_not_order(context: BehaveContext, first: str, second: str) -> None:
    """Assert *first* was not called before *second*."""
    spy = context.registry.get_or_create(first)
    assert not spy.was_called_before(context.registry.get_or_create(second))
