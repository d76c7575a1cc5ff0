"""Deferred, chainable assertions about a single spy."""

from __future__ import annotations

import typing as t

from .comparators import ArgumentSpec, Comparator
from .errors import InvalidArgumentError, InvalidExpectationAttributeError
from .registry import get_registry
from .spy import Spy
from .verifiers import (
    WasCalled,
    WasCalledBefore,
    WasCalledTimes,
    WasCalledWhen,
    WasCalledWith,
    failure_message,
)

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .registry import SpyRegistry
    from .reporting import Reporter
    from .verifiers import Check


def _is_call_predicate(value: object) -> bool:
    """Return ``True`` if *value* should be treated as a :meth:`when` function."""
    return callable(value) and not isinstance(value, (Comparator, Spy, type))


class Expectation:
    """Expected behaviour of a :class:`~spymox.spy.Spy`.

    Builder methods only record what to check; nothing is compared until
    :meth:`verify`, :meth:`get_fail_message` or :meth:`met_expectations` runs
    the checks in the order they were added. Evaluation stops at the first
    failing check.

    Parameters
    ----------
    spy:
        The spy to check. Passing anything else, including the name of a
        spy, raises :class:`~spymox.errors.InvalidArgumentError`.
    registry:
        Registry the expectation is queued on for :meth:`SpyRegistry.finish`.
        Defaults to the active default registry.
    reporter:
        Sink receiving the outcome of :meth:`verify` and any failure found by
        :meth:`SpyRegistry.resolve_expectations`. Defaults to the
        registry's reporter.
    """

    def __init__(
        self,
        spy: Spy,
        *,
        registry: SpyRegistry | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        if isinstance(spy, str):
            msg = f"Expectations require a Spy but were passed a string: {spy!r}"
            raise InvalidArgumentError(msg)
        if not isinstance(spy, Spy):
            msg = f"Expectations require a Spy, got {type(spy).__name__}"
            raise InvalidArgumentError(msg)
        self.spy = spy
        self.negated = False
        self.silent_failures = False
        self.was_verified = False
        self._checks: list[Check] = []
        self._expected_arguments: ArgumentSpec | None = None
        self._reporter = reporter
        self._registry = registry if registry is not None else get_registry()
        self._registry.add_expectation(self)

    def __getattr__(self, name: str) -> t.NoReturn:
        msg = f"Invalid property: {name!r} does not exist on this Expectation"
        raise InvalidExpectationAttributeError(msg)

    def __repr__(self) -> str:
        return (
            f"<Expectation spy={self.spy.name!r} checks={len(self._checks)} "
            f"negated={self.negated}>"
        )

    @property
    def reporter(self) -> Reporter:
        """Return the sink used by :meth:`verify`."""
        if self._reporter is not None:
            return self._reporter
        return self._registry.reporter

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------
    def not_(self) -> Expectation:
        """Negate every check on this expectation."""
        self.negated = True
        return self

    def to_be_called(self) -> Expectation:
        """Expect the spy to have been called."""
        self._checks.append(WasCalled())
        return self

    def to_have_been_called(self) -> Expectation:
        """Alias for :meth:`to_be_called`."""
        return self.to_be_called()

    def with_args(self, *args: t.Any, **kwargs: t.Any) -> Expectation:
        """Expect at least one call matching the given arguments.

        A single plain function is treated as a call predicate and forwarded
        to :meth:`when`. The arguments also filter any :meth:`times` check
        added later in the chain.
        """
        if len(args) == 1 and not kwargs and _is_call_predicate(args[0]):
            return self.when(args[0])
        arguments = ArgumentSpec.of(*args, **kwargs)
        self._expected_arguments = arguments
        self._checks.append(WasCalledWith(arguments))
        return self

    def with_(self, *args: t.Any, **kwargs: t.Any) -> Expectation:
        """Alias for :meth:`with_args`."""
        return self.with_args(*args, **kwargs)

    def when(self, func: t.Callable[..., object]) -> Expectation:
        """Expect *func* to return a truthy value for at least one call.

        *func* receives the positional and keyword arguments of each
        recorded call in turn.
        """
        self._checks.append(WasCalledWhen(func))
        return self

    def times(self, count: int) -> Expectation:
        """Expect exactly *count* calls, or *count* matching calls after ``with``."""
        self._checks.append(WasCalledTimes(count, self._expected_arguments))
        return self

    def once(self) -> Expectation:
        """Alias for ``times(1)``."""
        return self.times(1)

    def twice(self) -> Expectation:
        """Alias for ``times(2)``."""
        return self.times(2)

    def before(self, target: Spy) -> Expectation:
        """Expect the first call of the spy to precede the first call of *target*."""
        self._checks.append(WasCalledBefore(target))
        return self

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------
    def _first_failure(self) -> str | None:
        for check in self._checks:
            message = failure_message(check, self.spy, negated=self.negated)
            if message is not None:
                return message
        return None

    def verify(self) -> str | bool | None:
        """Run the checks and report the outcome.

        Returns the first failure description, or ``None`` when every check
        holds. With :attr:`silent_failures` set, returns ``True`` or ``False``
        instead and reports nothing.
        """
        self.was_verified = True
        message = self._first_failure()
        if self.silent_failures:
            return message is None
        self.reporter(message is None, message or "")
        return message

    def get_fail_message(self) -> str | None:
        """Return the first failure description without reporting it."""
        self.was_verified = True
        return self._first_failure()

    def met_expectations(self) -> bool:
        """Return ``True`` if every check holds."""
        return self.get_fail_message() is None


def expect_spy(spy: Spy) -> Expectation:
    """Create an :class:`Expectation` for *spy* on the default registry."""
    return Expectation(spy)


__all__ = ["Expectation", "expect_spy"]
