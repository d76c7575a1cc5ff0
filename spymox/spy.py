"""Recording stand-ins for callables.

A :class:`Spy` records every call made to it and can be programmed to return
values, optionally depending on the arguments it receives::

    add_one = Spy("add_one")
    add_one.with_args(5).and_return(6)
    add_one.with_args(1).and_return(2)

    add_one(5)   # 6
    add_one(99)  # None

Spies never raise on behalf of the code calling them; assertions belong to
:class:`~spymox.expectations.Expectation` or the ``assert_*`` helpers below.
"""

from __future__ import annotations

import dataclasses as dc
import typing as t

from .call_record import CallRecord, CallRecordEntry
from .comparators import ArgumentSpec
from .errors import InvalidArgumentError
from .verifiers import (
    WasCalled,
    WasCalledTimes,
    WasCalledWith,
    failure_message,
)

ANONYMOUS_NAME = "anonymous function"

_UNSET: t.Final = object()


@dc.dataclass(frozen=True, slots=True)
class PassedArgument:
    """Return marker standing for one of the arguments of the current call.

    Integer indexes select positional arguments, string keys select keyword
    arguments.
    """

    index: int | str


def passed_arg(index: int | str) -> PassedArgument:
    """Return a marker that makes a stub echo the argument at *index*."""
    return PassedArgument(index)


@dc.dataclass(frozen=True, slots=True)
class ReturnRule:
    """Value returned when a call matches ``arguments``."""

    arguments: ArgumentSpec
    value: t.Any


class Spy:
    """A callable that records its invocations and returns programmed values.

    Parameters
    ----------
    name:
        Optional name used in failure descriptions.
    max_calls:
        Optional bound on the number of recorded calls; older calls are
        discarded once it is exceeded.
    """

    def __init__(
        self, name: str | None = None, *, max_calls: int | None = None
    ) -> None:
        self._name = name
        self._calls = CallRecord(max_entries=max_calls)
        self._default_return: t.Any = _UNSET
        self._conditional_returns: list[ReturnRule] = []
        self._pending_arguments: ArgumentSpec | None = None

    def __repr__(self) -> str:
        return f"<Spy {self.name!r} calls={self.call_count}>"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        """Return the spy name, or a placeholder for anonymous spies."""
        return self._name if self._name is not None else ANONYMOUS_NAME

    @name.setter
    def name(self, value: str | None) -> None:
        self._name = value

    # ------------------------------------------------------------------
    # Calling
    # ------------------------------------------------------------------
    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        """Record the call and return the programmed value."""
        return self.call_with_args(args, kwargs)

    def call(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        """Alias for calling the spy directly."""
        return self.call_with_args(args, kwargs)

    def call_with_args(
        self,
        args: t.Iterable[t.Any],
        kwargs: t.Mapping[str, t.Any] | None = None,
    ) -> t.Any:
        """Call the spy with an explicit argument sequence and mapping."""
        call_args = tuple(args)
        call_kwargs = dict(kwargs or {})
        entry = self._calls.append(call_args, call_kwargs)
        # Return values see the live arguments; the record keeps a snapshot.
        live = dc.replace(entry, args=call_args, kwargs=call_kwargs)
        return self._resolve_return(live)

    def _resolve_return(self, entry: CallRecordEntry) -> t.Any:
        for rule in self._conditional_returns:
            if rule.arguments.matches(entry.args, entry.kwargs):
                return self._filter_return(rule.value, entry)
        if self._default_return is not _UNSET:
            return self._filter_return(self._default_return, entry)
        return None

    def _filter_return(self, value: t.Any, entry: CallRecordEntry) -> t.Any:
        if isinstance(value, PassedArgument):
            return self._passed_argument(value, entry)
        if callable(value):
            return value(*entry.args, **entry.kwargs)
        return value

    def _passed_argument(
        self, marker: PassedArgument, entry: CallRecordEntry
    ) -> t.Any:
        try:
            if isinstance(marker.index, str):
                return entry.kwargs[marker.index]
            return entry.args[marker.index]
        except (IndexError, KeyError) as exc:
            msg = (
                f"{self.name!r} was configured to return argument "
                f"{marker.index!r} but was called with ({entry})"
            )
            raise InvalidArgumentError(msg) from exc

    # ------------------------------------------------------------------
    # Programming return values
    # ------------------------------------------------------------------
    def with_args(self, *args: t.Any, **kwargs: t.Any) -> Spy:
        """Restrict the next :meth:`and_return` to calls matching these arguments."""
        self._pending_arguments = ArgumentSpec.of(*args, **kwargs)
        return self

    def and_return(self, value: t.Any) -> Spy:
        """Return *value* when called.

        After :meth:`with_args` the value only applies to matching calls and
        is added after any earlier argument-specific values; otherwise it
        becomes the default return value. Callables are invoked with the
        call arguments and :class:`PassedArgument` markers echo an argument.
        """
        if self._pending_arguments is not None:
            self._conditional_returns.append(ReturnRule(self._pending_arguments, value))
            self._pending_arguments = None
        else:
            self._default_return = value
        return self

    def will_return(self, value: t.Any) -> Spy:
        """Alias for :meth:`and_return`."""
        return self.and_return(value)

    def that_returns(self, value: t.Any) -> Spy:
        """Alias for :meth:`and_return`."""
        return self.and_return(value)

    def returns(self, value: t.Any) -> Spy:
        """Alias for :meth:`and_return`."""
        return self.and_return(value)

    def and_return_first_argument(self) -> Spy:
        """Return the first positional argument when called."""
        return self.and_return(passed_arg(0))

    def and_return_second_argument(self) -> Spy:
        """Return the second positional argument when called."""
        return self.and_return(passed_arg(1))

    @property
    def return_rules(self) -> list[ReturnRule]:
        """Return the argument-specific return values in evaluation order."""
        return list(self._conditional_returns)

    # ------------------------------------------------------------------
    # Call record queries
    # ------------------------------------------------------------------
    @property
    def calls(self) -> CallRecord:
        """Return the call record."""
        return self._calls

    @property
    def call_count(self) -> int:
        """Return the number of recorded calls."""
        return len(self._calls)

    @property
    def last_call(self) -> CallRecordEntry | None:
        """Return the most recent call, if any."""
        return self._calls.last

    def clear_call_record(self) -> None:
        """Forget all recorded calls, keeping programmed return values."""
        self._calls.clear()

    def was_called(self) -> bool:
        """Return ``True`` if the spy was called at least once."""
        return bool(self._calls)

    def was_called_times(self, times: int) -> bool:
        """Return ``True`` if the spy was called exactly *times* times."""
        return len(self._calls) == times

    def was_called_with(self, *args: t.Any, **kwargs: t.Any) -> bool:
        """Return ``True`` if any recorded call matches the given arguments."""
        spec = ArgumentSpec.of(*args, **kwargs)
        return any(spec.matches(entry.args, entry.kwargs) for entry in self._calls)

    def was_called_before(self, other: Spy) -> bool:
        """Return ``True`` if this spy's first call predates that of *other*."""
        mine = self._calls.first
        theirs = other.calls.first
        if mine is None or theirs is None:
            return False
        return mine.instant < theirs.instant

    # ------------------------------------------------------------------
    # Assertion helpers
    # ------------------------------------------------------------------
    def assert_called(self) -> None:
        """Raise ``AssertionError`` if the spy was never called."""
        self._raise_if_failed(failure_message(WasCalled(), self))

    def assert_not_called(self) -> None:
        """Raise ``AssertionError`` if the spy was called."""
        self._raise_if_failed(failure_message(WasCalled(), self, negated=True))

    def assert_called_times(self, times: int) -> None:
        """Raise ``AssertionError`` unless the spy was called *times* times."""
        self._raise_if_failed(failure_message(WasCalledTimes(times), self))

    def assert_called_with(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Raise ``AssertionError`` unless a call matched the given arguments."""
        check = WasCalledWith(ArgumentSpec.of(*args, **kwargs))
        self._raise_if_failed(failure_message(check, self))

    @staticmethod
    def _raise_if_failed(message: str | None) -> None:
        if message is not None:
            raise AssertionError(message)


__all__ = ["ANONYMOUS_NAME", "PassedArgument", "ReturnRule", "Spy", "passed_arg"]
