"""Checks evaluated by :class:`~spymox.expectations.Expectation`.

Each check answers two questions about a spy: does the call record satisfy
it, and how should a failure be described. Descriptions follow the same
layout as every other spymox failure: a one-line title followed by labelled,
indented sections::

    'add_one' was called with (5).

    Expected:
      add_one(5)

    Recorded calls:
      1. add_one(4)
"""

from __future__ import annotations

import typing as t
from textwrap import indent

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .call_record import CallRecordEntry
    from .comparators import ArgumentSpec
    from .spy import Spy

FAILURE_PREFIX = "Failed asserting that "


def _format_call(name: str, args_repr: str) -> str:
    return f"{name}({args_repr})"


def _describe_entry(name: str, entry: CallRecordEntry | None) -> str:
    if entry is None:
        return "(none)"
    return _format_call(name, str(entry))


def _numbered(entries: t.Sequence[str], *, start: int = 1) -> str:
    if not entries:
        return "(none)"
    lines: list[str] = []
    for index, entry in enumerate(entries, start=start):
        entry_lines = entry.splitlines() or [""]
        lines.append(f"{index}. {entry_lines[0]}")
        lines.extend(f"   {extra}" for extra in entry_lines[1:])
    return "\n".join(lines)


def _format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    parts = [title]
    for label, body in sections:
        if not body:
            continue
        parts.append("")
        parts.append(f"{label}:")
        parts.append(indent(body, "  "))
    return "\n".join(parts)


def describe_calls(spy: Spy) -> str:
    """Return a numbered listing of every call recorded by *spy*."""
    return _numbered([_describe_entry(spy.name, entry) for entry in spy.calls])


def _verb(*, negated: bool) -> str:
    return "was not called" if negated else "was called"


def _count_matching(spy: Spy, arguments: ArgumentSpec) -> int:
    return sum(1 for entry in spy.calls if arguments.matches(entry.args, entry.kwargs))


class Check(t.Protocol):
    """A deferred assertion about a single spy."""

    def matches(self, spy: Spy) -> bool:
        """Return ``True`` when the call record of *spy* satisfies the check."""
        ...

    def describe(self, spy: Spy, *, negated: bool) -> str:
        """Return what was asserted, followed by diagnostic sections."""
        ...


class WasCalled:
    """The spy was called at least once."""

    def matches(self, spy: Spy) -> bool:
        return spy.was_called()

    def describe(self, spy: Spy, *, negated: bool) -> str:
        return _format_sections(
            f"{spy.name!r} {_verb(negated=negated)}.",
            [
                ("Observed calls", str(spy.call_count)),
                ("Recorded calls", describe_calls(spy)),
            ],
        )


class WasCalledTimes:
    """The spy was called exactly ``count`` times, optionally with ``arguments``."""

    def __init__(self, count: int, arguments: ArgumentSpec | None = None) -> None:
        self.count = count
        self.arguments = arguments

    def _observed(self, spy: Spy) -> int:
        if self.arguments is None:
            return spy.call_count
        return _count_matching(spy, self.arguments)

    def matches(self, spy: Spy) -> bool:
        return self._observed(spy) == self.count

    def describe(self, spy: Spy, *, negated: bool) -> str:
        title = f"{spy.name!r} {_verb(negated=negated)} {self.count} time(s)"
        expected = ""
        if self.arguments is not None:
            title += f" with ({self.arguments})"
            expected = _format_call(spy.name, str(self.arguments))
        observed = self._observed(spy)
        observed_repr = (
            str(observed) if negated else f"{observed} (expected {self.count})"
        )
        return _format_sections(
            f"{title}.",
            [
                ("Expected", expected),
                ("Observed calls", observed_repr),
                ("Recorded calls", describe_calls(spy)),
            ],
        )


class WasCalledWith:
    """At least one recorded call matched ``arguments``."""

    def __init__(self, arguments: ArgumentSpec) -> None:
        self.arguments = arguments

    def matches(self, spy: Spy) -> bool:
        return _count_matching(spy, self.arguments) > 0

    def describe(self, spy: Spy, *, negated: bool) -> str:
        return _format_sections(
            f"{spy.name!r} {_verb(negated=negated)} with ({self.arguments}).",
            [
                ("Expected", _format_call(spy.name, str(self.arguments))),
                ("Recorded calls", describe_calls(spy)),
            ],
        )


class WasCalledWhen:
    """``func`` returned a truthy value for at least one recorded call."""

    def __init__(self, func: t.Callable[..., object]) -> None:
        self.func = func

    def matches(self, spy: Spy) -> bool:
        return any(self.func(*entry.args, **entry.kwargs) for entry in spy.calls)

    def describe(self, spy: Spy, *, negated: bool) -> str:
        label = getattr(self.func, "__qualname__", None) or repr(self.func)
        return _format_sections(
            f"{spy.name!r} {_verb(negated=negated)} when {label} holds.",
            [("Recorded calls", describe_calls(spy))],
        )


class WasCalledBefore:
    """The first call of the spy predates the first call of ``target``."""

    def __init__(self, target: Spy) -> None:
        self.target = target

    def matches(self, spy: Spy) -> bool:
        return spy.was_called_before(self.target)

    def describe(self, spy: Spy, *, negated: bool) -> str:
        negation = " not" if negated else ""
        return _format_sections(
            f"{spy.name!r} was{negation} called before {self.target.name!r}.",
            [
                (
                    f"First call of {spy.name!r}",
                    _describe_entry(spy.name, spy.calls.first),
                ),
                (
                    f"First call of {self.target.name!r}",
                    _describe_entry(self.target.name, self.target.calls.first),
                ),
            ],
        )


def failure_message(check: Check, spy: Spy, *, negated: bool = False) -> str | None:
    """Return the failure text for *check*, or ``None`` when it holds."""
    if check.matches(spy) != negated:
        return None
    return FAILURE_PREFIX + check.describe(spy, negated=negated)


__all__ = [
    "FAILURE_PREFIX",
    "Check",
    "WasCalled",
    "WasCalledBefore",
    "WasCalledTimes",
    "WasCalledWhen",
    "WasCalledWith",
    "describe_calls",
    "failure_message",
]
