"""Comparator classes and the argument matching rules built on them.

Plain values in an expected argument list are compared by deep equality.
Comparator instances take the place of a value when exact equality is too
strict::

    spy.was_called_with("hello", Any(), Regex(r"^\\d+$"))

Matching is symmetric: a comparator may appear on either side of the
comparison, and ``Any`` on either side always matches.
"""

from __future__ import annotations

import abc
import collections.abc as cabc
import dataclasses as dc
import re
import typing as t


class Comparator(abc.ABC):
    """Callable returning ``True`` when a value matches."""

    __slots__ = ()

    @abc.abstractmethod
    def __call__(self, value: object) -> bool:
        """Return ``True`` if *value* satisfies the comparison."""


@dc.dataclass(frozen=True, slots=True)
class Any(Comparator):
    """Match any value."""

    def __call__(self, value: object) -> bool:
        """Return ``True`` for any input."""
        return True


@dc.dataclass(frozen=True, slots=True)
class IsA(Comparator):
    """Match instances of ``typ`` or values convertible to it."""

    typ: type

    def __call__(self, value: object) -> bool:
        """Return ``True`` when ``value`` is, or converts to, ``typ``."""
        if isinstance(value, self.typ):
            return True
        try:
            self.typ(value)
        except Exception:  # noqa: BLE001 - conversion may fail
            return False
        return True


@dc.dataclass(frozen=True, slots=True)
class Regex(Comparator):
    """Match strings in which ``pattern`` is found."""

    pattern: str
    _compiled: re.Pattern[str] = dc.field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def __call__(self, value: object) -> bool:
        """Return ``True`` if *value* is a string the regex finds a match in."""
        if not isinstance(value, str):
            return False
        return self._compiled.search(value) is not None


@dc.dataclass(frozen=True, slots=True)
class DictContaining(Comparator):
    """Match mappings holding at least the entries of ``expected``.

    Values in ``expected`` may themselves be comparators or nested
    structures; keys missing from ``expected`` are ignored.
    """

    expected: t.Mapping[t.Any, t.Any]

    def __call__(self, value: object) -> bool:
        """Return ``True`` if every expected entry is present in *value*."""
        if not isinstance(value, cabc.Mapping):
            return False
        return all(
            key in value and values_match(value[key], expected)
            for key, expected in self.expected.items()
        )


@dc.dataclass(frozen=True, slots=True)
class Contains(Comparator):
    """Match if ``item`` is found in *value*."""

    substring: object

    def __call__(self, value: object) -> bool:
        """Return ``True`` if ``substring`` is in *value*."""
        try:
            return self.substring in value  # type: ignore[operator]
        except TypeError:
            return False


@dc.dataclass(frozen=True, slots=True)
class StartsWith(Comparator):
    """Match strings beginning with ``prefix``."""

    prefix: str

    def __call__(self, value: object) -> bool:
        """Return ``True`` if *value* starts with ``prefix``."""
        return isinstance(value, str) and value.startswith(self.prefix)


@dc.dataclass(frozen=True, slots=True)
class Predicate(Comparator):
    """Use a custom ``func`` to determine a match.

    Exceptions raised by ``func`` propagate to the caller.
    """

    func: t.Callable[[t.Any], object]

    def __call__(self, value: object) -> bool:
        """Return ``True`` if ``func(value)`` is truthy."""
        return bool(self.func(value))


def _is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple))


def _safe_equals(actual: object, expected: object) -> bool:
    try:
        return bool(actual == expected)
    except Exception:  # noqa: BLE001 - ambiguous equality counts as a mismatch
        return actual is expected


def _sequences_match(
    actual: t.Sequence[object],
    expected: t.Sequence[object],
    active: set[tuple[int, int]],
) -> bool:
    if isinstance(actual, list) != isinstance(expected, list):
        return False
    if len(actual) != len(expected):
        return False
    return all(
        _values_match(a, e, active) for a, e in zip(actual, expected, strict=True)
    )


def _mappings_match(
    actual: t.Mapping[object, object],
    expected: t.Mapping[object, object],
    active: set[tuple[int, int]],
) -> bool:
    if set(actual) != set(expected):
        return False
    return all(_values_match(actual[key], expected[key], active) for key in expected)


def _values_match(
    actual: object, expected: object, active: set[tuple[int, int]]
) -> bool:
    if actual is expected:
        return True
    if isinstance(actual, Any) or isinstance(expected, Any):
        return True
    if isinstance(actual, Comparator) and isinstance(expected, Comparator):
        return actual == expected
    if isinstance(expected, Comparator):
        return expected(actual)
    if isinstance(actual, Comparator):
        return actual(expected)
    is_mapping = isinstance(actual, cabc.Mapping) and isinstance(
        expected, cabc.Mapping
    )
    is_sequence = _is_sequence(actual) and _is_sequence(expected)
    if not (is_mapping or is_sequence):
        return _safe_equals(actual, expected)
    # A pair already being compared further up is a cycle; it matches so far.
    pair = (id(actual), id(expected))
    if pair in active:
        return True
    active.add(pair)
    try:
        if is_mapping:
            return _mappings_match(actual, expected, active)  # type: ignore[arg-type]
        return _sequences_match(actual, expected, active)  # type: ignore[arg-type]
    finally:
        active.discard(pair)


def values_match(actual: object, expected: object) -> bool:
    """Return ``True`` if *actual* and *expected* are considered equal.

    The comparison never raises on its own account: regexes against
    non-strings and equality checks that blow up are plain mismatches, and
    self-referencing containers are compared without recursing forever.
    """
    return _values_match(actual, expected, set())


def arguments_match(
    actual_args: t.Sequence[object],
    actual_kwargs: t.Mapping[str, object],
    expected_args: t.Sequence[object],
    expected_kwargs: t.Mapping[str, object],
) -> bool:
    """Compare two argument lists positionally and keyword arguments by name."""
    if len(actual_args) != len(expected_args):
        return False
    if set(actual_kwargs) != set(expected_kwargs):
        return False
    if not all(
        values_match(a, e) for a, e in zip(actual_args, expected_args, strict=True)
    ):
        return False
    return all(
        values_match(actual_kwargs[key], expected_kwargs[key])
        for key in expected_kwargs
    )


def format_arguments(
    args: t.Sequence[object], kwargs: t.Mapping[str, object] | None = None
) -> str:
    """Render an argument list the way it would appear in a call."""
    parts = [repr(arg) for arg in args]
    parts.extend(f"{key}={value!r}" for key, value in (kwargs or {}).items())
    return ", ".join(parts)


@dc.dataclass(frozen=True, slots=True)
class ArgumentSpec:
    """Expected positional and keyword arguments for a call."""

    args: tuple[t.Any, ...] = ()
    kwargs: t.Mapping[str, t.Any] = dc.field(default_factory=dict)

    @classmethod
    def of(cls, *args: object, **kwargs: object) -> ArgumentSpec:
        """Build a spec from call-style arguments."""
        return cls(tuple(args), dict(kwargs))

    def matches(
        self, args: t.Sequence[object], kwargs: t.Mapping[str, object] | None = None
    ) -> bool:
        """Return ``True`` if the given call arguments satisfy this spec."""
        return arguments_match(args, kwargs or {}, self.args, self.kwargs)

    def __str__(self) -> str:
        """Return the arguments formatted as in a call."""
        return format_arguments(self.args, self.kwargs)


__all__ = [
    "Any",
    "ArgumentSpec",
    "Comparator",
    "Contains",
    "DictContaining",
    "IsA",
    "Predicate",
    "Regex",
    "StartsWith",
    "arguments_match",
    "format_arguments",
    "values_match",
]
