"""The ordered log of invocations kept by each spy."""

from __future__ import annotations

import dataclasses as dc
import itertools
import time
import typing as t
from collections import deque

from .comparators import format_arguments

# Shared by every spy so entries from different spies can be ordered even
# when the clock does not advance between two calls.
_SEQUENCE = itertools.count()


def _snapshot(value: object, memo: dict[int, object]) -> object:
    """Copy built-in containers recursively, sharing every other object."""
    kind = type(value)
    if kind not in (list, dict, tuple, set, frozenset):
        return value
    key = id(value)
    if key in memo:
        return memo[key]
    if kind is list:
        items: list[object] = []
        memo[key] = items
        items.extend(_snapshot(item, memo) for item in t.cast("list[object]", value))
        return items
    if kind is dict:
        mapping: dict[object, object] = {}
        memo[key] = mapping
        for name, item in t.cast("dict[object, object]", value).items():
            mapping[name] = _snapshot(item, memo)
        return mapping
    copied = kind(_snapshot(item, memo) for item in t.cast("t.Iterable[object]", value))
    memo[key] = copied
    return copied


@dc.dataclass(frozen=True, slots=True)
class CallRecordEntry:
    """A single recorded invocation."""

    args: tuple[t.Any, ...]
    kwargs: t.Mapping[str, t.Any] = dc.field(default_factory=dict)
    timestamp: int = dc.field(default_factory=time.monotonic_ns)
    sequence: int = dc.field(default_factory=lambda: next(_SEQUENCE))

    @property
    def instant(self) -> tuple[int, int]:
        """Return a strictly increasing sort key for this entry."""
        return (self.timestamp, self.sequence)

    def __str__(self) -> str:
        """Return the arguments formatted as in a call."""
        return format_arguments(self.args, self.kwargs)


class CallRecord:
    """Append-only sequence of :class:`CallRecordEntry` objects.

    Parameters
    ----------
    max_entries:
        Maximum number of entries retained. When ``None`` the record is
        unbounded; otherwise the oldest entries are discarded once the limit
        is exceeded.
    """

    def __init__(self, *, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries <= 0:
            msg = "max_entries must be positive"
            raise ValueError(msg)
        self._entries: deque[CallRecordEntry] = deque(maxlen=max_entries)

    def append(
        self, args: t.Iterable[object], kwargs: t.Mapping[str, object] | None = None
    ) -> CallRecordEntry:
        """Snapshot *args* and *kwargs* into a new entry and store it.

        Lists, dicts, tuples and sets are copied at every depth, so later
        changes made by the caller do not alter the record. Other objects are
        kept by reference and still compare by their own equality.
        """
        memo: dict[int, object] = {}
        entry = CallRecordEntry(
            tuple(_snapshot(arg, memo) for arg in args),
            {name: _snapshot(value, memo) for name, value in (kwargs or {}).items()},
        )
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        """Discard every entry."""
        self._entries.clear()

    @property
    def first(self) -> CallRecordEntry | None:
        """Return the oldest retained entry, if any."""
        return self._entries[0] if self._entries else None

    @property
    def last(self) -> CallRecordEntry | None:
        """Return the newest entry, if any."""
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> t.Iterator[CallRecordEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> CallRecordEntry:
        return self._entries[index]

    def __bool__(self) -> bool:
        return bool(self._entries)


__all__ = ["CallRecord", "CallRecordEntry"]
