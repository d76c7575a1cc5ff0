"""Unit tests for :mod:`spymox.call_record`."""

from __future__ import annotations

import pytest

from spymox.call_record import CallRecord, CallRecordEntry


def test_entries_snapshot_arguments() -> None:
    """Appending copies the argument containers handed in."""
    record = CallRecord()
    args = ["a", "b"]
    kwargs = {"k": 1}
    entry = record.append(args, kwargs)
    args.append("c")
    kwargs["k"] = 2

    assert entry.args == ("a", "b")
    assert entry.kwargs == {"k": 1}
    assert list(record) == [entry]


def test_entries_snapshot_nested_containers() -> None:
    """Containers nested inside arguments are copied as well."""
    record = CallRecord()
    payload = {"items": [1], "tags": {"a"}}
    entry = record.append([payload], {"extra": [[1]]})
    payload["items"].append(2)
    payload["tags"].add("b")

    assert entry.args == ({"items": [1], "tags": {"a"}},)
    assert entry.args[0] is not payload
    assert entry.kwargs == {"extra": [[1]]}


def test_snapshot_keeps_other_objects_by_reference() -> None:
    """Objects without value semantics are recorded as the same instance."""

    class Handle:
        pass

    handle = Handle()
    entry = CallRecord().append([[handle]])
    assert entry.args[0][0] is handle


def test_snapshot_preserves_cycles() -> None:
    """Self-referencing arguments are copied with the same shape."""
    loop: list[object] = []
    loop.append(loop)
    entry = CallRecord().append([loop])

    copied = entry.args[0]
    assert copied is not loop
    assert copied[0] is copied


def test_entries_are_ordered() -> None:
    """Later entries always sort after earlier ones."""
    record = CallRecord()
    first = record.append([1])
    second = record.append([2])

    assert record.first is first
    assert record.last is second
    assert first.instant < second.instant
    assert record[1] is second


def test_entries_are_immutable() -> None:
    """Entries cannot be modified after creation."""
    entry = CallRecordEntry(("x",))
    with pytest.raises(AttributeError):
        entry.args = ("y",)  # type: ignore[misc]


def test_clear_empties_the_record() -> None:
    """clear() removes all entries."""
    record = CallRecord()
    record.append([1])
    record.clear()

    assert len(record) == 0
    assert not record
    assert record.first is None
    assert record.last is None


def test_bounded_record_discards_oldest() -> None:
    """A bounded record keeps only the newest entries."""
    record = CallRecord(max_entries=2)
    for value in range(3):
        record.append([value])

    assert [entry.args for entry in record] == [(1,), (2,)]


@pytest.mark.parametrize("limit", [0, -1])
def test_bounded_record_rejects_non_positive_limits(limit: int) -> None:
    """max_entries must be positive."""
    with pytest.raises(ValueError, match="max_entries must be positive"):
        CallRecord(max_entries=limit)


def test_entry_str_formats_arguments() -> None:
    """str() renders the arguments like a call."""
    assert str(CallRecordEntry(("a", 1), {"flag": True})) == "'a', 1, flag=True"
