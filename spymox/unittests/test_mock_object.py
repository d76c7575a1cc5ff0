"""Unit tests for :class:`spymox.mock_object.MockObject`."""

from __future__ import annotations

import pytest

from spymox import (
    ConfigurationConflictError,
    InvalidArgumentError,
    MockObject,
    Spy,
    UndefinedBehaviorError,
    mock_object,
)


class Mailer:
    """Class mirrored by mock objects in these tests."""

    def send(self, to: str, body: str) -> bool:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def _connect(self) -> None:
        raise NotImplementedError


def test_class_methods_become_stubs() -> None:
    """Public methods exist and return None until programmed."""
    mailer = mock_object(Mailer)
    assert repr(mailer) == "<MockObject of Mailer methods=['close', 'send']>"
    assert mailer.send("a", "b") is None
    assert mailer.spy_on_method("send").was_called_with("a", "b")


def test_private_methods_are_not_copied() -> None:
    """Underscore names are left undefined."""
    mailer = MockObject(Mailer)
    with pytest.raises(UndefinedBehaviorError, match="'_connect'"):
        mailer._connect()


def test_add_method_returns_programmable_spy() -> None:
    """The spy returned by add_method() can be given return values."""
    mailer = MockObject(Mailer)
    mailer.add_method("send").with_args("boss", "hi").and_return(True)
    assert mailer.send("boss", "hi") is True
    assert mailer.send("peer", "hi") is None


def test_add_method_keeps_existing_spy() -> None:
    """Re-adding without a function keeps programmed behaviour."""
    mailer = MockObject(Mailer)
    spy = mailer.add_method("send").and_return(True)
    assert mailer.add_method("send") is spy
    assert mailer.send("x", "y") is True


def test_add_method_wraps_functions() -> None:
    """A plain function becomes the behaviour of a recording spy."""
    mailer = MockObject()
    spy = mailer.add_method("double", lambda value: value * 2)
    assert mailer.double(4) == 8
    assert spy.name == "double"
    assert spy.was_called_with(4)


def test_add_method_accepts_a_spy() -> None:
    """Existing spies are installed unchanged and renamed."""
    spy = Spy().and_return("ok")
    mailer = MockObject()
    assert mailer.add_method("ping", spy) is spy
    assert mailer.ping() == "ok"
    assert repr(spy) == "<Spy 'ping' calls=1>"


@pytest.mark.parametrize("name", ["add_method", "spy_on_method", "and_ignore_missing"])
def test_reserved_names_conflict(name: str) -> None:
    """Names used by MockObject itself cannot be mocked."""
    with pytest.raises(ConfigurationConflictError, match="conflicts"):
        MockObject().add_method(name)


def test_non_callable_method_conflicts() -> None:
    """Method bodies must be callable."""
    with pytest.raises(ConfigurationConflictError, match="not callable"):
        MockObject().add_method("value", 42)  # type: ignore[arg-type]


def test_undefined_method_names_arguments() -> None:
    """The error lists the name and the arguments of the rejected call."""
    with pytest.raises(UndefinedBehaviorError) as excinfo:
        MockObject().fetch(1, key="a")
    message = str(excinfo.value)
    assert "'fetch'" in message
    assert '"args": [1]' in message
    assert '"kwargs": {"key": "a"}' in message


def test_ignore_missing() -> None:
    """Unknown methods return None once missing methods are ignored."""
    mailer = MockObject().and_ignore_missing()
    assert mailer.anything("at", all=True) is None


def test_spy_on_method_adds_when_missing() -> None:
    """spy_on_method() creates the method on first use."""
    mailer = MockObject()
    spy = mailer.spy_on_method("open")
    assert mailer.spy_on_method("open") is spy
    assert mailer.open() is None
    assert spy.call_count == 1


def test_non_class_is_rejected() -> None:
    """Instances are not accepted as a template."""
    with pytest.raises(InvalidArgumentError, match="requires a class"):
        MockObject(Mailer())  # type: ignore[arg-type]


def test_dunder_lookups_are_not_mocked() -> None:
    """Protocol lookups behave like a plain object."""
    mailer = MockObject()
    assert not hasattr(mailer, "__iter__")
    assert repr(mailer) == "<MockObject of object methods=[]>"


def test_method_table_names_do_not_shadow_mocked_methods() -> None:
    """A mocked method named like a table accessor dispatches to its spy."""

    class Repository:
        def methods(self) -> list[str]:
            raise NotImplementedError

        def source(self) -> str:
            raise NotImplementedError

    repo = MockObject(Repository)
    repo.add_method("methods").and_return(["find"])
    repo.add_method("source").and_return("db")

    assert repo.methods() == ["find"]
    assert repo.source() == "db"
    assert repo.spy_on_method("methods").was_called()
