"""Objects whose methods are spies."""

from __future__ import annotations

import functools
import inspect
import json
import typing as t

from .errors import (
    ConfigurationConflictError,
    InvalidArgumentError,
    UndefinedBehaviorError,
)
from .spy import Spy

RESERVED_METHOD_NAMES: t.Final = frozenset(
    {"add_method", "spy_on_method", "and_ignore_missing"}
)


def _public_methods(cls: type) -> list[str]:
    return [
        name
        for name, value in inspect.getmembers(cls)
        if not name.startswith("_") and inspect.isroutine(value)
    ]


def _ignored_call(*args: t.Any, **kwargs: t.Any) -> None:
    return None


class MockObject:
    """A stand-in object dispatching method calls to per-method spies.

    Without *cls* the object starts with no methods; add them with
    :meth:`add_method`. Given a class, a do-nothing stub is added for each of
    its public methods, which can then be reprogrammed::

        mailer = MockObject(Mailer)
        mailer.add_method("send").that_returns(True)
        mailer.send("hi")
        assert mailer.spy_on_method("send").was_called_with("hi")

    Calling a method that was never added raises
    :class:`~spymox.errors.UndefinedBehaviorError` unless
    :meth:`and_ignore_missing` was called, in which case it returns ``None``.
    """

    def __init__(self, cls: type | None = None) -> None:
        self._methods: dict[str, Spy] = {}
        self._ignore_missing = False
        self._source = cls
        if cls is None:
            return
        if not inspect.isclass(cls):
            msg = f"MockObject requires a class, got {cls!r}"
            raise InvalidArgumentError(msg)
        for name in _public_methods(cls):
            self.add_method(name)

    def __getattr__(self, name: str) -> t.Callable[..., t.Any]:
        methods: dict[str, Spy] | None = self.__dict__.get("_methods")
        if methods is None or name.startswith("__"):
            raise AttributeError(name)
        spy = methods.get(name)
        if spy is not None:
            return spy
        if self._ignore_missing:
            return _ignored_call
        return functools.partial(self._call_undefined, name)

    def __repr__(self) -> str:
        source = self._source.__name__ if self._source is not None else "object"
        return f"<MockObject of {source} methods={sorted(self._methods)}>"

    @staticmethod
    def _call_undefined(name: str, *args: t.Any, **kwargs: t.Any) -> t.NoReturn:
        payload = json.dumps({"args": list(args), "kwargs": kwargs}, default=repr)
        msg = f"Attempted to call un-mocked method {name!r} with {payload}"
        raise UndefinedBehaviorError(msg)

    def add_method(
        self, name: str, function: t.Callable[..., t.Any] | None = None
    ) -> Spy:
        """Add or replace the method *name* and return its spy.

        Parameters
        ----------
        name:
            Method name. Names used by the mock object itself are rejected.
        function:
            ``None`` keeps the current spy (or creates a stub), a
            :class:`~spymox.spy.Spy` is used as-is, and any other callable is
            wrapped in a spy that delegates to it.
        """
        if name in RESERVED_METHOD_NAMES:
            msg = (
                f"The method {name!r} added to this mock object conflicts "
                "with a built-in method"
            )
            raise ConfigurationConflictError(msg)
        if function is None:
            spy = self._methods.get(name) or Spy()
        elif isinstance(function, Spy):
            spy = function
        elif callable(function):
            spy = Spy().and_return(function)
        else:
            msg = f"The method {name!r} added to this mock object was not callable"
            raise ConfigurationConflictError(msg)
        spy.name = name
        self._methods[name] = spy
        return spy

    def spy_on_method(
        self, name: str, function: t.Callable[..., t.Any] | None = None
    ) -> Spy:
        """Return the spy for *name*, adding the method first if needed."""
        spy = self._methods.get(name)
        if spy is not None:
            return spy
        return self.add_method(name, function)

    def and_ignore_missing(self) -> MockObject:
        """Make calls to unconfigured methods return ``None``."""
        self._ignore_missing = True
        return self


def mock_object(cls: type | None = None) -> MockObject:
    """Create a :class:`MockObject`, optionally mirroring *cls*."""
    return MockObject(cls)


__all__ = ["RESERVED_METHOD_NAMES", "MockObject", "mock_object"]
