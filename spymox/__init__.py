"""Python-native spies, stubs and deferred expectations for tests.

Replace a callable with a :class:`Spy`, optionally program what it returns,
and assert on how it was called with :class:`Expectation`::

    from spymox import Any, expect_spy, finish_spying, make_spy

    greet = make_spy("greet")
    greet("hello", "world", 7)
    expect_spy(greet).to_have_been_called().with_args("hello", "world", Any())
    finish_spying()
"""

from __future__ import annotations

from .api import (
    finish_spying,
    get_spy_for,
    intercept,
    make_spy,
    mock_function,
    stub_function,
)
from .call_record import CallRecord, CallRecordEntry
from .comparators import (
    Any,
    ArgumentSpec,
    Comparator,
    Contains,
    DictContaining,
    IsA,
    Predicate,
    Regex,
    StartsWith,
    values_match,
)
from .errors import (
    ConfigurationConflictError,
    InvalidArgumentError,
    InvalidExpectationAttributeError,
    SpyMoxError,
    UndefinedBehaviorError,
    UnfulfilledExpectationError,
    VerificationError,
)
from .expectations import Expectation, expect_spy
from .interception import AttributeInterceptor
from .mock_object import MockObject, mock_object
from .registry import (
    SpyRegistry,
    get_registry,
    reset_default_registry,
    use_registry,
)
from .reporting import Reporter, raise_on_failure
from .spy import PassedArgument, Spy, passed_arg

__all__ = [
    "Any",
    "ArgumentSpec",
    "AttributeInterceptor",
    "CallRecord",
    "CallRecordEntry",
    "Comparator",
    "ConfigurationConflictError",
    "Contains",
    "DictContaining",
    "Expectation",
    "InvalidArgumentError",
    "InvalidExpectationAttributeError",
    "IsA",
    "MockObject",
    "PassedArgument",
    "Predicate",
    "Regex",
    "Reporter",
    "Spy",
    "SpyMoxError",
    "SpyRegistry",
    "StartsWith",
    "UndefinedBehaviorError",
    "UnfulfilledExpectationError",
    "VerificationError",
    "expect_spy",
    "finish_spying",
    "get_registry",
    "get_spy_for",
    "intercept",
    "make_spy",
    "mock_function",
    "mock_object",
    "passed_arg",
    "raise_on_failure",
    "reset_default_registry",
    "stub_function",
    "use_registry",
    "values_match",
]
