"""Exception hierarchy for spymox."""

from __future__ import annotations


class SpyMoxError(Exception):
    """Base class for all spymox errors."""


class InvalidArgumentError(SpyMoxError, ValueError):
    """Raised when an API is handed something it cannot work with."""


class InvalidExpectationAttributeError(InvalidArgumentError, AttributeError):
    """Raised when reading an attribute that does not exist on an expectation."""


class UndefinedBehaviorError(SpyMoxError):
    """Raised when a mock object method was called but never configured."""


class ConfigurationConflictError(SpyMoxError, ValueError):
    """Raised when a mock object method cannot be registered."""


class VerificationError(SpyMoxError, AssertionError):
    """Base class for failed verifications."""


class UnfulfilledExpectationError(VerificationError):
    """Raised by the default reporter when an expectation is not met."""


__all__ = [
    "ConfigurationConflictError",
    "InvalidArgumentError",
    "InvalidExpectationAttributeError",
    "SpyMoxError",
    "UndefinedBehaviorError",
    "UnfulfilledExpectationError",
    "VerificationError",
]
