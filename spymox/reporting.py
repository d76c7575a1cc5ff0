"""Reporting sinks used to surface failed expectations."""

from __future__ import annotations

import typing as t

from .errors import UnfulfilledExpectationError

Reporter = t.Callable[[bool, str], None]


def raise_on_failure(passed: bool, description: str) -> None:  # noqa: FBT001
    """Raise :class:`UnfulfilledExpectationError` when *passed* is false."""
    if not passed:
        raise UnfulfilledExpectationError(description)


__all__ = ["Reporter", "raise_on_failure"]
