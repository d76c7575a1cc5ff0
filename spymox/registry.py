"""Named spies and pending expectations shared across a test."""

from __future__ import annotations

import contextlib
import logging
import threading
import typing as t

from .interception import AttributeInterceptor
from .reporting import raise_on_failure
from .spy import Spy

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .expectations import Expectation
    from .reporting import Reporter

logger = logging.getLogger(__name__)


class SpyRegistry:
    """Track named spies and the expectations waiting to be verified.

    A registry is normally reset at the end of every test by calling
    :meth:`finish`, which verifies the pending expectations and then clears
    all state whether or not verification succeeded.

    Parameters
    ----------
    reporter:
        Sink receiving failed expectations. Defaults to
        :func:`~spymox.reporting.raise_on_failure`.
    interceptor:
        Used by :meth:`intercept` to swap attributes for spies. A fresh
        :class:`~spymox.interception.AttributeInterceptor` is created when
        omitted; nothing is patched unless :meth:`intercept` is called.
    """

    def __init__(
        self,
        *,
        reporter: Reporter | None = None,
        interceptor: AttributeInterceptor | None = None,
    ) -> None:
        self.reporter: Reporter = reporter if reporter is not None else raise_on_failure
        self.interceptor = (
            interceptor if interceptor is not None else AttributeInterceptor()
        )
        self._spies: dict[str, Spy] = {}
        self._expectations: list[Expectation] = []

    # ------------------------------------------------------------------
    # Spies
    # ------------------------------------------------------------------
    @property
    def spies(self) -> dict[str, Spy]:
        """Return a copy of the named spy mapping."""
        return dict(self._spies)

    def get_spy(self, name: str) -> Spy | None:
        """Return the spy registered as *name*, if any."""
        return self._spies.get(name)

    def get_or_create(self, name: str) -> Spy:
        """Return the spy registered as *name*, creating it on first use."""
        spy = self._spies.get(name)
        if spy is None:
            spy = Spy(name)
            self._spies[name] = spy
            logger.debug("Created spy %r", name)
        return spy

    def intercept(self, target: str, *, call_original: bool = False) -> Spy:
        """Replace the attribute at dotted path *target* with a named spy.

        With *call_original* the spy delegates to the replaced object by
        default, so behaviour is unchanged while calls are recorded. The
        attribute is restored by :meth:`clear_all_spies` and :meth:`finish`.
        """
        spy = self.get_or_create(target)
        self.interceptor.install(target, spy)
        if call_original:
            spy.and_return(self.interceptor.original(target))
        return spy

    def clear_all_spies(self) -> None:
        """Forget every named spy and restore intercepted attributes."""
        self.interceptor.restore_all()
        self._spies.clear()

    # ------------------------------------------------------------------
    # Expectations
    # ------------------------------------------------------------------
    @property
    def pending_expectations(self) -> list[Expectation]:
        """Return the registered expectations in registration order."""
        return list(self._expectations)

    def unverified_expectations(self) -> list[Expectation]:
        """Return pending expectations that were never verified."""
        return [exp for exp in self._expectations if not exp.was_verified]

    def add_expectation(self, expectation: Expectation) -> None:
        """Queue *expectation* for :meth:`resolve_expectations`."""
        self._expectations.append(expectation)

    def clear_all_expectations(self) -> None:
        """Drop every pending expectation."""
        self._expectations.clear()

    def resolve_expectations(self) -> str | None:
        """Verify pending expectations in order, reporting the first failure.

        Each failure goes to the expectation's own reporter, which defaults to
        this registry's. Expectations with ``silent_failures`` set are left to
        the caller and never reported here.

        Returns the failure description when the reporter does not raise, or
        ``None`` when every expectation is met.
        """
        for expectation in list(self._expectations):
            if expectation.silent_failures:
                continue
            message = expectation.get_fail_message()
            if message is not None:
                expectation.reporter(False, message)  # noqa: FBT003
                return message
        return None

    def finish(self) -> str | None:
        """Resolve pending expectations, then reset all registry state."""
        logger.debug(
            "Finishing registry with %d spies and %d expectations",
            len(self._spies),
            len(self._expectations),
        )
        try:
            return self.resolve_expectations()
        finally:
            self.clear_all_expectations()
            self.clear_all_spies()


# The default registry is tracked per thread, like the active environment
# manager, so module-level helpers never share state across threads.
_state = threading.local()


def get_registry() -> SpyRegistry:
    """Return the default registry for the current thread, creating it lazily.

    Each thread has its own default registry. A spy fetched by name from a
    worker thread is therefore not the spy of the same name in the main
    thread, and only :func:`finish_spying` called on that worker thread
    verifies and resets it. Share a spy object, or install one registry in
    every thread with :func:`use_registry`, to observe calls across threads.
    """
    registry: SpyRegistry | None = getattr(_state, "registry", None)
    if registry is None:
        registry = SpyRegistry()
        _state.registry = registry
    return registry


def reset_default_registry() -> None:
    """Discard the default registry of the current thread without verifying."""
    registry: SpyRegistry | None = getattr(_state, "registry", None)
    if registry is not None:
        registry.clear_all_expectations()
        registry.clear_all_spies()
    _state.registry = None


@contextlib.contextmanager
def use_registry(registry: SpyRegistry) -> t.Iterator[SpyRegistry]:
    """Install *registry* as the default registry for the duration of a block."""
    previous: SpyRegistry | None = getattr(_state, "registry", None)
    _state.registry = registry
    try:
        yield registry
    finally:
        _state.registry = previous


__all__ = ["SpyRegistry", "get_registry", "reset_default_registry", "use_registry"]
