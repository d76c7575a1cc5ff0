"""Pytest plugin providing the ``spymox`` fixture."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .errors import VerificationError
from .registry import SpyRegistry, use_registry

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("spymox")
    group.addoption(
        "--spymox-auto-finish",
        action="store_true",
        dest="spymox_auto_finish",
        default=None,
        help=(
            "Verify pending expectations when the spymox fixture is torn "
            "down. Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-spymox-auto-finish",
        action="store_false",
        dest="spymox_auto_finish",
        default=None,
        help=(
            "Reset the spymox fixture on teardown without verifying pending "
            "expectations. Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        "spymox_auto_finish",
        "Verify pending expectations when the spymox fixture is torn down.",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "spymox(auto_finish: bool = True): override automatic verification "
            "of pending expectations for a single test."
        ),
    )


class _SpyMoxItem(t.Protocol):
    """pytest item carrying spymox teardown metadata."""

    _spymox_verify_error: Exception | None
    _spymox_verify_should_fail: bool


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Attach each phase report to its item so teardown can inspect it."""
    del call
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)
    if rep.when == "teardown":
        _apply_deferred_verify_failure(item, rep)


def _auto_finish_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether teardown should verify pending expectations."""
    # Priority order: marker > fixture param > CLI option > INI setting

    marker_value = _get_marker_auto_finish(request)
    if marker_value is not None:
        return marker_value

    param_value = _get_param_auto_finish(request)
    if param_value is not None:
        return param_value

    config = request.config
    cli_value = config.getoption("spymox_auto_finish")
    if cli_value is not None:
        return bool(cli_value)

    return bool(config.getini("spymox_auto_finish"))


def _get_marker_auto_finish(request: pytest.FixtureRequest) -> bool | None:
    """Return marker override for auto finish if present."""
    marker = request.node.get_closest_marker("spymox")
    if marker is None or "auto_finish" not in marker.kwargs:
        return None
    return bool(marker.kwargs["auto_finish"])


def _get_param_auto_finish(request: pytest.FixtureRequest) -> bool | None:
    """Return fixture parameter override for auto finish if present."""
    param = getattr(request, "param", None)
    if param is None:
        return None
    if isinstance(param, dict):
        if "auto_finish" in param:
            return bool(param["auto_finish"])
        keys = list(param.keys())
        msg = (
            "spymox fixture param dict must contain 'auto_finish' key, "
            f"got keys: {keys}"
        )
        raise TypeError(msg)
    if isinstance(param, bool):
        return param
    msg = (
        "spymox fixture param must be a bool or dict with 'auto_finish' key, "
        f"got {type(param).__name__}"
    )
    raise TypeError(msg)


def _apply_deferred_verify_failure(
    item: pytest.Item, report: pytest.TestReport
) -> None:
    """Attach a verification error to the report of a test that already failed."""
    err: Exception | None = getattr(item, "_spymox_verify_error", None)
    if err is None:
        return
    delattr(item, "_spymox_verify_error")
    should_fail = getattr(item, "_spymox_verify_should_fail", False)
    if hasattr(item, "_spymox_verify_should_fail"):
        delattr(item, "_spymox_verify_should_fail")
    if not should_fail:
        report.sections.append(("spymox verification", f"{type(err).__name__}: {err}"))


@pytest.fixture
def spymox(request: pytest.FixtureRequest) -> t.Generator[SpyRegistry, None, None]:
    """Provide a fresh :class:`SpyRegistry` installed as the default registry."""
    registry = SpyRegistry()
    auto_finish = _auto_finish_enabled(request)
    try:
        with use_registry(registry):
            yield registry
    except Exception:
        logger.exception("Error during spymox fixture setup or test execution")
        raise
    finally:
        _teardown_spymox(request.node, registry, auto_finish=auto_finish)


def _teardown_spymox(
    item: pytest.Item, registry: SpyRegistry, *, auto_finish: bool
) -> None:
    """Verify or reset *registry* and fail the test on unmet expectations."""
    typed_item = t.cast("_SpyMoxItem", item)
    if not auto_finish:
        registry.clear_all_expectations()
        registry.clear_all_spies()
        return
    try:
        registry.finish()
    except VerificationError as err:
        logger.exception("Error during spymox verification")
        typed_item._spymox_verify_error = err
        should_fail = not _call_stage_failed(item)
        typed_item._spymox_verify_should_fail = should_fail
        if should_fail:
            pytest.fail(f"{type(err).__name__}: {err}")


def _call_stage_failed(item: pytest.Item) -> bool:
    """Return ``True`` when the test body has already failed."""
    rep_call = getattr(item, "rep_call", None)
    return bool(rep_call and rep_call.failed)
