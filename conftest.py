"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

import spymox.registry

pytest_plugins = ("spymox.pytest_plugin", "pytester")


@pytest.fixture(autouse=True)
def reset_default_registry_state() -> t.Generator[None, None, None]:
    """Ensure the default ``SpyRegistry`` starts and ends each test empty."""
    spymox.registry.reset_default_registry()
    yield
    spymox.registry.reset_default_registry()
