"""Shared pytest fixtures for the test suite."""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from modules.change_calculator.core.denominations import (
    DEFAULT_DENOMINATIONS,
    DenominationSet,
)
from modules.change_calculator.tool.app import _canonical, app
from modules.change_calculator.tool.config import load_change_settings

SETTINGS_ENV = (
    "SPARKY_CHANGE_DENOMINATIONS",
    "SPARKY_CURRENCY_SYMBOL",
    "SPARKY_COIN_THRESHOLD",
)


@pytest.fixture
def rupees() -> DenominationSet:
    """The default Indian rupee note and coin series."""
    return DEFAULT_DENOMINATIONS


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from default settings with empty caches."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    load_change_settings.cache_clear()
    _canonical.cache_clear()
    yield
    load_change_settings.cache_clear()
    _canonical.cache_clear()


@pytest.fixture
def client() -> TestClient:
    """A test client for the change calculator app."""
    return TestClient(app)
