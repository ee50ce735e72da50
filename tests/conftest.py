"""Shared fixtures."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from price_cache.config import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> Any:
    """Load a JSON fixture file."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def mock_env() -> Any:
    """Mock environment variables and reset cached settings."""
    get_settings.cache_clear()
    with patch.dict("os.environ", {"ITAD_API_KEY": "test_api_key_123"}):
        yield
    get_settings.cache_clear()


@pytest.fixture
def lookup_response() -> dict[str, Any]:
    return load_fixture("itad_lookup_response.json")


@pytest.fixture
def prices_response() -> list[dict[str, Any]]:
    return load_fixture("itad_prices_response.json")
