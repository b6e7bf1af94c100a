"""
Pytest configuration for the census population extract.

Provides fixtures for:
- Settings pointed at a fake API endpoint
- An in-process fake HTTP session with canned Census responses
- Settings cache isolation between tests
"""

from __future__ import annotations

from typing import Dict

import pytest

from census_population.config import Settings, get_settings
from tests.fakes import (
    COUNTY_HEADER,
    FAKE_API_BASE_URL,
    STATE_HEADER,
    FakeResponse,
    FakeSession,
    RouteKey,
    county_route,
    json_response,
    state_route,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings pointed at the fake endpoint, ignoring any local `.env`.
    """
    return Settings(
        _env_file=None,
        api_base_url=FAKE_API_BASE_URL,
        api_key=None,
        request_timeout_seconds=None,
        log_level="DEBUG",
    )


@pytest.fixture
def canned_routes() -> Dict[RouteKey, FakeResponse]:
    """
    Two states; Alabama has one county and Alaska none.
    """
    return {
        state_route(): json_response(
            [
                STATE_HEADER,
                ["Alabama", "5000000", "01"],
                ["Alaska", "700000", "02"],
            ]
        ),
        county_route("01"): json_response(
            [
                COUNTY_HEADER,
                ["Autauga County, Alabama", "55000", "01", "001"],
            ]
        ),
        county_route("02"): json_response([COUNTY_HEADER]),
    }


@pytest.fixture
def fake_session(canned_routes: Dict[RouteKey, FakeResponse]) -> FakeSession:
    return FakeSession(canned_routes)
