"""
Live smoke tests against the real Census Data API.

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/test_smoke.py
"""

from __future__ import annotations

import os

import pytest

from census_population.config import Settings
from census_population.domain.models import GeographyKind
from census_population.fetchers.geography import fetch_counties, fetch_states
from census_population.infrastructure.http_factory import open_session

# 50 states + DC + Puerto Rico
MIN_STATES = 52
DELAWARE_COUNTIES = 3
LIVE_TIMEOUT_SECONDS = 60.0

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Live API tests require RUN_INTEGRATION_TESTS=1 and network access",
)


@pytest.fixture(scope="module")
def live_settings() -> Settings:
    return Settings(_env_file=None, request_timeout_seconds=LIVE_TIMEOUT_SECONDS)


class TestLiveCensusApi:
    """Shape checks against the public endpoint."""

    def test_states_have_two_digit_codes(self, live_settings: Settings):
        with open_session() as session:
            states = fetch_states(session=session, settings=live_settings)

        assert len(states) >= MIN_STATES
        assert all(len(s.identifier) == 2 for s in states)
        assert all(s.kind is GeographyKind.STATE for s in states)

    def test_delaware_counties_have_five_digit_geoids(self, live_settings: Settings):
        with open_session() as session:
            counties = fetch_counties("10", session=session, settings=live_settings)

        assert len(counties) == DELAWARE_COUNTIES
        assert all(len(c.identifier) == 5 and c.identifier.startswith("10") for c in counties)
        assert all(c.name == c.name.strip() for c in counties)
