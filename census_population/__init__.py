"""
Census population extract - state and county population from the Census Data API.

This package queries the ACS 5-year total-population variable for every state
and, state by state, for every county, normalizes both response shapes into a
single record type and writes the result to one CSV file:

- Geography fetchers for states and counties
- A sequential pipeline that tolerates per-state county failures
- A CSV writer with a fixed header
- Rich summary output for the CLI
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from census_population.config import Settings, get_settings
from census_population.domain.models import GeographyKind, Record, ResponseRow
from census_population.errors import CensusError, FormatError, OutputError, TransportError
from census_population.fetchers.abstract import AbstractGeographySource, GeographySource
from census_population.fetchers.geography import GeographyFetcher, fetch_counties, fetch_states
from census_population.pipeline import PopulationRun, collect_population, run_pipeline
from census_population.utils.logging import configure_logging, get_logger
from census_population.writer import write_records

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "GeographyKind",
    "Record",
    "ResponseRow",
    # Errors
    "CensusError",
    "FormatError",
    "OutputError",
    "TransportError",
    # Fetching
    "AbstractGeographySource",
    "GeographySource",
    "GeographyFetcher",
    "fetch_counties",
    "fetch_states",
    # Pipeline
    "PopulationRun",
    "collect_population",
    "run_pipeline",
    "write_records",
    # Logging
    "configure_logging",
    "get_logger",
]
