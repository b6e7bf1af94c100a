"""
Fetchers package for the census population extract.

This module re-exports the fetcher protocol and the concrete geography fetcher
so downstream code can import from `census_population.fetchers` directly.
"""

from census_population.fetchers.abstract import AbstractGeographySource, GeographySource
from census_population.fetchers.geography import (
    GEOGRAPHY_SPECS,
    GeographyFetcher,
    GeographySpec,
    decode_table,
    fetch_counties,
    fetch_states,
)

__all__ = [
    # Abstracts
    "AbstractGeographySource",
    "GeographySource",
    # Concrete fetcher
    "GEOGRAPHY_SPECS",
    "GeographyFetcher",
    "GeographySpec",
    "decode_table",
    "fetch_counties",
    "fetch_states",
]
