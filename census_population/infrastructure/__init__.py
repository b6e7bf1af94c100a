"""
Infrastructure package for the census population extract.

HTTP session lifecycle, shared query parameters and key redaction for the
Census Data API.
"""

from census_population.infrastructure.http_factory import (
    base_query_params,
    display_url,
    open_session,
    redact_key,
)

__all__ = [
    "base_query_params",
    "display_url",
    "open_session",
    "redact_key",
]
