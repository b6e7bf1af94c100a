"""
HTTP session factory for the Census Data API.

Centralizes creation and cleanup of the `requests.Session` shared by every
fetch in a run. One session is opened per run and closed on every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional
from urllib.parse import quote, quote_plus

import requests

from census_population.config import Settings, get_settings

USER_AGENT = "census-population-extract"
REDACTED = "***"


def _build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})
    return session


@contextmanager
def open_session() -> Generator[requests.Session, None, None]:
    """
    Context manager yielding a session that is closed on exit.

    Example
    -------
        with open_session() as session:
            fetcher = GeographyFetcher(GeographyKind.STATE, session=session)
            states = fetcher.fetch()
    """
    session = _build_session()
    try:
        yield session
    finally:
        session.close()


def base_query_params(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Query parameters shared by every request: the field list and optional key.
    """
    settings = settings or get_settings()
    params: Dict[str, Any] = {"get": f"NAME,{settings.population_variable}"}
    if settings.api_key:
        params["key"] = settings.api_key
    return params


def display_url(base_url: str, params: Dict[str, Any]) -> str:
    """
    Render the request URL for logs and error messages, without the API key.

    Raises
    ------
    requests.RequestException
        If `base_url` has no scheme or cannot be parsed.
    """
    visible = {k: v for k, v in params.items() if k != "key"}
    prepared = requests.Request("GET", base_url, params=visible).prepare()
    return prepared.url or base_url


def redact_key(text: str, api_key: Optional[str]) -> str:
    """
    Replace every spelling of `api_key` in `text`, raw or URL-encoded.
    """
    if not api_key:
        return text
    for variant in {api_key, quote(api_key, safe=""), quote_plus(api_key)}:
        text = text.replace(variant, REDACTED)
    return text


__all__ = ["base_query_params", "display_url", "open_session", "redact_key"]
