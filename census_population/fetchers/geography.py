"""
Geography fetcher: one GET against the Census Data API per call, normalized
into `Record` instances.

States and counties differ only in how the query is built and which columns
form the record, so both are served by `GeographyFetcher` parameterized with a
`GeographyKind`. The API answers with a JSON array of string arrays; row 0 is
the header and later rows carry NAME, the population variable, then the
geography code columns the API appends (`state`, and `county` for counties).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests
from pydantic import StrictStr, TypeAdapter, ValidationError

from census_population.config import Settings, get_settings
from census_population.domain.models import GeographyKind, Record, ResponseRow
from census_population.errors import FormatError, TransportError
from census_population.fetchers.abstract import AbstractGeographySource
from census_population.infrastructure.http_factory import (
    base_query_params,
    display_url,
    open_session,
    redact_key,
)
from census_population.utils.logging import get_logger

log = get_logger(__name__)

NAME_COLUMN = 0
POPULATION_COLUMN = 1

# Null cells are accepted and read as empty strings.
_TABLE_ADAPTER = TypeAdapter(List[List[Optional[StrictStr]]])


@dataclass(frozen=True)
class GeographySpec:
    """
    Query shape and column layout for one geography level.
    """

    kind: GeographyKind
    for_clause: str
    code_columns: Tuple[int, ...]
    strip_name: bool = False

    @property
    def min_columns(self) -> int:
        return max(NAME_COLUMN, POPULATION_COLUMN, *self.code_columns) + 1

    def query_params(self, parent: Optional[str]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"for": self.for_clause}
        if self.kind is GeographyKind.COUNTY:
            if not parent:
                raise ValueError("county queries need the parent state identifier")
            params["in"] = f"state:{parent}"
        return params


GEOGRAPHY_SPECS: Dict[GeographyKind, GeographySpec] = {
    GeographyKind.STATE: GeographySpec(
        kind=GeographyKind.STATE,
        for_clause="state:*",
        code_columns=(2,),
    ),
    GeographyKind.COUNTY: GeographySpec(
        kind=GeographyKind.COUNTY,
        for_clause="county:*",
        code_columns=(2, 3),
        strip_name=True,
    ),
}


def decode_table(body: bytes | str, url: str) -> List[ResponseRow]:
    """
    Parse a response body into data rows, dropping the header row.

    Raises
    ------
    FormatError
        If the body is not JSON or not a list of lists of strings.
    """
    try:
        table = _TABLE_ADAPTER.validate_json(body)
    except ValidationError as exc:
        raise FormatError(url, f"expected a JSON array of string arrays ({exc.error_count()} errors)") from exc
    return [ResponseRow(tuple(cell or "" for cell in row)) for row in table[1:]]


class GeographyFetcher(AbstractGeographySource):
    """
    Fetch every geography of one kind, optionally within a parent state.

    Rows narrower than the kind requires are skipped without failing the fetch.
    """

    def __init__(
        self,
        kind: GeographyKind,
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.kind = kind
        self.spec = GEOGRAPHY_SPECS[kind]
        self._session = session
        self._settings = settings or get_settings()

    @property
    def base_url(self) -> str:
        return self._settings.api_base_url

    def query_params(self, parent: Optional[str] = None) -> Dict[str, Any]:
        params = base_query_params(self._settings)
        params.update(self.spec.query_params(parent))
        return params

    def fetch(self, parent: Optional[str] = None) -> List[Record]:
        params = self.query_params(parent)
        try:
            url = display_url(self.base_url, params)
        except requests.RequestException as exc:
            raise TransportError(self.base_url, self._reason(exc)) from exc
        if self._session is None:
            with open_session() as session:
                body = self._get(session, params, url)
        else:
            body = self._get(self._session, params, url)

        rows = decode_table(body, url)
        records: List[Record] = []
        for row in rows:
            record = self._to_record(row)
            if record is not None:
                records.append(record)

        dropped = len(rows) - len(records)
        if dropped:
            log.debug(
                f"Skipped {dropped} malformed {self.kind.value} rows",
                extra={"kind": self.kind.value, "parent": parent, "dropped": dropped},
            )
        return records

    def _get(self, session: requests.Session, params: Dict[str, Any], url: str) -> bytes:
        try:
            response = session.get(
                self.base_url,
                params=params,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(url, self._reason(exc)) from exc
        return response.content

    def _reason(self, exc: requests.RequestException) -> str:
        # requests embeds the full URL, key included, in its messages.
        return redact_key(str(exc), self._settings.api_key)

    def _to_record(self, row: ResponseRow) -> Optional[Record]:
        if not row.has_columns(self.spec.min_columns):
            return None
        name = row.column(NAME_COLUMN) or ""
        if self.spec.strip_name:
            name = name.strip()
        identifier = "".join(row.column(index) or "" for index in self.spec.code_columns)
        try:
            return Record(
                identifier=identifier,
                name=name,
                kind=self.kind,
                population=row.column(POPULATION_COLUMN) or "",
            )
        except ValidationError:
            # Blank code or name columns: treated like a short row.
            return None


def fetch_states(
    session: Optional[requests.Session] = None, settings: Optional[Settings] = None
) -> List[Record]:
    """Fetch population records for every state."""
    return GeographyFetcher(GeographyKind.STATE, session=session, settings=settings).fetch()


def fetch_counties(
    state_identifier: str,
    session: Optional[requests.Session] = None,
    settings: Optional[Settings] = None,
) -> List[Record]:
    """Fetch population records for every county in one state."""
    return GeographyFetcher(GeographyKind.COUNTY, session=session, settings=settings).fetch(
        state_identifier
    )


__all__ = [
    "GEOGRAPHY_SPECS",
    "GeographyFetcher",
    "GeographySpec",
    "decode_table",
    "fetch_counties",
    "fetch_states",
]
