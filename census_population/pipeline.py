"""
Pipeline for collecting state and county population records and writing them.

Usage (example from CLI):
    from census_population.pipeline import run_pipeline

    run = run_pipeline(output_path="census_population.csv")
    print(run.counts_by_kind())

The state fetch is the backbone of the output: if it fails the run aborts and
nothing is written. Each county fetch is independent, so a failure there is
logged and the run moves on to the next state.
"""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import requests

from census_population.config import Settings, get_settings
from census_population.domain.models import GeographyKind, Record
from census_population.errors import CensusError
from census_population.fetchers.abstract import GeographySource
from census_population.fetchers.geography import GeographyFetcher
from census_population.infrastructure.http_factory import open_session
from census_population.utils.logging import get_logger
from census_population.utils.profiler import profile_block
from census_population.writer import write_records

log = get_logger(__name__)


@dataclass(frozen=True)
class FailedState:
    """A state whose county fetch failed, with the reason."""

    identifier: str
    name: str
    error: str


@dataclass
class PopulationRun:
    """
    Outcome of one collection run.

    `records` yields states first, then counties grouped by state in the order
    the states were processed.
    """

    states: List[Record] = field(default_factory=list)
    counties: List[Record] = field(default_factory=list)
    failed_states: List[FailedState] = field(default_factory=list)
    duration_seconds: float = 0.0
    rss_bytes: Optional[int] = None
    cpu_percent: Optional[float] = None
    output_path: Optional[Path] = None

    @property
    def records(self) -> List[Record]:
        return [*self.states, *self.counties]

    def counts_by_kind(self) -> Dict[str, int]:
        return {
            GeographyKind.STATE.value: len(self.states),
            GeographyKind.COUNTY.value: len(self.counties),
        }


def collect_population(
    state_source: GeographySource,
    county_source: GeographySource,
) -> PopulationRun:
    """
    Fetch all states, then the counties of each state, sequentially.

    Parameters
    ----------
    state_source : GeographySource
        Source for top-level records. Its errors propagate.
    county_source : GeographySource
        Source called once per state with the state identifier. Its errors
        are logged and the state contributes no counties.

    Returns
    -------
    PopulationRun
        Collected records and the list of states whose counties are missing.
    """
    run = PopulationRun()
    with profile_block("collect_population") as stats:
        run.states = state_source.fetch()
        log.info(f"Fetched {len(run.states)} states", extra={"states": len(run.states)})

        for state in run.states:
            try:
                counties = county_source.fetch(state.identifier)
            except CensusError as exc:
                log.warning(
                    f"Error fetching counties for {state.name}: {exc}",
                    extra={"state": state.identifier, "error": str(exc)},
                )
                run.failed_states.append(
                    FailedState(identifier=state.identifier, name=state.name, error=str(exc))
                )
                continue
            log.debug(
                f"Fetched {len(counties)} counties for {state.name}",
                extra={"state": state.identifier, "counties": len(counties)},
            )
            run.counties.extend(counties)

    run.duration_seconds = stats.duration_seconds
    run.rss_bytes = stats.rss_bytes
    run.cpu_percent = stats.cpu_percent
    log.info(
        f"Total locations: {len(run.states) + len(run.counties)}",
        extra={
            "states": len(run.states),
            "counties": len(run.counties),
            "failed_states": len(run.failed_states),
            "duration_seconds": round(stats.duration_seconds, 2),
            "rss_bytes": stats.rss_bytes,
            "cpu_percent": stats.cpu_percent,
        },
    )
    return run


def run_pipeline(
    output_path: Path | str | None = None,
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> PopulationRun:
    """
    Collect every state and county record and write them to CSV.

    Parameters
    ----------
    output_path : Path | str | None
        Destination file. Defaults to settings.output_path.
    settings : Settings | None
        Effective configuration. Defaults to the cached environment settings.
    session : requests.Session | None
        Session to issue requests on. When omitted one is opened for the run
        and closed before writing.

    Raises
    ------
    TransportError, FormatError
        If the state fetch fails. Nothing is written in that case.
    OutputError
        If the CSV cannot be written.
    """
    settings = settings or get_settings()
    target = Path(output_path or settings.output_path)

    log.info(
        "Fetching US Census population data...",
        extra={"api_base_url": settings.api_base_url},
    )
    session_scope = nullcontext(session) if session is not None else open_session()
    with session_scope as active:
        run = collect_population(
            GeographyFetcher(GeographyKind.STATE, session=active, settings=settings),
            GeographyFetcher(GeographyKind.COUNTY, session=active, settings=settings),
        )

    run.output_path = write_records(target, run.records)
    log.info(f"Successfully wrote data to {run.output_path}", extra={"path": str(run.output_path)})
    return run


__all__ = [
    "FailedState",
    "PopulationRun",
    "collect_population",
    "run_pipeline",
]
