from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from census_population.config import get_settings
from census_population.errors import CensusError
from census_population.pipeline import run_pipeline
from census_population.reporter import print_summary
from census_population.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Census population extract CLI.")
log = get_logger(__name__)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    timeout = (
        f"{settings.request_timeout_seconds}s" if settings.request_timeout_seconds else "none"
    )
    typer.echo(
        f"API={settings.api_base_url} | variable={settings.population_variable} "
        f"key={'set' if settings.api_key else 'unset'} timeout={timeout} | "
        f"output={settings.output_path}"
    )


@app.command()
def run(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="CSV file to write (default from settings).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Per-request timeout in seconds (default: wait indefinitely).",
    ),
    summary: bool = typer.Option(
        True,
        "--summary/--no-summary",
        help="Print a table of record counts after writing.",
    ),
) -> None:
    """
    Fetch state and county population and write them to CSV.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    if timeout is not None:
        settings = settings.model_copy(update={"request_timeout_seconds": timeout})

    try:
        population = run_pipeline(output_path=output, settings=settings)
    except CensusError as exc:
        log.error(f"Extract failed: {exc}", extra={"error_type": type(exc).__name__})
        raise typer.Exit(code=1)

    if summary:
        print_summary(population)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
