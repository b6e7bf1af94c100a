from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from census_population.pipeline import PopulationRun

TABLE_MIN_WIDTH = 40


def _caption(run: PopulationRun) -> str:
    parts = [f"Collected in {run.duration_seconds:.1f}s"]
    if run.rss_bytes:
        parts.append(f"{run.rss_bytes / (1024 * 1024):.1f} MB RSS")
    return " | ".join(parts)


def print_summary(run: PopulationRun, console: Optional[Console] = None) -> None:
    """
    Render the outcome of a run as rich tables.

    Shows record counts per geography kind and, when any county fetch failed,
    the affected states.
    """
    console = console or Console()

    table = Table(
        title="Census Population Extract",
        box=box.ROUNDED,
        caption=_caption(run),
        min_width=TABLE_MIN_WIDTH,
    )
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Records", justify="right", style="magenta")

    counts = run.counts_by_kind()
    for kind, count in counts.items():
        table.add_row(kind, f"{count:,}")
    table.add_section()
    table.add_row("total", f"{sum(counts.values()):,}", style="bold")

    console.print(table)
    if run.output_path is not None:
        # Paths are printed verbatim: no markup parsing, no wrapping.
        console.print(f"Output: {run.output_path}", style="dim", markup=False, soft_wrap=True)

    if not run.failed_states:
        return

    failures = Table(
        title="[yellow]States without county data[/yellow]",
        box=box.ROUNDED,
        min_width=TABLE_MIN_WIDTH,
    )
    failures.add_column("GEOID", style="cyan", no_wrap=True)
    failures.add_column("State", style="magenta")
    failures.add_column("Error", style="red")
    for failed in run.failed_states:
        failures.add_row(failed.identifier, failed.name, failed.error)
    console.print(failures)


__all__ = ["print_summary"]
