"""
Profiling utilities for the census population extract.

Measures wall-clock time (perf_counter) and process memory/CPU (psutil) around
a block of code so a run can report how long the API round trips took.

Usage example:
    from census_population.utils.profiler import profile_block

    with profile_block("collect") as stats:
        run = collect_population(...)

    print(stats.duration_seconds, stats.rss_bytes)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)


@contextlib.contextmanager
def profile_block(label: str) -> Generator[ProfileStats, None, None]:
    """
    Context manager to profile a block of code.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.

    Notes
    -----
    RSS is the larger of the readings taken on entry and on exit. CPU percent
    covers the interval between the two readings.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()

    # CPU percent needs a priming call
    process.cpu_percent(interval=None)
    start_rss = process.memory_info().rss

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        stats.rss_bytes = max(start_rss, process.memory_info().rss)
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
