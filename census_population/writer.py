"""
CSV writer for collected population records.

The file is UTF-8 with a fixed header and RFC 4180 quoting from the `csv`
module: fields containing a comma, quote or line break are quoted.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List

from census_population.domain.models import Record
from census_population.errors import OutputError

HEADER: List[str] = ["geoid", "name", "type", "population"]


def write_records(path: Path | str, records: Iterable[Record]) -> Path:
    """
    Create or truncate `path` and write the header plus one row per record.

    Returns
    -------
    Path
        The path written.

    Raises
    ------
    OutputError
        If the file cannot be created or written. Partial contents may remain.
    """
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)
            writer.writerows(record.as_row() for record in records)
    except OSError as exc:
        raise OutputError(str(target), exc.strerror or str(exc)) from exc
    return target


__all__ = ["HEADER", "write_records"]
