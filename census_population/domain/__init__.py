"""
Domain package for the census population extract.

Exports the record model, the geography enum and the typed response row.
Keep this package focused on data definitions and validation concerns.
"""

from census_population.domain.models import GeographyKind, Record, ResponseRow

__all__ = [
    "GeographyKind",
    "Record",
    "ResponseRow",
]
