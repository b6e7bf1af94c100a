"""
Abstract fetcher interfaces for the census population extract.

The pipeline depends only on the `GeographySource` protocol, so tests and
alternative backends can supply any object with a `kind` and a `fetch` method.
"""

from __future__ import annotations

import abc
from typing import List, Optional, Protocol, runtime_checkable

from census_population.domain.models import GeographyKind, Record


@runtime_checkable
class GeographySource(Protocol):
    """
    Common interface for anything that yields records for one geography level.

    Attributes
    ----------
    kind : GeographyKind
        Geography level of the records this source returns.
    """

    kind: GeographyKind

    def fetch(self, parent: Optional[str] = None) -> List[Record]:
        """
        Retrieve all records for this geography level.

        Parameters
        ----------
        parent : str | None
            Identifier of the enclosing geography (the state code for counties).
            Top-level geographies take no parent.

        Returns
        -------
        List[Record]
            Normalized records in source order.

        Raises
        ------
        TransportError
            If the request could not be completed.
        FormatError
            If the response body is not a JSON table of strings.
        """
        ...


class AbstractGeographySource(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `kind` and implement `fetch`.
    """

    kind: GeographyKind

    @abc.abstractmethod
    def fetch(self, parent: Optional[str] = None) -> List[Record]:  # pragma: no cover - interface only
        """Retrieve records for this geography level."""
        raise NotImplementedError


__all__ = ["AbstractGeographySource", "GeographySource"]
