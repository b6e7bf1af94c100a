"""
Exception hierarchy for the census population extract.

Fetch failures are split into transport problems (the request never produced a
usable HTTP response) and format problems (a response arrived but its body is
not the expected JSON table). Writing the CSV has its own error type.
"""

from __future__ import annotations


class CensusError(Exception):
    """Base class for every failure raised by this package."""


class TransportError(CensusError):
    """Connection, DNS, timeout or HTTP status failure while querying the API."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"request to {url} failed: {reason}")


class FormatError(CensusError):
    """Response body is not JSON or not shaped as an array of string arrays."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"unexpected response from {url}: {reason}")


class OutputError(CensusError):
    """The output file could not be created or written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"could not write {path}: {reason}")


__all__ = ["CensusError", "FormatError", "OutputError", "TransportError"]
