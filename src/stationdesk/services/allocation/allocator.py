"""Tracking number allocation within a station's reserved range.

Every function here is pure: inputs are never mutated and the same inputs
always give the same answer. "Range full" is reported as ``None`` rather than
an exception so callers can show it as a label.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Iterable

from ...models.domain import Package, Station

logger = logging.getLogger(__name__)

SEPARATOR = "-"


class MalformedCodeError(ValueError):
    """A tracking code that is not of the form ``<name>-<integer>``."""


class OutOfRangeError(ValueError):
    """A candidate number outside the owning station's range."""

    def __init__(self, station: Station, number: int) -> None:
        self.station = station
        self.number = number
        super().__init__(
            f"Code must be between {station.range_min} and {station.range_max} for {station.name}."
        )


def is_valid_code(station: Station, number: int) -> bool:
    return station.range_min <= number <= station.range_max


def ensure_valid_code(station: Station, number: int) -> None:
    if not is_valid_code(station, number):
        raise OutOfRangeError(station, number)


def next_free_number(station: Station, issued_numbers: AbstractSet[int]) -> int | None:
    """Return the lowest number in the station's range not yet issued, or None when full."""
    for candidate in range(station.range_min, station.range_max + 1):
        if candidate not in issued_numbers:
            return candidate
    return None


def format_tracking_code(station: Station, number: int) -> str:
    return f"{station.name}{SEPARATOR}{number}"


def parse_tracking_code(code: str) -> tuple[str, int]:
    """Split ``code`` on its last separator into station name and number.

    Raises:
        MalformedCodeError: no separator, empty name, or a non-integer suffix.
    """
    text = (code or "").strip()
    name, sep, suffix = text.rpartition(SEPARATOR)
    if not sep or not name:
        raise MalformedCodeError(f"Tracking code '{code}' is missing a '<station>-<number>' separator")
    if not suffix.isdecimal() or not suffix.isascii():
        raise MalformedCodeError(f"Tracking code '{code}' has a non-integer suffix '{suffix}'")
    return name, int(suffix)


def issued_numbers(station: Station, packages: Iterable[Package]) -> set[int]:
    """Numbers already used by packages whose code belongs to ``station``."""
    used: set[int] = set()
    for package in packages:
        try:
            name, number = parse_tracking_code(package.tracking_number)
        except MalformedCodeError:
            logger.debug("Skipping package %s with malformed code %r", package.id, package.tracking_number)
            continue
        if name == station.name and is_valid_code(station, number):
            used.add(number)
    return used
