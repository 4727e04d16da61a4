"""Package registration at a pickup station."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from ...models.domain import Package, Quantities
from ...persistence.store import PackageStore
from ..allocation import (
    ensure_valid_code,
    format_tracking_code,
    get_station,
    issued_numbers,
    next_free_number,
)

logger = logging.getLogger(__name__)


class RegistrationError(ValueError):
    """The registration form is incomplete."""


class RangeFullError(RuntimeError):
    """Every number in the station's range is already issued."""

    def __init__(self, station_name: str) -> None:
        self.station_name = station_name
        super().__init__(f"Full: no free codes left for {station_name}")


def suggest_code(store: PackageStore, station_key: str) -> dict:
    """Data behind the "Auto" button for one station."""
    station = get_station(station_key)
    next_free = next_free_number(station, issued_numbers(station, store.list_packages()))
    return {
        "station": station.name,
        "range_min": station.range_min,
        "range_max": station.range_max,
        "next_free": next_free,
        "full": next_free is None,
    }


def _validate_form(quantities: Quantities, recorded_by: str, brought_by: str) -> None:
    if min(quantities.boxes, quantities.basins, quantities.small_sacks) < 0:
        raise RegistrationError("Quantities cannot be negative.")
    if quantities.total <= 0:
        raise RegistrationError("At least one of boxes, basins or small sacks must be greater than zero.")
    if not recorded_by.strip():
        raise RegistrationError("Recorded by is required.")
    if not brought_by.strip():
        raise RegistrationError("Brought by is required.")


def register_package(
    store: PackageStore,
    station_key: str,
    *,
    quantities: Quantities,
    recorded_by: str,
    brought_by: str,
    number: int | None = None,
    registered_at: datetime | None = None,
) -> Package:
    """Register incoming goods and return the stored package.

    When ``number`` is omitted the lowest free number in the station's range is
    used.

    Raises:
        UnknownStationError: ``station_key`` is not in the range table.
        RangeFullError: no number was given and the range is exhausted.
        OutOfRangeError: the given number lies outside the station's range.
        RegistrationError: quantities or names are missing.
        DuplicateCodeError: the tracking code was issued in the meantime.
    """
    station = get_station(station_key)
    _validate_form(quantities, recorded_by, brought_by)

    if number is None:
        number = next_free_number(station, issued_numbers(station, store.list_packages()))
        if number is None:
            raise RangeFullError(station.name)
    else:
        ensure_valid_code(station, number)

    timestamp = (registered_at or datetime.now(timezone.utc)).isoformat()
    package = Package(
        id=uuid.uuid4().hex,
        tracking_number=format_tracking_code(station, number),
        station=station.name,
        area_code=str(number),
        registered_by=recorded_by.strip(),
        registered_at=timestamp,
        quantities=quantities,
        brought_by=brought_by.strip(),
        destination=station.name,
    )
    store.append_package(package)
    logger.info("Registered %s (%d items)", package.tracking_number, quantities.total)
    return package
