"""Station range table."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Station

DEFAULT_STATIONS: tuple[Station, ...] = (
    Station(id="embu", name="Embu", range_min=1, range_max=300),
    Station(id="ugweri", name="Ugweri", range_min=301, range_max=600),
    Station(id="meka", name="Meka", range_min=601, range_max=900),
    Station(id="ena", name="Ena", range_min=901, range_max=1000),
    Station(id="gachuriri", name="Gachuriri", range_min=1001, range_max=1100),
)


class UnknownStationError(KeyError):
    """Raised when a station name or id is not in the range table."""


def validate_station_table(stations: Sequence[Station]) -> None:
    """Reject tables with inverted, overlapping or unparseable entries."""
    seen: set[str] = set()
    for station in stations:
        if not station.name or "-" in station.name:
            raise ValueError(f"Station name '{station.name}' cannot be empty or contain '-'")
        if station.range_min > station.range_max:
            raise ValueError(
                f"Station {station.name} has range_min {station.range_min} > range_max {station.range_max}"
            )
        key = station.name.lower()
        if key in seen:
            raise ValueError(f"Duplicate station name: {station.name}")
        seen.add(key)

    ordered = sorted(stations, key=lambda item: item.range_min)
    for previous, current in zip(ordered, ordered[1:]):
        if current.range_min <= previous.range_max:
            raise ValueError(f"Stations {previous.name} and {current.name} have overlapping ranges")


def list_stations() -> tuple[Station, ...]:
    return DEFAULT_STATIONS


def get_station(key: str, stations: Sequence[Station] | None = None) -> Station:
    """Look a station up by name or id, ignoring case."""
    normalized = key.strip().lower()
    for station in stations if stations is not None else DEFAULT_STATIONS:
        if station.name.lower() == normalized or (station.id and station.id.lower() == normalized):
            return station
    raise UnknownStationError(key)


def find_station_for_number(number: int, stations: Sequence[Station] | None = None) -> Station | None:
    for station in stations if stations is not None else DEFAULT_STATIONS:
        if station.range_min <= number <= station.range_max:
            return station
    return None


validate_station_table(DEFAULT_STATIONS)
