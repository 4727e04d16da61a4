"""Station ranges and tracking code allocation."""

from .allocator import (
    MalformedCodeError,
    OutOfRangeError,
    ensure_valid_code,
    format_tracking_code,
    is_valid_code,
    issued_numbers,
    next_free_number,
    parse_tracking_code,
)
from .stations import (
    DEFAULT_STATIONS,
    UnknownStationError,
    find_station_for_number,
    get_station,
    list_stations,
    validate_station_table,
)

__all__ = [
    "DEFAULT_STATIONS",
    "MalformedCodeError",
    "OutOfRangeError",
    "UnknownStationError",
    "ensure_valid_code",
    "find_station_for_number",
    "format_tracking_code",
    "get_station",
    "is_valid_code",
    "issued_numbers",
    "list_stations",
    "next_free_number",
    "parse_tracking_code",
    "validate_station_table",
]
