"""Package counts and quantity totals."""

from __future__ import annotations

import logging
import re
from collections import Counter, defaultdict
from dataclasses import asdict
from typing import Dict, Iterable, List, Optional, Sequence

from ...models.domain import AreaCode, Package, Quantities, Station
from ..allocation import MalformedCodeError, issued_numbers, next_free_number, parse_tracking_code

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def count_packages_per_station(packages: Iterable[Package]) -> Dict[str, int]:
    """Count packages by the station named in their tracking code.

    Duplicated codes are counted once per record. Records whose code does not
    parse are left out of the counts.
    """
    counts: Counter[str] = Counter()
    skipped = 0
    for package in packages:
        try:
            name, _ = parse_tracking_code(package.tracking_number)
        except MalformedCodeError:
            skipped += 1
            continue
        counts[name] += 1
    if skipped:
        logger.debug("Skipped %d packages with malformed tracking codes", skipped)
    return dict(counts)


def package_totals(packages: Iterable[Package]) -> dict:
    count = 0
    totals = Quantities()
    for package in packages:
        count += 1
        totals = totals + package.quantities
    return {"count": count, **asdict(totals)}


def filter_packages(
    packages: Iterable[Package],
    *,
    query: Optional[str] = None,
    station: Optional[str] = None,
) -> List[Package]:
    """Match ``query`` against tracking code and names; ``station`` must match exactly."""
    normalized = (query or "").strip().lower()
    result: List[Package] = []
    for package in packages:
        if station and package.station != station:
            continue
        if normalized:
            haystack = (
                package.tracking_number,
                package.recipient_name or "",
                package.brought_by or "",
                package.registered_by,
            )
            if not any(normalized in value.lower() for value in haystack):
                continue
        result.append(package)
    return result


def station_summaries(
    packages: Sequence[Package],
    stations: Sequence[Station],
    *,
    recent: int = 5,
    date_prefix: Optional[str] = None,
) -> List[dict]:
    by_station: dict[str, list[Package]] = defaultdict(list)
    for package in packages:
        by_station[package.station].append(package)

    summaries: List[dict] = []
    for station in stations:
        station_packages = by_station.get(station.name, [])
        if date_prefix and not any(p.registered_at.startswith(date_prefix) for p in station_packages):
            continue
        latest = sorted(station_packages, key=lambda p: p.registered_at, reverse=True)[:recent]
        next_free = next_free_number(station, issued_numbers(station, station_packages))
        summaries.append(
            {
                "station": station.name,
                "range_min": station.range_min,
                "range_max": station.range_max,
                "next_free": next_free,
                "full": next_free is None,
                "totals": package_totals(station_packages),
                "recent": [p.tracking_number for p in latest],
            }
        )
    return summaries


def _area_number(tracking_number: str) -> Optional[int]:
    parts = tracking_number.split("-")
    if len(parts) < 2:
        return None
    match = _LEADING_DIGITS.match(parts[1])
    return int(match.group(1)) if match else None


def area_code_usage(packages: Iterable[Package], area_codes: Sequence[AreaCode]) -> Dict[str, int]:
    """Packages per area code, matched on the number after the first '-'.

    A number falling in several overlapping ranges is credited to the first.
    """
    usage: Dict[str, int] = {}
    for package in packages:
        number = _area_number(package.tracking_number or "")
        if number is None:
            continue
        owner = next((item for item in area_codes if item.contains(number)), None)
        if owner is not None:
            usage[owner.id] = usage.get(owner.id, 0) + 1
    return usage
