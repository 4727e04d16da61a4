"""Conversions between domain models and stored row shapes.

Rows use the lowercase column names of the Supabase tables. Readers also accept
the camelCase keys written by older dashboard builds, and decode quantities
that were packed into ``notes`` as ``boxes:N|basins:N|smallSacks:N``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..models.domain import AREA_CODE_STATUSES, PACKAGE_STATUSES, AreaCode, Package, Quantities

logger = logging.getLogger(__name__)

_QUANTITY_KEYS = {"boxes": "boxes", "basins": "basins", "smallSacks": "small_sacks"}


def _pick(row: dict, *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric weight %r", value)
        return None


def _status(row: dict, allowed: tuple[str, ...]) -> str:
    """Missing status reads as the first allowed value; an unknown one makes the row invalid."""
    value = row.get("status") or allowed[0]
    if value not in allowed:
        raise ValueError(f"unknown status {value!r}")
    return value


def _coerce_count(value: Any) -> int:
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError):
        return 0


def parse_legacy_quantities(notes: Optional[str]) -> Quantities:
    """Decode the pipe-delimited quantity string; unknown keys and bad values count as 0."""
    quantities = Quantities()
    if not notes:
        return quantities
    for part in str(notes).split("|"):
        key, _, raw_value = part.partition(":")
        attr = _QUANTITY_KEYS.get(key.strip())
        if attr is None:
            continue
        setattr(quantities, attr, getattr(quantities, attr) + _coerce_count(raw_value))
    return quantities


def _is_legacy_quantity_note(notes: Optional[str]) -> bool:
    if not notes:
        return False
    return all(part.partition(":")[0].strip() in _QUANTITY_KEYS for part in notes.split("|"))


def package_to_row(package: Package) -> dict:
    return {
        "id": package.id,
        "trackingnumber": package.tracking_number,
        "areacode": package.area_code,
        "station": package.station,
        "status": package.status,
        "registeredby": package.registered_by,
        "registeredat": package.registered_at,
        "boxes": package.quantities.boxes,
        "basins": package.quantities.basins,
        "smallsacks": package.quantities.small_sacks,
        "sendername": package.brought_by,
        "senderphone": package.sender_phone,
        "recipientname": package.recipient_name,
        "recipientphone": package.recipient_phone,
        "destination": package.destination,
        "weight": package.weight,
        "notes": package.notes,
    }


def row_to_package(row: dict) -> Package:
    notes = _optional_str(row.get("notes"))
    boxes = _pick(row, "boxes")
    basins = _pick(row, "basins")
    small_sacks = _pick(row, "smallsacks", "smallSacks", "small_sacks")
    if boxes is None and basins is None and small_sacks is None:
        quantities = parse_legacy_quantities(notes)
        if _is_legacy_quantity_note(notes):
            notes = None
    else:
        quantities = Quantities(
            boxes=_coerce_count(boxes),
            basins=_coerce_count(basins),
            small_sacks=_coerce_count(small_sacks),
        )

    return Package(
        id=str(row["id"]),
        tracking_number=str(_pick(row, "trackingnumber", "trackingNumber", "tracking_number") or ""),
        station=str(row.get("station") or ""),
        area_code=str(_pick(row, "areacode", "areaCode", "area_code") or ""),
        status=_status(row, PACKAGE_STATUSES),
        registered_by=str(_pick(row, "registeredby", "registeredBy", "registered_by") or ""),
        registered_at=str(_pick(row, "registeredat", "registeredAt", "registered_at") or ""),
        quantities=quantities,
        brought_by=_optional_str(_pick(row, "sendername", "senderName", "brought_by")),
        destination=_optional_str(row.get("destination")),
        weight=_optional_float(row.get("weight")),
        sender_phone=_optional_str(_pick(row, "senderphone", "senderPhone", "sender_phone")),
        recipient_name=_optional_str(_pick(row, "recipientname", "recipientName", "recipient_name")),
        recipient_phone=_optional_str(_pick(row, "recipientphone", "recipientPhone", "recipient_phone")),
        notes=notes,
    )


def area_code_to_row(area_code: AreaCode) -> dict:
    return {
        "id": area_code.id,
        "code": area_code.code,
        "name": area_code.name,
        "region": area_code.region,
        "minrange": area_code.min_range,
        "maxrange": area_code.max_range,
        "status": area_code.status,
        "assignedto": area_code.assigned_to,
        "notes": area_code.notes,
    }


def row_to_area_code(row: dict) -> AreaCode:
    return AreaCode(
        id=str(row["id"]),
        code=str(row.get("code") or ""),
        name=str(row.get("name") or ""),
        region=str(row.get("region") or ""),
        min_range=int(_pick(row, "minrange", "minRange", "min_range")),
        max_range=int(_pick(row, "maxrange", "maxRange", "max_range")),
        status=_status(row, AREA_CODE_STATUSES),
        assigned_to=_optional_str(_pick(row, "assignedto", "assignedTo", "assigned_to")),
        notes=_optional_str(row.get("notes")),
    )
