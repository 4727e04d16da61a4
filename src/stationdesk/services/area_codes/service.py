"""Area code administration over the store's area code list."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Callable, Optional

from ...models.domain import AREA_CODE_STATUSES, AreaCode
from ...persistence.store import PackageStore

logger = logging.getLogger(__name__)


class AreaCodeError(ValueError):
    """Area code fields are missing or inconsistent."""


def _validate(item: AreaCode) -> None:
    if not item.code.strip() or not item.name.strip() or not item.region.strip():
        raise AreaCodeError("code, name and region are required")
    if item.min_range <= 0 or item.max_range <= 0:
        raise AreaCodeError("min_range and max_range must be positive")
    if item.min_range > item.max_range:
        raise AreaCodeError(f"min_range {item.min_range} is greater than max_range {item.max_range}")
    if item.status not in AREA_CODE_STATUSES:
        raise AreaCodeError(f"Unknown status '{item.status}'")


def _find(items: list[AreaCode], area_code_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == area_code_id:
            return index
    raise LookupError(f"Area code {area_code_id} not found")


def create_area_code(
    store: PackageStore,
    *,
    code: str,
    name: str,
    region: str,
    min_range: int,
    max_range: int,
    status: str = "active",
    assigned_to: Optional[str] = None,
    notes: Optional[str] = None,
) -> AreaCode:
    item = AreaCode(
        id=uuid.uuid4().hex,
        code=code.strip(),
        name=name.strip(),
        region=region.strip(),
        min_range=min_range,
        max_range=max_range,
        status=status,
        assigned_to=assigned_to or None,
        notes=notes or None,
    )
    _validate(item)
    store.mutate_area_codes(lambda items: [item, *items])
    logger.info("Created area code %s (%d-%d)", item.code, item.min_range, item.max_range)
    return item


def _modify(store: PackageStore, area_code_id: str, build: Callable[[AreaCode], AreaCode]) -> AreaCode:
    """Replace one stored area code with ``build(current)`` inside a single store mutation."""
    result: list[AreaCode] = []

    def change(items: list[AreaCode]) -> list[AreaCode]:
        index = _find(items, area_code_id)
        updated = build(items[index])
        _validate(updated)
        items[index] = updated
        result.append(updated)
        return items

    store.mutate_area_codes(change)
    return result[0]


def update_area_code(store: PackageStore, area_code_id: str, **changes) -> AreaCode:
    changes.pop("id", None)
    return _modify(store, area_code_id, lambda current: replace(current, **changes))


def toggle_area_code_status(store: PackageStore, area_code_id: str) -> AreaCode:
    return _modify(
        store,
        area_code_id,
        lambda current: replace(current, status="inactive" if current.status == "active" else "active"),
    )


def assign_area_code(store: PackageStore, area_code_id: str, user_id: Optional[str]) -> AreaCode:
    return update_area_code(store, area_code_id, assigned_to=user_id or None)


def delete_area_code(store: PackageStore, area_code_id: str) -> None:
    items = store.list_area_codes()
    _find(items, area_code_id)
    store.delete_area_code(area_code_id)
    logger.info("Deleted area code %s", area_code_id)
