"""Serialize package and area code lists into CSV/XLSX downloads."""

from __future__ import annotations

import csv
import io
from typing import Iterable, Mapping, Sequence

from openpyxl import Workbook

from ...models.domain import AreaCode, Package

PACKAGE_COLUMNS = [
    "id",
    "trackingNumber",
    "station",
    "recipientName",
    "destination",
    "registeredAt",
    "boxes",
    "basins",
    "smallSacks",
]
STATION_COLUMNS = ["id", "trackingNumber", "recipientName", "registeredAt", "boxes", "basins", "smallSacks"]
AREA_CODE_COLUMNS = ["Code", "Name", "Region", "Min Range", "Max Range", "Status", "Assigned To", "Package Count"]


def _package_row(package: Package) -> dict:
    return {
        "id": package.id,
        "trackingNumber": package.tracking_number,
        "station": package.station,
        "recipientName": package.recipient_name or "",
        "destination": package.destination or "",
        "registeredAt": package.registered_at or "",
        "boxes": package.quantities.boxes,
        "basins": package.quantities.basins,
        "smallSacks": package.quantities.small_sacks,
    }


def _write_csv(fieldnames: Sequence[str], rows: Iterable[Mapping]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=list(fieldnames),
        quoting=csv.QUOTE_ALL,
        extrasaction="ignore",
        lineterminator="\n",
    )
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def packages_to_csv(packages: Iterable[Package]) -> str:
    return _write_csv(PACKAGE_COLUMNS, (_package_row(p) for p in packages))


def station_packages_to_csv(packages: Iterable[Package]) -> str:
    return _write_csv(STATION_COLUMNS, (_package_row(p) for p in packages))


def area_codes_to_csv(
    area_codes: Iterable[AreaCode],
    usage: Mapping[str, int],
    user_names: Mapping[str, str] | None = None,
) -> str:
    user_names = user_names or {}
    rows = []
    for item in area_codes:
        rows.append(
            {
                "Code": item.code,
                "Name": item.name,
                "Region": item.region,
                "Min Range": item.min_range,
                "Max Range": item.max_range,
                "Status": item.status,
                "Assigned To": user_names.get(item.assigned_to or "", item.assigned_to or "Unassigned"),
                "Package Count": usage.get(item.id, 0),
            }
        )
    return _write_csv(AREA_CODE_COLUMNS, rows)


def packages_to_xlsx(packages: Iterable[Package], sheet_name: str = "packages") -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_name
    sheet.append(PACKAGE_COLUMNS)
    for package in packages:
        row = _package_row(package)
        sheet.append([row[column] for column in PACKAGE_COLUMNS])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
