"""Reporting endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...persistence.store import PackageStore, get_store
from ...services.reports import count_packages_per_station, package_totals

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/stations")
def packages_per_station(store: PackageStore = Depends(get_store)) -> dict:
    packages = store.list_packages()
    return {
        "counts": count_packages_per_station(packages),
        "totals": package_totals(packages),
    }
