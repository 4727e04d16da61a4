"""Export helpers."""

from .tables import area_codes_to_csv, packages_to_csv, packages_to_xlsx, station_packages_to_csv

__all__ = [
    "area_codes_to_csv",
    "packages_to_csv",
    "packages_to_xlsx",
    "station_packages_to_csv",
]
