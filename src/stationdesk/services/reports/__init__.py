"""Reporting helpers."""

from .stats import (
    area_code_usage,
    count_packages_per_station,
    filter_packages,
    package_totals,
    station_summaries,
)

__all__ = [
    "area_code_usage",
    "count_packages_per_station",
    "filter_packages",
    "package_totals",
    "station_summaries",
]
