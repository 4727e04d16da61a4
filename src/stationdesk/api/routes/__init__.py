"""Route group exports."""

from . import area_codes, health, packages, reports, stations

__all__ = ["area_codes", "health", "packages", "reports", "stations"]
