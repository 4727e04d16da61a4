"""Area code administration."""

from .service import (
    AreaCodeError,
    assign_area_code,
    create_area_code,
    delete_area_code,
    toggle_area_code_status,
    update_area_code,
)

__all__ = [
    "AreaCodeError",
    "assign_area_code",
    "create_area_code",
    "delete_area_code",
    "toggle_area_code_status",
    "update_area_code",
]
