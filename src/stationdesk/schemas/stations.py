"""Station API schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class StationModel(BaseModel):
    id: Optional[str] = None
    name: str
    range_min: int
    range_max: int


class CodeValidationResponse(BaseModel):
    station: str
    number: int
    valid: bool
    message: Optional[str] = None


class NextCodeResponse(BaseModel):
    station: str
    range_min: int
    range_max: int
    next_free: Optional[int] = None
    full: bool


class QuantityTotalsModel(BaseModel):
    count: int
    boxes: int
    basins: int
    small_sacks: int


class StationSummaryModel(BaseModel):
    station: str
    range_min: int
    range_max: int
    next_free: Optional[int] = None
    full: bool
    totals: QuantityTotalsModel
    recent: List[str]
