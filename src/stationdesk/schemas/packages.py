"""Package API schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .stations import QuantityTotalsModel


class QuantitiesModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    boxes: int = Field(default=0, ge=0)
    basins: int = Field(default=0, ge=0)
    small_sacks: int = Field(default=0, ge=0)


class PackageModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tracking_number: str
    station: str
    area_code: str
    status: Literal["registered", "in-transit", "delivered", "cancelled"]
    registered_by: str
    registered_at: str
    quantities: QuantitiesModel
    brought_by: Optional[str] = None
    destination: Optional[str] = None
    weight: Optional[float] = None
    sender_phone: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_phone: Optional[str] = None
    notes: Optional[str] = None


class PackageListResponse(BaseModel):
    items: List[PackageModel]
    totals: QuantityTotalsModel


class RegisterPackageRequest(BaseModel):
    station: str = Field(..., description="Station name or id.")
    number: Optional[int] = Field(default=None, description="Tracking number; omit to take the next free one.")
    quantities: QuantitiesModel
    recorded_by: str = Field(..., description="Staff member recording the goods.")
    brought_by: str = Field(..., description="Person who delivered the goods.")


class ParsedCodeResponse(BaseModel):
    station: str
    number: int
