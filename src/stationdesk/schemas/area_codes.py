"""Area code API schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AreaCodeModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    region: str
    min_range: int
    max_range: int
    status: Literal["active", "inactive"]
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    package_count: int = 0


class AreaCodeCreateRequest(BaseModel):
    code: str
    name: str
    region: str
    min_range: int = Field(..., gt=0)
    max_range: int = Field(..., gt=0)
    status: Literal["active", "inactive"] = "active"
    assigned_to: Optional[str] = None
    notes: Optional[str] = None


class AreaCodeUpdateRequest(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    region: Optional[str] = None
    min_range: Optional[int] = Field(default=None, gt=0)
    max_range: Optional[int] = Field(default=None, gt=0)
    status: Optional[Literal["active", "inactive"]] = None
    notes: Optional[str] = None


class AssignRequest(BaseModel):
    user_id: Optional[str] = None
