"""Domain models for stations, packages and area codes."""

from dataclasses import dataclass, field
from typing import Literal, Optional, get_args

PackageStatus = Literal["registered", "in-transit", "delivered", "cancelled"]
AreaCodeStatus = Literal["active", "inactive"]

PACKAGE_STATUSES: tuple[str, ...] = get_args(PackageStatus)
AREA_CODE_STATUSES: tuple[str, ...] = get_args(AreaCodeStatus)


@dataclass(frozen=True, slots=True)
class Station:
    """A pickup location with a reserved block of tracking numbers."""

    name: str
    range_min: int
    range_max: int
    id: Optional[str] = None

    @property
    def capacity(self) -> int:
        return self.range_max - self.range_min + 1


@dataclass(slots=True)
class Quantities:
    """Counts of each packaging type carried by one registration."""

    boxes: int = 0
    basins: int = 0
    small_sacks: int = 0

    @property
    def total(self) -> int:
        return self.boxes + self.basins + self.small_sacks

    def __add__(self, other: "Quantities") -> "Quantities":
        return Quantities(
            boxes=self.boxes + other.boxes,
            basins=self.basins + other.basins,
            small_sacks=self.small_sacks + other.small_sacks,
        )


@dataclass(slots=True)
class Package:
    """A registered package identified by its tracking code."""

    id: str
    tracking_number: str
    station: str
    area_code: str
    registered_by: str
    registered_at: str
    status: PackageStatus = "registered"
    quantities: Quantities = field(default_factory=Quantities)
    brought_by: Optional[str] = None
    destination: Optional[str] = None
    weight: Optional[float] = None
    sender_phone: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_phone: Optional[str] = None
    notes: Optional[str] = None


@dataclass(slots=True)
class AreaCode:
    """Admin-managed numeric range, tracked separately from the station table."""

    id: str
    code: str
    name: str
    region: str
    min_range: int
    max_range: int
    status: AreaCodeStatus = "active"
    assigned_to: Optional[str] = None
    notes: Optional[str] = None

    def contains(self, number: int) -> bool:
        return self.min_range <= number <= self.max_range
