"""Domain models for warehouse locations, items and inventory records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_LOCATION_CODE = "DEFAULT"


@dataclass(frozen=True, slots=True)
class Point:
    """Integer coordinates on the warehouse grid."""

    x: int
    y: int

    def __post_init__(self) -> None:
        for name in ("x", "y"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Point coordinate '{name}' must be an integer, got {value!r}")


@dataclass(frozen=True, slots=True)
class Location:
    """A shelf (or synthetic) position a picker can walk to."""

    location_code: str
    point: Point
    zone: Optional[str] = None
    aisle: Optional[str] = None
    bay: Optional[str] = None
    level: Optional[str] = None

    @property
    def x(self) -> int:
        return self.point.x

    @property
    def y(self) -> int:
        return self.point.y

    @classmethod
    def default(cls, x: int = 0, y: int = 0) -> "Location":
        return cls(
            location_code=DEFAULT_LOCATION_CODE,
            point=Point(x, y),
            zone=DEFAULT_LOCATION_CODE,
            aisle=DEFAULT_LOCATION_CODE,
        )


@dataclass(frozen=True, slots=True)
class Item:
    sku: str
    name: str


@dataclass(frozen=True, slots=True)
class InventoryRecord:
    sku: str
    location_code: str
    quantity: int = 0


@dataclass(frozen=True, slots=True)
class PickTarget:
    """A requested SKU and the location holding its first inventory record."""

    sku: str
    location: Location
