"""Geometry primitives shared by the schematic and layout records."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class LengthUnit(str, Enum):
    """Length units. KiCad files are always in millimeters."""

    MM = "mm"
    MIL = "mil"
    UM = "um"
    NM = "nm"
    INCH = "inch"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Point2D:
    """A 2D point in millimeters."""

    x: float = 0.0
    y: float = 0.0

    def distance(self, other: Point2D) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Position:
    """A board position with optional Z and an explicit unit."""

    x: float = 0.0
    y: float = 0.0
    z: Optional[float] = None
    unit: LengthUnit = LengthUnit.MM

    def to_point2d(self) -> Point2D:
        return Point2D(self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"x": self.x, "y": self.y, "unit": str(self.unit)}
        if self.z is not None:
            data["z"] = self.z
        return data
