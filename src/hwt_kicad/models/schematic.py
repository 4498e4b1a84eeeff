"""
Schematic sheet records.

A sheet holds what was drawn on one schematic page: placed symbols,
wires, net labels, junctions, no-connect markers, power symbols and buses.
Connectivity is not resolved here; a wire's net name stays unset until a
netlister fills it in.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .geometry import Point2D


class LabelType(str, Enum):
    """Scope of a net label."""

    LOCAL = "local"
    GLOBAL = "global"
    HIERARCHICAL = "hierarchical"

    def __str__(self) -> str:
        return self.value


class PowerSymbolStyle(str, Enum):
    """Glyph used to draw a power symbol."""

    GROUND = "ground"
    EARTH = "earth"
    BAR = "bar"

    def __str__(self) -> str:
        return self.value


@dataclass
class SymbolProperty:
    """A name/value property on a placed symbol (Reference, Value, Footprint, ...)."""

    name: str
    value: str


@dataclass
class SymbolPin:
    """A pin instance of a placed symbol."""

    number: str
    id: uuid.UUID


@dataclass
class PlacedSymbol:
    """
    A symbol instance placed on a sheet.

    ``library`` and ``symbol_name`` are the two halves of the KiCad lib_id
    (``Device:R`` gives ``Device`` and ``R``).
    """

    id: uuid.UUID
    reference: str
    value: str
    library: str
    symbol_name: str
    position: Point2D = field(default_factory=Point2D)
    rotation: float = 0.0
    mirror_x: bool = False
    mirror_y: bool = False
    unit: int = 1
    pins: List[SymbolPin] = field(default_factory=list)
    properties: List[SymbolProperty] = field(default_factory=list)

    @property
    def lib_id(self) -> str:
        return f"{self.library}:{self.symbol_name}"

    def get_property(self, name: str) -> Optional[str]:
        """Get a property value by name."""
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "reference": self.reference,
            "value": self.value,
            "library": self.library,
            "symbol_name": self.symbol_name,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            "mirror_x": self.mirror_x,
            "mirror_y": self.mirror_y,
            "unit": self.unit,
            "pins": [{"number": p.number, "id": str(p.id)} for p in self.pins],
            "properties": {p.name: p.value for p in self.properties},
        }

    def __repr__(self) -> str:
        return f"PlacedSymbol({self.reference!r}, lib={self.lib_id!r}, pos=({self.position.x}, {self.position.y}))"


@dataclass
class Wire:
    """A straight wire between two points."""

    id: uuid.UUID
    start: Point2D
    end: Point2D
    net_name: Optional[str] = None

    @property
    def length(self) -> float:
        return self.start.distance(self.end)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "net_name": self.net_name,
        }


@dataclass
class NetLabel:
    """A local, global or hierarchical net label."""

    id: uuid.UUID
    name: str
    position: Point2D
    label_type: LabelType = LabelType.LOCAL
    rotation: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "position": self.position.to_dict(),
            "label_type": str(self.label_type),
            "rotation": self.rotation,
        }


@dataclass
class Junction:
    """An explicit connection dot."""

    id: uuid.UUID
    position: Point2D

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id), "position": self.position.to_dict()}


@dataclass
class NoConnect:
    """A no-connect marker on an unused pin."""

    id: uuid.UUID
    position: Point2D

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id), "position": self.position.to_dict()}


@dataclass
class PowerSymbol:
    """A power or ground symbol standing for an implicit net."""

    id: uuid.UUID
    net_name: str
    position: Point2D
    rotation: float = 0.0
    style: PowerSymbolStyle = PowerSymbolStyle.BAR

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "net_name": self.net_name,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            "style": str(self.style),
        }


@dataclass
class BusSegment:
    """One straight run of a bus."""

    start: Point2D
    end: Point2D


@dataclass
class Bus:
    """A bus drawn as a polyline of segments."""

    id: uuid.UUID
    name: str = ""
    segments: List[BusSegment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "segments": [
                {"start": s.start.to_dict(), "end": s.end.to_dict()} for s in self.segments
            ],
        }


@dataclass
class SchematicSheet:
    """One imported schematic page."""

    name: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    version: Optional[int] = None
    generator: Optional[str] = None
    symbols: List[PlacedSymbol] = field(default_factory=list)
    wires: List[Wire] = field(default_factory=list)
    labels: List[NetLabel] = field(default_factory=list)
    junctions: List[Junction] = field(default_factory=list)
    no_connects: List[NoConnect] = field(default_factory=list)
    power_symbols: List[PowerSymbol] = field(default_factory=list)
    buses: List[Bus] = field(default_factory=list)

    def get_symbol(self, reference: str) -> Optional[PlacedSymbol]:
        """Get a symbol by its reference designator (e.g., 'R1', 'U1')."""
        for sym in self.symbols:
            if sym.reference == reference:
                return sym
        return None

    def summary(self) -> dict[str, Any]:
        """Element counts, for reports."""
        return {
            "name": self.name,
            "id": str(self.id),
            "version": self.version,
            "generator": self.generator,
            "symbols": len(self.symbols),
            "wires": len(self.wires),
            "labels": len(self.labels),
            "junctions": len(self.junctions),
            "no_connects": len(self.no_connects),
            "power_symbols": len(self.power_symbols),
            "buses": len(self.buses),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "version": self.version,
            "generator": self.generator,
            "symbols": [s.to_dict() for s in self.symbols],
            "wires": [w.to_dict() for w in self.wires],
            "labels": [lbl.to_dict() for lbl in self.labels],
            "junctions": [j.to_dict() for j in self.junctions],
            "no_connects": [nc.to_dict() for nc in self.no_connects],
            "power_symbols": [p.to_dict() for p in self.power_symbols],
            "buses": [b.to_dict() for b in self.buses],
        }

    def __repr__(self) -> str:
        return f"SchematicSheet({self.name!r}, symbols={len(self.symbols)}, wires={len(self.wires)})"
