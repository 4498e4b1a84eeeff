"""
Component records.

A component imported from a symbol library is a template: it has pins and
properties but is not placed and has no nets.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .geometry import Position


class PinType(str, Enum):
    """Electrical type of a pin."""

    INPUT = "input"
    OUTPUT = "output"
    BIDIRECTIONAL = "bidirectional"
    POWER_INPUT = "powerinput"
    POWER_OUTPUT = "poweroutput"
    GROUND = "ground"
    PASSIVE = "passive"
    NO_CONNECT = "noconnect"
    OPEN_COLLECTOR = "opencollector"
    OPEN_EMITTER = "openemitter"
    TRI_STATE = "tristate"

    def __str__(self) -> str:
        return self.value


@dataclass
class Pin:
    """A pin on a component."""

    id: str
    name: str
    net: Optional[str] = None
    pin_type: PinType = PinType.PASSIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "net": self.net,
            "pin_type": str(self.pin_type),
        }


@dataclass
class Component:
    """A component definition (type, pins, properties)."""

    component_type: str
    reference: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    value: Optional[str] = None
    symbol: Optional[str] = None
    footprint: Optional[str] = None
    position: Position = field(default_factory=Position)
    rotation: float = 0.0
    pins: List[Pin] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)

    @property
    def pin_count(self) -> int:
        return len(self.pins)

    def get_pin(self, pin_id: str) -> Optional[Pin]:
        """Get a pin by number."""
        for pin in self.pins:
            if pin.id == pin_id:
                return pin
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "type": self.component_type,
            "reference": self.reference,
            "value": self.value,
            "symbol": self.symbol,
            "footprint": self.footprint,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            "pins": [p.to_dict() for p in self.pins],
            "properties": dict(self.properties),
        }

    def __repr__(self) -> str:
        return f"Component({self.component_type!r}, pins={len(self.pins)})"
