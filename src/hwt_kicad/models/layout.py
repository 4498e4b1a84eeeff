"""
Layout records.

Physical board data: layer stack, placed footprints with pads, copper
traces, vias and zones.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .geometry import LengthUnit, Point2D, Position


class LayerType(str, Enum):
    """Class of a board layer."""

    COPPER = "copper"
    DIELECTRIC = "dielectric"
    SOLDER_MASK = "soldermask"
    SILKSCREEN = "silkscreen"
    PASTE = "paste"
    COURTYARD = "courtyard"
    FABRICATION = "fabrication"

    def __str__(self) -> str:
        return self.value


class ComponentLayer(str, Enum):
    """Board side a footprint is mounted on."""

    TOP = "top"
    BOTTOM = "bottom"

    def __str__(self) -> str:
        return self.value


class PadType(str, Enum):
    THRU_HOLE = "thru_hole"
    SMD = "smd"
    NPTH = "npth"
    CONNECT = "connect"

    def __str__(self) -> str:
        return self.value


class PadShape(str, Enum):
    CIRCLE = "circle"
    RECT = "rect"
    OVAL = "oval"
    ROUND_RECT = "roundrect"
    TRAPEZOID = "trapezoid"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


class ViaType(str, Enum):
    THROUGH = "through"
    BLIND = "blind"
    BURIED = "buried"
    MICRO = "micro"

    def __str__(self) -> str:
        return self.value


class ZoneFillType(str, Enum):
    SOLID = "solid"
    HATCHED = "hatched"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class OutlineType(str, Enum):
    RECTANGLE = "rectangle"
    POLYGON = "polygon"
    CIRCLE = "circle"

    def __str__(self) -> str:
        return self.value


@dataclass
class Layer:
    """A layer in the board stack."""

    name: str
    layer_type: LayerType
    thickness: Optional[float] = None
    material: Optional[str] = None
    visible: bool = True

    @property
    def is_copper(self) -> bool:
        return self.layer_type == LayerType.COPPER

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "layer_type": str(self.layer_type),
            "visible": self.visible,
        }
        if self.thickness is not None:
            data["thickness"] = self.thickness
        if self.material is not None:
            data["material"] = self.material
        return data


# Layer set of a plain two-layer board, used when a file declares no stack.
DEFAULT_PCB_LAYERS: Tuple[Tuple[str, LayerType], ...] = (
    ("F.Cu", LayerType.COPPER),
    ("B.Cu", LayerType.COPPER),
    ("F.Paste", LayerType.PASTE),
    ("B.Paste", LayerType.PASTE),
    ("F.SilkS", LayerType.SILKSCREEN),
    ("B.SilkS", LayerType.SILKSCREEN),
    ("F.Mask", LayerType.SOLDER_MASK),
    ("B.Mask", LayerType.SOLDER_MASK),
    ("F.CrtYd", LayerType.COURTYARD),
    ("B.CrtYd", LayerType.COURTYARD),
    ("F.Fab", LayerType.FABRICATION),
    ("B.Fab", LayerType.FABRICATION),
    ("Edge.Cuts", LayerType.FABRICATION),
)


def default_pcb_layers() -> List[Layer]:
    """Fresh copy of the default two-layer stack."""
    return [Layer(name, layer_type) for name, layer_type in DEFAULT_PCB_LAYERS]


@dataclass
class Pad:
    """A copper contact of a footprint. Position is relative to the footprint."""

    number: str
    pad_type: PadType = PadType.SMD
    shape: PadShape = PadShape.RECT
    position: Point2D = field(default_factory=Point2D)
    size: Tuple[float, float] = (1.0, 1.0)
    drill: float = 0.0
    net: Optional[str] = None
    name: Optional[str] = None
    layers: List[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "name": self.name,
            "pad_type": str(self.pad_type),
            "shape": str(self.shape),
            "position": self.position.to_dict(),
            "size": list(self.size),
            "drill": self.drill,
            "net": self.net,
            "layers": list(self.layers),
        }


@dataclass
class PlacedComponent:
    """A footprint placed on the board."""

    reference: str
    value: str
    footprint: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    position: Position = field(default_factory=Position)
    rotation: float = 0.0
    layer: ComponentLayer = ComponentLayer.TOP
    pads: List[Pad] = field(default_factory=list)
    locked: bool = False

    def get_pad(self, number: str) -> Optional[Pad]:
        for pad in self.pads:
            if pad.number == number:
                return pad
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "reference": self.reference,
            "value": self.value,
            "footprint": self.footprint,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            "layer": str(self.layer),
            "locked": self.locked,
            "pads": [p.to_dict() for p in self.pads],
        }

    def __repr__(self) -> str:
        return f"PlacedComponent({self.reference!r}, {self.footprint!r}, pads={len(self.pads)})"


@dataclass
class Trace:
    """A straight copper trace segment."""

    net: str
    layer: str
    start: Position
    end: Position
    width: float
    unit: LengthUnit = LengthUnit.MM

    @property
    def length(self) -> float:
        return self.start.to_point2d().distance(self.end.to_point2d())

    def to_dict(self) -> dict[str, Any]:
        return {
            "net": self.net,
            "layer": self.layer,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "width": self.width,
            "unit": str(self.unit),
        }


@dataclass
class Via:
    """A plated hole between copper layers."""

    net: str
    position: Position
    via_type: ViaType = ViaType.THROUGH
    drill: float = 0.3
    pad: float = 0.6
    start_layer: Optional[str] = None
    end_layer: Optional[str] = None
    unit: LengthUnit = LengthUnit.MM

    def to_dict(self) -> dict[str, Any]:
        return {
            "net": self.net,
            "position": self.position.to_dict(),
            "via_type": str(self.via_type),
            "drill": self.drill,
            "pad": self.pad,
            "start_layer": self.start_layer,
            "end_layer": self.end_layer,
            "unit": str(self.unit),
        }


@dataclass
class Zone:
    """A copper pour outline tied to a net."""

    net: str
    layer: str
    points: List[Point2D] = field(default_factory=list)
    fill_type: ZoneFillType = ZoneFillType.SOLID
    clearance: Optional[float] = None
    min_width: Optional[float] = None
    unit: LengthUnit = LengthUnit.MM

    def to_dict(self) -> dict[str, Any]:
        return {
            "net": self.net,
            "layer": self.layer,
            "points": [p.to_dict() for p in self.points],
            "fill_type": str(self.fill_type),
            "clearance": self.clearance,
            "min_width": self.min_width,
            "unit": str(self.unit),
        }


@dataclass
class Outline:
    """Board outline."""

    outline_type: OutlineType = OutlineType.RECTANGLE
    points: List[Point2D] = field(default_factory=list)
    width: Optional[float] = None
    height: Optional[float] = None
    unit: LengthUnit = LengthUnit.MM

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.outline_type),
            "points": [p.to_dict() for p in self.points],
            "width": self.width,
            "height": self.height,
            "unit": str(self.unit),
        }


@dataclass
class Layout:
    """An imported board."""

    outline: Optional[Outline] = None
    layers: List[Layer] = field(default_factory=list)
    nets: Dict[int, str] = field(default_factory=dict)
    components: List[PlacedComponent] = field(default_factory=list)
    traces: List[Trace] = field(default_factory=list)
    vias: List[Via] = field(default_factory=list)
    zones: List[Zone] = field(default_factory=list)

    def get_layer(self, name: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    @property
    def copper_layers(self) -> List[Layer]:
        return [layer for layer in self.layers if layer.is_copper]

    def get_component(self, reference: str) -> Optional[PlacedComponent]:
        """Get a footprint by reference designator."""
        for comp in self.components:
            if comp.reference == reference:
                return comp
        return None

    def traces_in_net(self, net: str) -> Iterator[Trace]:
        for trace in self.traces:
            if trace.net == net:
                yield trace

    def total_trace_length(self, layer: Optional[str] = None) -> float:
        """Sum of trace lengths in mm, optionally for one layer."""
        return sum(t.length for t in self.traces if layer is None or t.layer == layer)

    def summary(self) -> dict[str, Any]:
        """Element counts, for reports."""
        return {
            "layers": len(self.layers),
            "copper_layers": len(self.copper_layers),
            "nets": len(self.nets),
            "footprints": len(self.components),
            "traces": len(self.traces),
            "vias": len(self.vias),
            "zones": len(self.zones),
            "trace_length_mm": round(self.total_trace_length(), 2),
            "outline": str(self.outline.outline_type) if self.outline else None,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "outline": self.outline.to_dict() if self.outline else None,
            "layers": [layer.to_dict() for layer in self.layers],
            "nets": {str(k): v for k, v in self.nets.items()},
            "components": [c.to_dict() for c in self.components],
            "traces": [t.to_dict() for t in self.traces],
            "vias": [v.to_dict() for v in self.vias],
            "zones": [z.to_dict() for z in self.zones],
        }
