"""Design records populated by the importers."""

from .component import Component, Pin, PinType
from .geometry import LengthUnit, Point2D, Position
from .layout import (
    ComponentLayer,
    Layer,
    LayerType,
    Layout,
    Outline,
    OutlineType,
    Pad,
    PadShape,
    PadType,
    PlacedComponent,
    Trace,
    Via,
    ViaType,
    Zone,
    ZoneFillType,
    default_pcb_layers,
)
from .schematic import (
    Bus,
    BusSegment,
    Junction,
    LabelType,
    NetLabel,
    NoConnect,
    PlacedSymbol,
    PowerSymbol,
    PowerSymbolStyle,
    SchematicSheet,
    SymbolPin,
    SymbolProperty,
    Wire,
)

__all__ = [
    # Geometry
    "LengthUnit",
    "Point2D",
    "Position",
    # Schematic
    "SchematicSheet",
    "PlacedSymbol",
    "SymbolPin",
    "SymbolProperty",
    "Wire",
    "NetLabel",
    "LabelType",
    "Junction",
    "NoConnect",
    "PowerSymbol",
    "PowerSymbolStyle",
    "Bus",
    "BusSegment",
    # Components
    "Component",
    "Pin",
    "PinType",
    # Layout
    "Layout",
    "Layer",
    "LayerType",
    "PlacedComponent",
    "ComponentLayer",
    "Pad",
    "PadType",
    "PadShape",
    "Trace",
    "Via",
    "ViaType",
    "Zone",
    "ZoneFillType",
    "Outline",
    "OutlineType",
    "default_pcb_layers",
]
