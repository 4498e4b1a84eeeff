"""
PCB importer.

Maps a ``kicad_pcb`` document onto a Layout: layer stack, net table,
footprints with pads, trace segments, vias, zones and the board outline.

Footprints and zones are best effort. A segment without endpoints or a via
without a position aborts the import with MissingElementError, since the
copper it describes cannot be placed.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..exceptions import MissingElementError
from ..identifiers import IdSource, RandomIdSource
from ..models.geometry import Point2D, Position
from ..models.layout import (
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
from ..sexp import SExpr
from .common import collect_elements, element_id, parse_document, read_points, read_position, read_xy

logger = logging.getLogger(__name__)

LAYER_CLASSES: Dict[str, LayerType] = {
    "signal": LayerType.COPPER,
    "power": LayerType.COPPER,
}

# Appended to every stack that lacks them.
STANDARD_LAYERS = (
    ("F.SilkS", LayerType.SILKSCREEN),
    ("B.SilkS", LayerType.SILKSCREEN),
    ("F.Mask", LayerType.SOLDER_MASK),
    ("B.Mask", LayerType.SOLDER_MASK),
    ("Edge.Cuts", LayerType.FABRICATION),
)

PAD_TYPES: Dict[str, PadType] = {
    "thru_hole": PadType.THRU_HOLE,
    "smd": PadType.SMD,
    "np_thru_hole": PadType.NPTH,
    "connect": PadType.CONNECT,
}

PAD_SHAPES: Dict[str, PadShape] = {
    "circle": PadShape.CIRCLE,
    "rect": PadShape.RECT,
    "oval": PadShape.OVAL,
    "roundrect": PadShape.ROUND_RECT,
    "trapezoid": PadShape.TRAPEZOID,
    "custom": PadShape.CUSTOM,
}

DEFAULT_TRACE_WIDTH = 0.25
DEFAULT_VIA_SIZE = 0.6
DEFAULT_VIA_DRILL = 0.3
EDGE_CUTS = "Edge.Cuts"


def pad_type_from_token(token: Optional[str]) -> PadType:
    return PAD_TYPES.get(token or "", PadType.SMD)


def pad_shape_from_token(token: Optional[str]) -> PadShape:
    return PAD_SHAPES.get(token or "", PadShape.RECT)


def classify_via(layers: List[str]) -> tuple:
    """
    Via type and start/end layers from a ``layers`` span.

    ``F.Cu``..``B.Cu`` is a through via; any other span of two or more
    layers is blind. A shorter span is through with no recorded layers.
    Buried and micro vias are never inferred.
    """
    if len(layers) < 2:
        return ViaType.THROUGH, None, None
    start, end = layers[0], layers[-1]
    if start == "F.Cu" and end == "B.Cu":
        return ViaType.THROUGH, start, end
    return ViaType.BLIND, start, end


def read_layer_stack(layers_node: Optional[SExpr]) -> List[Layer]:
    """
    Layers from the top-level ``layers`` block, or the default stack.

    Entries are ``(index name class ...)``; the index is ignored.
    """
    if layers_node is None:
        layers = default_pcb_layers()
    else:
        layers = []
        for entry in layers_node.iter_children():
            if len(entry.items) < 3:
                continue
            name = entry.get_atom(0) or "Unknown"
            layer_class = entry.get_atom(1) or "signal"
            layers.append(Layer(name, LAYER_CLASSES.get(layer_class, LayerType.FABRICATION)))

    names = {layer.name for layer in layers}
    for name, layer_type in STANDARD_LAYERS:
        if name not in names:
            layers.append(Layer(name, layer_type))
            names.add(name)
    return layers


def apply_stackup(layers: List[Layer], setup: Optional[SExpr]) -> None:
    """Fill thickness and material from ``(setup (stackup (layer ...)))``."""
    if setup is None or (stackup := setup.find("stackup")) is None:
        return
    by_name = {layer.name: layer for layer in layers}
    for entry in stackup.find_all("layer"):
        layer = by_name.get(entry.get_atom(0) or "")
        if layer is None:
            continue
        if thickness := entry.find("thickness"):
            layer.thickness = thickness.get_float(0)
        if material := entry.find("material"):
            layer.material = material.get_atom(0)


def read_net_table(root: SExpr) -> Dict[int, str]:
    """Top-level ``(net N "name")`` declarations."""
    nets = {}
    for net in root.find_all("net"):
        index = net.get_int(0)
        if index is not None:
            nets[index] = net.get_atom(1) or ""
    return nets


def read_outline(root: SExpr) -> Optional[Outline]:
    """Board outline from the first Edge.Cuts rectangle, else polygon."""
    for rect in root.find_all("gr_rect"):
        if _on_layer(rect, EDGE_CUTS):
            start = read_xy(rect.find("start"))
            end = read_xy(rect.find("end"))
            return Outline(
                outline_type=OutlineType.RECTANGLE,
                points=[
                    start,
                    Point2D(end.x, start.y),
                    end,
                    Point2D(start.x, end.y),
                ],
                width=abs(end.x - start.x),
                height=abs(end.y - start.y),
            )
    for poly in root.find_all("gr_poly"):
        if _on_layer(poly, EDGE_CUTS):
            pts = poly.find("pts")
            return Outline(
                outline_type=OutlineType.POLYGON,
                points=read_points(pts) if pts is not None else [],
            )
    return None


def _on_layer(node: SExpr, name: str) -> bool:
    layer = node.find("layer")
    return layer is not None and layer.get_atom(0) == name


class PcbImporter:
    """Converts one parsed board into a Layout."""

    def __init__(self, id_source: Optional[IdSource] = None, strict: bool = False):
        self.id_source = id_source or RandomIdSource()
        self.strict = strict
        self.nets: Dict[int, str] = {}

    def import_text(self, text: str) -> Layout:
        root = parse_document(text, "kicad_pcb", "PCB")

        layout = Layout()
        layout.layers = read_layer_stack(root.find("layers"))
        apply_stackup(layout.layers, root.find("setup"))
        layout.nets = self.nets = read_net_table(root)
        layout.outline = read_outline(root)

        layout.components = collect_elements(root, "footprint", self._footprint, strict=self.strict)
        layout.traces = [self._segment(node) for node in root.find_all("segment")]
        layout.vias = [self._via(node) for node in root.find_all("via")]
        layout.zones = collect_elements(root, "zone", self._zone, strict=self.strict)

        logger.debug("Imported PCB: %s", layout.summary())
        return layout

    def resolve_net(self, token: Optional[str]) -> str:
        """Net name for a net index token; unknown tokens are kept verbatim."""
        if token is None:
            return ""
        try:
            index = int(token)
        except ValueError:
            return token
        return self.nets.get(index, token)

    def _footprint(self, node: SExpr, index: int) -> PlacedComponent:
        name = node.get_atom(0) or "Unknown"

        position, rotation = Position(), 0.0
        if at := node.find("at"):
            position = read_position(at)
            rotation = at.get_float(2) or 0.0

        side = ComponentLayer.TOP
        if layer := node.find("layer"):
            if (layer.get_atom(0) or "").startswith("B."):
                side = ComponentLayer.BOTTOM

        reference = value = None
        for fp_text in node.find_all("fp_text"):
            kind = fp_text.get_atom(0)
            if kind == "reference" and reference is None:
                reference = fp_text.get_atom(1)
            elif kind == "value" and value is None:
                value = fp_text.get_atom(1)
        for prop in node.find_all("property"):
            key = prop.get_atom(0)
            if key == "Reference" and reference is None:
                reference = prop.get_atom(1)
            elif key == "Value" and value is None:
                value = prop.get_atom(1)

        locked = node.has_flag("locked")
        if locked_node := node.find("locked"):
            locked = locked_node.get_atom(0) != "no"

        pads = collect_elements(node, "pad", self._pad, strict=self.strict)

        return PlacedComponent(
            id=element_id(node, "footprint", index, self.id_source),
            reference=reference or "U?",
            value=value or "",
            footprint=name,
            position=position,
            rotation=rotation,
            layer=side,
            pads=pads,
            locked=locked,
        )

    def _pad(self, node: SExpr, index: int) -> Pad:
        size = (1.0, 1.0)
        if size_node := node.find("size"):
            width = size_node.get_float(0)
            height = size_node.get_float(1)
            size = (1.0 if width is None else width, 1.0 if height is None else height)

        drill = 0.0
        if drill_node := node.find("drill"):
            # (drill oval w h) gives the slot width
            first = 1 if drill_node.get_atom(0) == "oval" else 0
            drill = drill_node.get_float(first) or 0.0

        net = None
        if net_node := node.find("net"):
            net = net_node.get_atom(1)

        layers = []
        if layers_node := node.find("layers"):
            layers = layers_node.atoms()

        return Pad(
            number=node.get_atom(0) or "1",
            pad_type=pad_type_from_token(node.get_atom(1)),
            shape=pad_shape_from_token(node.get_atom(2)),
            position=read_xy(node.find("at")),
            size=size,
            drill=drill,
            net=net,
            layers=layers,
        )

    def _segment(self, node: SExpr) -> Trace:
        start, end = node.find("start"), node.find("end")
        if start is None or end is None:
            raise MissingElementError(
                f"Segment missing {'start' if start is None else 'end'} point",
                context={"segment": node.to_string()},
            )

        width = DEFAULT_TRACE_WIDTH
        if width_node := node.find("width"):
            width = _or_default(width_node.get_float(0), DEFAULT_TRACE_WIDTH)

        return Trace(
            net=self._net_of(node),
            layer=_layer_of(node),
            start=read_position(start),
            end=read_position(end),
            width=width,
        )

    def _via(self, node: SExpr) -> Via:
        at = node.find("at")
        if at is None:
            raise MissingElementError(
                "Via missing position",
                context={"via": node.to_string()},
            )

        pad = DEFAULT_VIA_SIZE
        if size_node := node.find("size"):
            pad = _or_default(size_node.get_float(0), DEFAULT_VIA_SIZE)
        drill = DEFAULT_VIA_DRILL
        if drill_node := node.find("drill"):
            drill = _or_default(drill_node.get_float(0), DEFAULT_VIA_DRILL)

        span = []
        if layers_node := node.find("layers"):
            span = layers_node.atoms()
        via_type, start_layer, end_layer = classify_via(span)

        return Via(
            net=self._net_of(node),
            position=read_position(at),
            via_type=via_type,
            drill=drill,
            pad=pad,
            start_layer=start_layer,
            end_layer=end_layer,
        )

    def _zone(self, node: SExpr, index: int) -> Zone:
        net = ""
        if net_name := node.find("net_name"):
            net = net_name.get_atom(0) or ""

        layer = "F.Cu"
        if layer_node := node.find("layer"):
            layer = layer_node.get_atom(0) or layer
        elif layers_node := node.find("layers"):
            layer = next(iter(layers_node.atoms()), layer)

        points = []
        if polygon := node.find("polygon"):
            if pts := polygon.find("pts"):
                points = read_points(pts)

        fill_type = ZoneFillType.SOLID
        if fill := node.find("fill"):
            if fill.get_atom(0) != "yes":
                fill_type = ZoneFillType.NONE
            elif (mode := fill.find("mode")) is not None and mode.get_atom(0) == "hatch":
                fill_type = ZoneFillType.HATCHED

        clearance = None
        if clearance_node := node.find("clearance"):
            clearance = clearance_node.get_float(0)
        elif connect_pads := node.find("connect_pads"):
            if clearance_node := connect_pads.find("clearance"):
                clearance = clearance_node.get_float(0)

        min_width = None
        if min_thickness := node.find("min_thickness"):
            min_width = min_thickness.get_float(0)

        return Zone(
            net=net,
            layer=layer,
            points=points,
            fill_type=fill_type,
            clearance=clearance,
            min_width=min_width,
        )

    def _net_of(self, node: SExpr) -> str:
        if net := node.find("net"):
            token = net.get(0)
            # (net "GND") names the net directly; (net 1) is a table index
            if token is not None and token.is_atom and token.quoted:
                return token.text
            return self.resolve_net(net.get_atom(0))
        return ""


def _layer_of(node: SExpr) -> str:
    if layer := node.find("layer"):
        return layer.get_atom(0) or "F.Cu"
    return "F.Cu"


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value


def import_pcb(
    text: str,
    *,
    id_source: Optional[IdSource] = None,
    strict: bool = False,
) -> Layout:
    """
    Import a board layout from ``.kicad_pcb`` text.

    Raises:
        ParseError: The text is not a well-formed S-expression
        FileFormatError: The root tag is not ``kicad_pcb``
        MissingElementError: A segment has no start/end or a via has no position
    """
    return PcbImporter(id_source=id_source, strict=strict).import_text(text)
