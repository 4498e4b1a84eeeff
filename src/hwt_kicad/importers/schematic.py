"""
Schematic importer.

Maps a ``kicad_sch`` document onto a SchematicSheet. Each element category
is read in one pass over the root's direct children; a broken element is
dropped and logged while the rest of the sheet still imports.

Example:
    >>> sheet = import_schematic(open("amp.kicad_sch").read(), name="amp")
    >>> sheet.get_symbol("R1").value
    '10k'
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..identifiers import IdSource, RandomIdSource, parse_uuid
from ..models.geometry import Point2D
from ..models.schematic import (
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
from ..sexp import SExpr
from .common import collect_elements, element_id, parse_document, read_at, read_points, read_xy

logger = logging.getLogger(__name__)

LABEL_TAGS = {
    "label": LabelType.LOCAL,
    "global_label": LabelType.GLOBAL,
    "hierarchical_label": LabelType.HIERARCHICAL,
}

DEFAULT_LIB_ID = "unknown:unknown"


def split_lib_id(lib_id: str) -> Tuple[str, str]:
    """Split ``Library:Symbol`` on the first colon; no colon means library ``unknown``."""
    library, sep, symbol_name = lib_id.partition(":")
    if not sep:
        return "unknown", lib_id
    return library, symbol_name


def symbol_property(node: SExpr, name: str) -> Optional[str]:
    """Value of ``(property "name" "value" ...)`` on a symbol."""
    for prop in node.find_all("property"):
        if prop.get_atom(0) == name:
            return prop.get_atom(1)
    return None


def is_power_symbol(node: SExpr) -> bool:
    """True for symbols from a power library or carrying a ``power`` property."""
    lib_id = node.find("lib_id")
    if lib_id is not None and "power" in (lib_id.get_atom(0) or "").lower():
        return True
    return any(prop.get_atom(0) == "power" for prop in node.find_all("property"))


def power_style(net_name: str) -> PowerSymbolStyle:
    upper = net_name.upper()
    if "GND" in upper:
        return PowerSymbolStyle.GROUND
    if "EARTH" in upper:
        return PowerSymbolStyle.EARTH
    return PowerSymbolStyle.BAR


class SchematicImporter:
    """
    Converts one parsed schematic into a SchematicSheet.

    The importer holds the identifier source and the strict flag for the
    duration of a single import.
    """

    def __init__(self, id_source: Optional[IdSource] = None, strict: bool = False):
        self.id_source = id_source or RandomIdSource()
        self.strict = strict

    def import_text(self, text: str, name: str = "Imported") -> SchematicSheet:
        root = parse_document(text, "kicad_sch", "schematic")

        sheet = SchematicSheet(name=name, id=self._sheet_id(root))
        if version := root.find("version"):
            sheet.version = version.get_int(0)
        sheet.generator = root.property("generator")

        sheet.symbols = self._collect(root, "symbol", self._symbol)
        sheet.wires = self._collect(root, "wire", self._wire)
        for tag, label_type in LABEL_TAGS.items():
            sheet.labels.extend(
                self._collect(root, tag, lambda node, i, t=label_type: self._label(node, i, t))
            )
        sheet.junctions = self._collect(root, "junction", self._junction)
        sheet.no_connects = self._collect(root, "no_connect", self._no_connect)
        sheet.power_symbols = [
            power
            for power in self._collect(root, "symbol", self._power_symbol)
            if power is not None
        ]
        sheet.buses = self._collect(root, "bus", self._bus)

        logger.debug("Imported schematic %r: %s", name, sheet.summary())
        return sheet

    def _collect(self, root: SExpr, tag: str, extract) -> List:
        return collect_elements(root, tag, extract, strict=self.strict)

    def _sheet_id(self, root: SExpr):
        parsed = None
        if uuid_node := root.find("uuid"):
            parsed = parse_uuid(uuid_node.get_atom(0))
        return parsed or self.id_source("sheet", 0, root)

    def _symbol(self, node: SExpr, index: int) -> PlacedSymbol:
        lib_id = DEFAULT_LIB_ID
        if lib_node := node.find("lib_id"):
            lib_id = lib_node.get_atom(0) or DEFAULT_LIB_ID
        library, symbol_name = split_lib_id(lib_id)
        position, rotation = read_at(node)

        mirror = node.find("mirror")
        mirror_axis = mirror.get_atom(0) if mirror is not None else None

        unit = 1
        if unit_node := node.find("unit"):
            unit = unit_node.get_int(0) or 1

        properties = []
        for prop in node.find_all("property"):
            key, value = prop.get_atom(0), prop.get_atom(1)
            if key is not None and value is not None:
                properties.append(SymbolProperty(key, value))

        symbol_id = element_id(node, "symbol", index, self.id_source)
        pins = []
        for pin_index, pin in enumerate(node.find_all("pin")):
            number = pin.get_atom(0)
            if number is None:
                continue
            pins.append(
                SymbolPin(number, element_id(pin, f"symbol/{symbol_id}/pin", pin_index, self.id_source))
            )

        return PlacedSymbol(
            id=symbol_id,
            reference=symbol_property(node, "Reference") or "U?",
            value=symbol_property(node, "Value") or "",
            library=library,
            symbol_name=symbol_name,
            position=position,
            rotation=rotation,
            mirror_x=mirror_axis == "x",
            mirror_y=mirror_axis == "y",
            unit=unit,
            pins=pins,
            properties=properties,
        )

    def _power_symbol(self, node: SExpr, index: int) -> Optional[PowerSymbol]:
        if not is_power_symbol(node):
            return None
        position, rotation = read_at(node)
        net_name = symbol_property(node, "Value") or "VCC"
        return PowerSymbol(
            id=element_id(node, "power_symbol", index, self.id_source),
            net_name=net_name,
            position=position,
            rotation=rotation,
            style=power_style(net_name),
        )

    def _wire(self, node: SExpr, index: int) -> Wire:
        start = end = Point2D()
        if pts := node.find("pts"):
            points = read_points(pts)
            if len(points) >= 2:
                start, end = points[0], points[1]
        return Wire(id=element_id(node, "wire", index, self.id_source), start=start, end=end)

    def _label(self, node: SExpr, index: int, label_type: LabelType) -> NetLabel:
        position, rotation = read_at(node)
        return NetLabel(
            id=element_id(node, str(label_type) + "_label", index, self.id_source),
            name=node.get_atom(0) or "",
            position=position,
            label_type=label_type,
            rotation=rotation,
        )

    def _junction(self, node: SExpr, index: int) -> Junction:
        return Junction(
            id=element_id(node, "junction", index, self.id_source),
            position=read_xy(node.find("at")),
        )

    def _no_connect(self, node: SExpr, index: int) -> NoConnect:
        return NoConnect(
            id=element_id(node, "no_connect", index, self.id_source),
            position=read_xy(node.find("at")),
        )

    def _bus(self, node: SExpr, index: int) -> Bus:
        pts = node.find("pts")
        points = read_points(pts) if pts is not None else []
        segments = [BusSegment(start, end) for start, end in zip(points, points[1:])]
        return Bus(id=element_id(node, "bus", index, self.id_source), segments=segments)


def import_schematic(
    text: str,
    *,
    name: str = "Imported",
    id_source: Optional[IdSource] = None,
    strict: bool = False,
) -> SchematicSheet:
    """
    Import a schematic from ``.kicad_sch`` text.

    Args:
        text: Document text
        name: Name given to the sheet
        id_source: Identifier source for elements without a UUID
            (default: random uuid4)
        strict: Raise MalformedElementError instead of skipping broken elements

    Raises:
        ParseError: The text is not a well-formed S-expression
        FileFormatError: The root tag is not ``kicad_sch``
    """
    return SchematicImporter(id_source=id_source, strict=strict).import_text(text, name=name)
