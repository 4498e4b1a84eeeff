"""
Symbol-library importer.

Maps a ``kicad_symbol_lib`` document onto component templates. KiCad nests
pins inside per-unit sub-symbols (``R_0_1``, ``R_1_1``), so pins are found
at any depth below the top-level symbol.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..identifiers import IdSource, RandomIdSource
from ..models.component import Component, Pin, PinType
from ..sexp import SExpr
from .common import collect_elements, element_id, parse_document

logger = logging.getLogger(__name__)

PIN_TYPES: Dict[str, PinType] = {
    "input": PinType.INPUT,
    "output": PinType.OUTPUT,
    "bidirectional": PinType.BIDIRECTIONAL,
    "power_in": PinType.POWER_INPUT,
    "power_out": PinType.POWER_OUTPUT,
    "passive": PinType.PASSIVE,
    "no_connect": PinType.NO_CONNECT,
    "open_collector": PinType.OPEN_COLLECTOR,
    "open_emitter": PinType.OPEN_EMITTER,
    "tri_state": PinType.TRI_STATE,
}


def pin_type_from_token(token: Optional[str]) -> PinType:
    """Map a KiCad electrical type token; unknown tokens are passive."""
    return PIN_TYPES.get(token or "", PinType.PASSIVE)


def read_pin(node: SExpr, index: int = 0) -> Pin:
    """Read ``(pin type style (at ...) (name "n") (number "1"))``."""
    name = number = None
    if name_node := node.find("name"):
        name = name_node.get_atom(0)
    if number_node := node.find("number"):
        number = number_node.get_atom(0)
    return Pin(
        id=number or "1",
        name=name or "~",
        pin_type=pin_type_from_token(node.get_atom(0)),
    )


class SymbolLibraryImporter:
    """Converts a parsed symbol library into a list of components."""

    def __init__(self, id_source: Optional[IdSource] = None, strict: bool = False):
        self.id_source = id_source or RandomIdSource()
        self.strict = strict

    def import_text(self, text: str) -> List[Component]:
        root = parse_document(text, "kicad_symbol_lib", "symbol library")
        components = collect_elements(root, "symbol", self._symbol, strict=self.strict)
        logger.debug("Imported %d symbols from library", len(components))
        return components

    def _symbol(self, node: SExpr, index: int) -> Component:
        name = node.get_atom(0) or "Unknown"
        component = Component(
            component_type=name,
            reference=name,
            id=element_id(node, "component", index, self.id_source),
            symbol=name,
        )
        component.pins = collect_elements(
            node, "pin", read_pin, strict=self.strict, recursive=True
        )
        for prop in node.find_all("property"):
            key, value = prop.get_atom(0), prop.get_atom(1)
            if key is not None and value is not None:
                component.properties[key] = value

        component.value = component.properties.get("Value")
        footprint = component.properties.get("Footprint")
        component.footprint = footprint or None
        return component


def import_symbol_library(
    text: str,
    *,
    id_source: Optional[IdSource] = None,
    strict: bool = False,
) -> List[Component]:
    """
    Import component templates from ``.kicad_sym`` text.

    Raises:
        ParseError: The text is not a well-formed S-expression
        FileFormatError: The root tag is not ``kicad_symbol_lib``
    """
    return SymbolLibraryImporter(id_source=id_source, strict=strict).import_text(text)
