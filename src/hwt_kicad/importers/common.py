"""
Helpers shared by the schematic, library and PCB importers.

Element extraction follows one of two policies:

- best effort: ``collect_elements`` maps every matching child and drops the
  ones whose extraction raises, logging each drop at WARNING;
- required: a plain call, so the error aborts the import.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, List, Optional, Tuple, TypeVar

from ..exceptions import FileFormatError, MalformedElementError
from ..identifiers import IdSource, parse_uuid
from ..models.geometry import Point2D, Position
from ..sexp import SExpr, parse_sexp

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors that mean "this one element is broken", as opposed to a broken document.
ELEMENT_ERRORS = (
    MalformedElementError,
    ValueError,
    TypeError,
    IndexError,
    AttributeError,
    KeyError,
)

ROOT_HINTS = {
    "kicad_sch": "import_schematic()",
    "kicad_symbol_lib": "import_symbol_library()",
    "kicad_pcb": "import_pcb()",
}


def parse_document(text: str, root_tag: str, kind: str) -> SExpr:
    """
    Parse text and check the root tag.

    Raises:
        ParseError: The text is not a well-formed S-expression
        FileFormatError: The root tag is not ``root_tag``
    """
    root = parse_sexp(text)
    if root.tag != root_tag:
        suggestions = []
        if root.tag in ROOT_HINTS:
            suggestions.append(f"This looks like a {root.tag} document; use {ROOT_HINTS[root.tag]}")
        raise FileFormatError(
            f"Not a valid KiCAD {kind} file",
            context={"expected": root_tag, "got": root.tag},
            suggestions=suggestions,
        )
    return root


def collect_elements(
    parent: SExpr,
    tag: str,
    extract: Callable[[SExpr, int], T],
    *,
    strict: bool = False,
    recursive: bool = False,
) -> List[T]:
    """
    Map every child with ``tag`` through ``extract``, skipping failures.

    ``extract`` receives the child node and its index among the matches.
    A child whose extraction raises one of ``ELEMENT_ERRORS`` is dropped and
    logged; with ``strict`` the failure is re-raised as MalformedElementError.
    Any other exception propagates unchanged.
    """
    nodes = parent.find_all_recursive(tag) if recursive else parent.find_all(tag)
    results = []
    for index, node in enumerate(nodes):
        try:
            results.append(extract(node, index))
        except ELEMENT_ERRORS as e:
            if strict:
                if isinstance(e, MalformedElementError):
                    raise
                raise MalformedElementError(
                    f"Could not import {tag}: {e}",
                    context={"element": tag, "index": index},
                ) from e
            logger.warning("Skipping malformed %s #%d: %s", tag, index, e)
    return results


def element_id(node: SExpr, kind: str, index: int, id_source: IdSource) -> uuid.UUID:
    """The element's ``(uuid ...)`` if well-formed, else one from ``id_source``."""
    parsed = None
    if uuid_node := node.find("uuid"):
        parsed = parse_uuid(uuid_node.get_atom(0))
    if parsed is None:
        return id_source(kind, index, node)
    return parsed


def read_xy(node: Optional[SExpr]) -> Point2D:
    """Point from ``(tag x y ...)``; missing coordinates read as 0."""
    if node is None:
        return Point2D()
    return Point2D(node.get_float(0) or 0.0, node.get_float(1) or 0.0)


def read_at(node: SExpr) -> Tuple[Point2D, float]:
    """Position and rotation from the ``(at x y [angle])`` child."""
    at = node.find("at")
    if at is None:
        return Point2D(), 0.0
    return read_xy(at), at.get_float(2) or 0.0


def read_position(node: Optional[SExpr]) -> Position:
    """Board position (mm) from ``(tag x y ...)``."""
    point = read_xy(node)
    return Position(point.x, point.y)


def read_points(node: SExpr) -> List[Point2D]:
    """Every ``(xy x y)`` entry of a ``pts`` list, in order."""
    return [read_xy(xy) for xy in node.find_all("xy")]
