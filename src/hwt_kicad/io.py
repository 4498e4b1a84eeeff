"""
File entry points.

Reads a design file as UTF-8 and hands the text to the matching importer.
Parsing and mapping never touch the filesystem themselves.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import FileFormatError, FileNotFoundError, ParseError
from .identifiers import IdSource
from .importers import import_pcb, import_schematic, import_symbol_library
from .models.component import Component
from .models.layout import Layout
from .models.schematic import SchematicSheet

logger = logging.getLogger(__name__)

SCHEMATIC_SUFFIX = ".kicad_sch"
SYMBOL_LIBRARY_SUFFIX = ".kicad_sym"
PCB_SUFFIX = ".kicad_pcb"

PathLike = Union[str, Path]


def read_design_file(path: PathLike, kind: str = "Design") -> str:
    """
    Read a design file as text.

    Raises:
        FileNotFoundError: The path does not exist or is not a file
        ParseError: The file is not valid UTF-8
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(
            f"{kind} file not found",
            context={"file": str(path)},
            suggestions=["Check the file path"],
        )
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"File is not valid UTF-8: {e.reason}", file_path=path) from e


def import_schematic_file(
    path: PathLike,
    *,
    name: Optional[str] = None,
    id_source: Optional[IdSource] = None,
    strict: bool = False,
) -> SchematicSheet:
    """Import a ``.kicad_sch`` file. The sheet is named after the file stem unless ``name`` is given."""
    path = Path(path)
    text = read_design_file(path, "Schematic")
    logger.debug("Importing schematic %s", path)
    return import_schematic(text, name=name or path.stem, id_source=id_source, strict=strict)


def import_symbol_library_file(
    path: PathLike,
    *,
    id_source: Optional[IdSource] = None,
    strict: bool = False,
) -> List[Component]:
    """Import a ``.kicad_sym`` file."""
    text = read_design_file(path, "Symbol library")
    logger.debug("Importing symbol library %s", path)
    return import_symbol_library(text, id_source=id_source, strict=strict)


def import_pcb_file(
    path: PathLike,
    *,
    id_source: Optional[IdSource] = None,
    strict: bool = False,
) -> Layout:
    """Import a ``.kicad_pcb`` file."""
    text = read_design_file(path, "PCB")
    logger.debug("Importing PCB %s", path)
    return import_pcb(text, id_source=id_source, strict=strict)


def import_file(
    path: PathLike,
    *,
    id_source: Optional[IdSource] = None,
    strict: bool = False,
) -> Union[SchematicSheet, List[Component], Layout]:
    """
    Import any supported design file, chosen by suffix.

    Raises:
        FileFormatError: The suffix is not .kicad_sch, .kicad_sym or .kicad_pcb
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == SCHEMATIC_SUFFIX:
        return import_schematic_file(path, id_source=id_source, strict=strict)
    if suffix == SYMBOL_LIBRARY_SUFFIX:
        return import_symbol_library_file(path, id_source=id_source, strict=strict)
    if suffix == PCB_SUFFIX:
        return import_pcb_file(path, id_source=id_source, strict=strict)
    raise FileFormatError(
        f"Unsupported file type: {path.suffix or '(none)'}",
        context={"file": str(path)},
        suggestions=[f"Expected one of {SCHEMATIC_SUFFIX}, {SYMBOL_LIBRARY_SUFFIX}, {PCB_SUFFIX}"],
    )
