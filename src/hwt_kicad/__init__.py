"""
hwt-kicad: importers for KiCad design files.

Reads KiCad schematics, symbol libraries and PCB layouts (all stored as
S-expressions) and converts them into plain Python records.

Modules:
    sexp: S-expression tree, parser and query helpers
    models: Schematic sheet, component and layout records
    importers: Schematic, symbol-library and PCB importers
    identifiers: Fallback identifier policies
    io: File entry points
    config: TOML configuration

Quick Start::

    from hwt_kicad import import_schematic_file, import_pcb_file

    sheet = import_schematic_file("amp.kicad_sch")
    r1 = sheet.get_symbol("R1")

    layout = import_pcb_file("amp.kicad_pcb")
    print(layout.summary())
"""

__version__ = "0.1.0"

from hwt_kicad.exceptions import (
    ConfigurationError,
    FileFormatError,
    FileNotFoundError,
    KicadError,
    MalformedElementError,
    MissingElementError,
    ParseError,
)
from hwt_kicad.identifiers import DeterministicIdSource, RandomIdSource, make_id_source
from hwt_kicad.importers import import_pcb, import_schematic, import_symbol_library
from hwt_kicad.io import (
    import_file,
    import_pcb_file,
    import_schematic_file,
    import_symbol_library_file,
)
from hwt_kicad.logging import disable_verbose, enable_verbose
from hwt_kicad.models import Component, Layout, SchematicSheet
from hwt_kicad.sexp import parse_sexp

__all__ = [
    "__version__",
    # Importers
    "import_schematic",
    "import_symbol_library",
    "import_pcb",
    "import_file",
    "import_schematic_file",
    "import_symbol_library_file",
    "import_pcb_file",
    # Records
    "SchematicSheet",
    "Component",
    "Layout",
    # Identifiers
    "RandomIdSource",
    "DeterministicIdSource",
    "make_id_source",
    # Parsing
    "parse_sexp",
    # Logging
    "enable_verbose",
    "disable_verbose",
    # Exceptions
    "KicadError",
    "ParseError",
    "FileFormatError",
    "FileNotFoundError",
    "MissingElementError",
    "MalformedElementError",
    "ConfigurationError",
]
