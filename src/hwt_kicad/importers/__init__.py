"""
Importers for KiCad design documents.

Each importer parses the text, checks the root tag and maps the tree onto
the records in ``hwt_kicad.models``:

    import_schematic(text)        .kicad_sch -> SchematicSheet
    import_symbol_library(text)   .kicad_sym -> list[Component]
    import_pcb(text)              .kicad_pcb -> Layout
"""

from .common import collect_elements
from .library import SymbolLibraryImporter, import_symbol_library
from .pcb import PcbImporter, import_pcb
from .schematic import SchematicImporter, import_schematic

__all__ = [
    "import_schematic",
    "import_symbol_library",
    "import_pcb",
    "SchematicImporter",
    "SymbolLibraryImporter",
    "PcbImporter",
    "collect_elements",
]
