"""
S-expression parsing for KiCad files.

Usage:
    from hwt_kicad.sexp import parse_sexp

    root = parse_sexp(text)
    root.tag                      # "kicad_pcb"
    for seg in root.find_all("segment"):
        seg.find("width").get_float(0)
"""

from .parser import Atom, SExpParser, SExpr, SList, parse_sexp, serialize_sexp

__all__ = [
    "SExpr",
    "Atom",
    "SList",
    "SExpParser",
    "parse_sexp",
    "serialize_sexp",
]
