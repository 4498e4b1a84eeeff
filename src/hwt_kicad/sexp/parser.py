"""
S-expression tree, parser and query helpers for KiCad files.

KiCad uses a Lisp-like S-expression format for .kicad_sch, .kicad_sym and
.kicad_pcb files. A parsed document is a tree of two node kinds:

- ``Atom``: a bare symbol (``yes``, ``100``, ``F.Cu``) or a quoted string
  with its escapes resolved. Numbers stay text; typed accessors convert.
- ``SList``: an ordered list of nodes. When its first item is an atom, that
  atom is the list's *tag*.

Example KiCad S-expression:
    (kicad_sch
        (version 20231120)
        (symbol
            (lib_id "Device:R")
            (at 100 50 0)
            (property "Reference" "R1")
        )
    )

Usage:
    root = parse_sexp(text)
    root.tag                          # "kicad_sch"
    sym = root.find("symbol")
    sym.find("lib_id").get_atom(0)    # "Device:R"
    sym.find("at").get_float(1)       # 50.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..exceptions import ParseError


class SExpr:
    """
    Common query interface of parsed nodes.

    Positional accessors count from the first item after the tag, so for
    ``(at 10 20 90)`` index 0 is ``10``. Atoms answer every query with
    ``None`` or an empty result.
    """

    @property
    def is_atom(self) -> bool:
        return False

    @property
    def is_list(self) -> bool:
        return False

    @property
    def items(self) -> Tuple[SExpr, ...]:
        """All items of a list, tag included."""
        return ()

    @property
    def tag(self) -> Optional[str]:
        """The first item of a list, if it is an atom."""
        return None

    @property
    def values(self) -> Tuple[SExpr, ...]:
        """Items after the tag (all items when the list has no tag)."""
        return ()

    def find(self, tag: str) -> Optional[SList]:
        """Find the first direct child list with the given tag."""
        for item in self.items:
            if item.tag == tag:
                return item
        return None

    def find_all(self, tag: str) -> List[SList]:
        """Find all direct child lists with the given tag, in source order."""
        return [item for item in self.items if item.tag == tag]

    def find_all_recursive(self, tag: str) -> List[SList]:
        """
        Find all descendant lists with the given tag, at any depth.

        Results are in pre-order: a match comes before the matches nested
        inside it. Only use this where nesting is part of the format (pins
        inside per-unit sub-symbols); direct lookups should use find_all().
        """
        results = []
        for item in self.items:
            if item.tag == tag:
                results.append(item)
            results.extend(item.find_all_recursive(tag))
        return results

    def iter_children(self) -> Iterator[SList]:
        """Iterate over child lists (skipping atoms)."""
        for item in self.values:
            if item.is_list:
                yield item

    def get(self, index: int) -> Optional[SExpr]:
        """Get the value at index (0 = first value after the tag)."""
        values = self.values
        if 0 <= index < len(values):
            return values[index]
        return None

    def get_atom(self, index: int = 0) -> Optional[str]:
        """Get the text of the atom at index, or None if it is absent or a list."""
        node = self.get(index)
        if node is not None and node.is_atom:
            return node.text
        return None

    def get_float(self, index: int = 0) -> Optional[float]:
        """Get the value at index as a float, or None if it is not a finite number."""
        text = self.get_atom(index)
        if text is None or "_" in text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        return value

    def get_int(self, index: int = 0) -> Optional[int]:
        """Get the value at index as an integer."""
        text = self.get_atom(index)
        if text is None or "_" in text:
            return None
        try:
            return int(text)
        except ValueError:
            return None

    def atoms(self) -> List[str]:
        """Text of every atom value (tag excluded)."""
        return [item.text for item in self.values if item.is_atom]

    def has_flag(self, flag: str) -> bool:
        """Check for a bare keyword among the values, e.g. ``locked``."""
        return flag in self.atoms()

    def to_string(self) -> str:
        """Serialize back to compact single-line S-expression text."""
        return serialize_sexp(self)

    # Defined last: inside the class body this name shadows the builtin.
    def property(self, key: str) -> Optional[str]:
        """
        Look up a flat ``(key value)`` child and return the value text.

        Example:
            (kicad_sch (version 20231120) (generator "eeschema"))
            root.property("generator")  # "eeschema"
        """
        for item in self.items:
            if item.tag == key:
                value = item.get_atom(0)
                if value is not None:
                    return value
        return None


@dataclass(frozen=True)
class Atom(SExpr):
    """
    A leaf token.

    Attributes:
        text: The token text, escapes resolved for quoted strings
        quoted: True when the token was written as a quoted string
            (not part of equality)
    """

    text: str
    quoted: bool = field(default=False, compare=False)

    @property
    def is_atom(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Atom({self.text!r})"


@dataclass(frozen=True)
class SList(SExpr):
    """An ordered list of nodes."""

    list_items: Tuple[SExpr, ...] = ()

    @property
    def is_list(self) -> bool:
        return True

    @property
    def items(self) -> Tuple[SExpr, ...]:
        return self.list_items

    @property
    def tag(self) -> Optional[str]:
        if self.list_items and self.list_items[0].is_atom:
            return self.list_items[0].text
        return None

    @property
    def values(self) -> Tuple[SExpr, ...]:
        if self.tag is not None:
            return self.list_items[1:]
        return self.list_items

    def __repr__(self) -> str:
        if self.tag is not None:
            return f"SList({self.tag!r}, [{len(self.values)} values])"
        return f"SList([{len(self.list_items)} items])"


class SExpParser:
    """
    Parser for the S-expression format used by KiCad.

    A single left-to-right scan with one character of lookahead; lists,
    strings and bare atoms are recognized as they are reached.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.line = 1

    def parse(self) -> SExpr:
        """Parse the entire text and return the root node."""
        try:
            self._skip_whitespace()
            result = self._parse_expr()
        except RecursionError:
            raise ParseError("Nesting too deep", line=self.line) from None
        self._skip_whitespace()
        if self.pos < self.length:
            raise ParseError(
                f"Unexpected content after root expression: {self.text[self.pos]!r}",
                line=self.line,
                suggestions=["Check for unbalanced parentheses"],
            )
        return result

    def _peek(self) -> Optional[str]:
        if self.pos < self.length:
            return self.text[self.pos]
        return None

    def _advance(self) -> None:
        if self.text[self.pos] == "\n":
            self.line += 1
        self.pos += 1

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos].isspace():
            self._advance()

    def _parse_expr(self) -> SExpr:
        """Parse a single S-expression (atom or list)."""
        self._skip_whitespace()

        c = self._peek()
        if c == "(":
            return self._parse_list()
        elif c == '"':
            return self._parse_string()
        else:
            return self._parse_atom()

    def _parse_list(self) -> SList:
        """Parse a list: (tag value1 value2 ...)"""
        start_line = self.line
        self._advance()

        items = []
        while True:
            self._skip_whitespace()
            c = self._peek()
            if c is None:
                raise ParseError(
                    "Unexpected end of input in list",
                    line=self.line,
                    context={"list opened at line": start_line},
                    suggestions=["Check for a missing ')'"],
                )
            if c == ")":
                self._advance()
                break
            items.append(self._parse_expr())

        return SList(tuple(items))

    def _parse_string(self) -> Atom:
        """Parse a quoted string."""
        start_line = self.line
        self._advance()

        result = []
        while self.pos < self.length:
            c = self.text[self.pos]
            if c == '"':
                self._advance()
                return Atom("".join(result), quoted=True)
            elif c == "\\":
                self._advance()
                if self.pos >= self.length:
                    break
                escaped = self.text[self.pos]
                if escaped == "n":
                    result.append("\n")
                elif escaped == "t":
                    result.append("\t")
                elif escaped == "r":
                    result.append("\r")
                else:
                    result.append(escaped)
                self._advance()
            else:
                result.append(c)
                self._advance()

        raise ParseError(
            "Unterminated string",
            line=self.line,
            context={"string opened at line": start_line},
        )

    def _parse_atom(self) -> Atom:
        """Parse an unquoted atom."""
        start = self.pos

        while self.pos < self.length:
            c = self.text[self.pos]
            if c.isspace() or c in "()":
                break
            self.pos += 1

        if self.pos == start:
            if self.pos >= self.length:
                raise ParseError("Unexpected end of input", line=self.line)
            raise ParseError(
                f"Empty symbol before {self.text[self.pos]!r}",
                line=self.line,
            )

        return Atom(self.text[start : self.pos])


def _format_atom(atom: Atom) -> str:
    text = atom.text
    if atom.quoted or not text or any(c.isspace() or c in '()"\\' for c in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        escaped = escaped.replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r")
        return f'"{escaped}"'
    return text


def serialize_sexp(node: SExpr) -> str:
    """Serialize a node to single-line text that parses back to an equal tree."""
    if node.is_atom:
        return _format_atom(node)
    return "(" + " ".join(serialize_sexp(item) for item in node.items) + ")"


def parse_sexp(text: str) -> SExpr:
    """Parse S-expression text into a tree."""
    return SExpParser(text).parse()
