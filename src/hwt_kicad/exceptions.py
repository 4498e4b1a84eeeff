"""
Exception hierarchy for hwt-kicad.

Every failure surfaced by the importers shares one shape: a human-readable
message, an optional source line number, plus optional context and
suggestions that are rendered into the string form.

Example::

    from hwt_kicad.exceptions import FileFormatError

    raise FileFormatError(
        "Not a valid KiCAD schematic file",
        context={"expected": "kicad_sch", "got": "kicad_pcb"},
        suggestions=["Use import_pcb() for .kicad_pcb files"],
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class KicadError(Exception):
    """
    Base exception for all hwt-kicad errors.

    Attributes:
        message: Human-readable description of the failure
        line: 1-based source line, when the failure can be located
        context: Dictionary of contextual information (file, element, ...)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.line = line
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        if self.line is not None:
            parts = [f"KiCAD error at line {self.line}: {self.message}"]
        else:
            parts = [f"KiCAD error: {self.message}"]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ParseError(KicadError):
    """
    The text is not a well-formed S-expression.

    Raised for unbalanced parentheses, empty tokens, unterminated strings
    and input that ends inside a list.

    Example::

        raise ParseError("Unexpected end of input in list", line=42)
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        super().__init__(message, line, ctx, suggestions)


class FileFormatError(KicadError):
    """
    The document parsed but is not the declared kind.

    Raised when the root tag does not match (e.g. a PCB handed to the
    schematic importer) or a file suffix is not recognized.
    """

    pass


class FileNotFoundError(KicadError):
    """
    A design file handed to the I/O wrapper does not exist.

    Example::

        raise FileNotFoundError(
            "Schematic file not found",
            context={"file": "missing.kicad_sch"},
        )
    """

    pass


class MissingElementError(KicadError):
    """
    A required sub-expression is absent from an element that cannot be
    imported without it.

    Raised for a ``segment`` without ``start``/``end`` and a ``via``
    without ``at``. These abort the whole import.
    """

    pass


class MalformedElementError(KicadError):
    """
    A single element could not be extracted.

    The importers drop such elements and keep going; only strict imports
    let this propagate.
    """

    pass


class ConfigurationError(KicadError):
    """
    Configuration value is invalid.

    Example::

        raise ConfigurationError(
            "Unknown identifier policy",
            context={"id_policy": "sequential", "available": ["random", "deterministic"]},
        )
    """

    pass


__all__ = [
    "KicadError",
    "ParseError",
    "FileFormatError",
    "FileNotFoundError",
    "MissingElementError",
    "MalformedElementError",
    "ConfigurationError",
]
