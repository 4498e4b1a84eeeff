"""
Identifier policy for imported elements.

KiCad documents carry a UUID on most elements, but older files and some
element kinds omit it. The importers keep every well-formed UUID they find
and ask an identifier source for the rest.

Two sources are provided:

- ``RandomIdSource`` (default): a fresh uuid4 per request. Repeated imports
  of a file without explicit identifiers differ in those identifiers.
- ``DeterministicIdSource``: a uuid5 derived from the element kind, its
  index within its collection and its serialized source text. Repeated
  imports of the same text compare equal.

Example:
    from hwt_kicad import import_schematic
    from hwt_kicad.identifiers import DeterministicIdSource

    a = import_schematic(text, id_source=DeterministicIdSource())
    b = import_schematic(text, id_source=DeterministicIdSource())
    assert a == b
"""

from __future__ import annotations

import uuid
from typing import Optional, Protocol

from .exceptions import ConfigurationError
from .sexp import SExpr, serialize_sexp

ID_POLICIES = ("random", "deterministic")

# Namespace for derived identifiers. Changing it changes every derived id.
HWT_KICAD_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://hwt.dev/kicad-import")


class IdSource(Protocol):
    """Supplies identifiers for elements that have none."""

    def __call__(self, kind: str, index: int, node: Optional[SExpr]) -> uuid.UUID: ...


class RandomIdSource:
    """Random (uuid4) identifiers."""

    def __call__(self, kind: str, index: int, node: Optional[SExpr]) -> uuid.UUID:
        return uuid.uuid4()

    def __repr__(self) -> str:
        return "RandomIdSource()"


class DeterministicIdSource:
    """
    Name-based (uuid5) identifiers.

    The name hashed is ``kind/index/text`` where text is the element's
    serialized S-expression. Two elements with identical text in the same
    collection still differ by index.
    """

    def __init__(self, namespace: uuid.UUID = HWT_KICAD_NAMESPACE):
        self.namespace = namespace

    def __call__(self, kind: str, index: int, node: Optional[SExpr]) -> uuid.UUID:
        text = serialize_sexp(node) if node is not None else ""
        return uuid.uuid5(self.namespace, f"{kind}/{index}/{text}")

    def __repr__(self) -> str:
        return f"DeterministicIdSource(namespace={self.namespace})"


def parse_uuid(text: Optional[str]) -> Optional[uuid.UUID]:
    """
    Parse a canonical 36-character UUID literal.

    Returns None for anything else, including the 32-digit hex form that
    ``uuid.UUID`` would otherwise accept.
    """
    if text is None or len(text) != 36:
        return None
    try:
        return uuid.UUID(text)
    except ValueError:
        return None


def make_id_source(policy: str = "random") -> IdSource:
    """Build an identifier source from a policy name."""
    if policy == "random":
        return RandomIdSource()
    if policy == "deterministic":
        return DeterministicIdSource()
    raise ConfigurationError(
        f"Unknown identifier policy: {policy}",
        context={"id_policy": policy, "available": list(ID_POLICIES)},
    )
