from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ============================================================================
# ER diagram types
#
# Intermediate records collected while parsing; the parser hands back a
# dialect-neutral Diagram built from them.
# ============================================================================

KeyType = Literal["PK", "FK", "UK"]


@dataclass(slots=True)
class ErAttribute:
    """A single attribute (column) of an ER entity."""

    # Data type (string, int, varchar, etc.)
    type: str
    # Attribute name
    name: str
    # Key constraints: PK, FK, UK
    keys: list[KeyType] = field(default_factory=list)
    # Optional comment
    comment: str | None = None


@dataclass(slots=True)
class ErEntity:
    """An entity definition in an ER diagram."""

    name: str
    # Entity attributes (columns)
    attributes: list[ErAttribute] = field(default_factory=list)


@dataclass(slots=True)
class ErRelationship:
    """A relationship between two entities."""

    entity1: str
    entity2: str
    # Raw crow's-foot symbols, e.g. "||" and "o{"
    cardinality1: str
    cardinality2: str
    # Relationship verb/label (e.g., "places"), None when omitted
    label: str | None
    # Identifying (--, solid) or non-identifying (.., dashed)
    identifying: bool = True
