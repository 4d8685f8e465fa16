from __future__ import annotations

import re

from .types import ErAttribute, ErEntity, ErRelationship, KeyType
from ..types import Diagram, Edge, Node
from ..directive import parse_directive, strip_directive

# ============================================================================
# ER diagram parser
#
# Supported syntax:
#   CUSTOMER ||--o{ ORDER : places
#   CUSTOMER |o..o{ ADDRESS : "ships to"
#   CUSTOMER {
#     string name PK
#     int age
#     string email UK "user email"
#   }
#
# Cardinality notation (left side / right side):
#   ||          exactly one           -> "1"
#   |o  o|  oo  zero or one           -> "0..1"
#   }|  |{  }{  one or more           -> "n"
#   }o  o{      zero or more          -> "0..n"
#
# Line style:
#   --  identifying (solid line)
#   ..  non-identifying (dashed line)
# ============================================================================

_ENTITY = r"[\w-]+"
_LEFT_CARD = r"\|[|o]|o[|o]|\}[|o]|\|\{|\}\{|o\{"
_RIGHT_CARD = r"\|[|o]|o[|o]|\}[|o]|\|\}|\{\||\{o|\|\{|o\{"

_ENTITY_BLOCK_RE = re.compile(rf"^({_ENTITY})\s*\{{$")
_RELATIONSHIP_RE = re.compile(
    rf"^({_ENTITY})\s*({_LEFT_CARD})(--|\.\.)({_RIGHT_CARD})\s*({_ENTITY})(?:\s*:\s*(.+))?$"
)
# Looser shape tried after the detailed pattern: ENTITY <token> ENTITY [: label]
_SIMPLE_RELATIONSHIP_RE = re.compile(rf"^({_ENTITY})\s+\S+\s+({_ENTITY})(?:\s*:\s*(.+))?$")
_ATTRIBUTE_RE = re.compile(r"^(\S+)\s+(\S+)(?:\s+(.+))?$")

CARDINALITY_LABELS: dict[str, str] = {
    "||": "1",
    "|o": "0..1",
    "o|": "0..1",
    "oo": "0..1",
    "}|": "n",
    "|{": "n",
    "}{": "n",
    "|}": "n",
    "{|": "n",
    "}o": "0..n",
    "o{": "0..n",
    "{o": "0..n",
}


def parse_er_diagram(text: str) -> Diagram:
    """Parse erDiagram source into a Diagram.

    Each entity becomes one rectangle node whose label lists its attributes.
    """
    directive = parse_directive(text)
    lines = [
        l.strip()
        for l in strip_directive(text).split("\n")
        if l.strip() and not l.strip().startswith("%%")
    ]

    entity_map: dict[str, ErEntity] = {}
    relationships: list[ErRelationship] = []
    current_entity: ErEntity | None = None

    for line in lines:
        if line.lower().startswith("erdiagram"):
            continue

        # --- Inside entity body ---
        if current_entity is not None:
            if line == "}":
                current_entity = None
                continue

            attr = _parse_attribute(line)
            if attr is not None:
                current_entity.attributes.append(attr)
            continue

        # --- Entity block start: `ENTITY_NAME {` ---
        block_match = _ENTITY_BLOCK_RE.match(line)
        if block_match:
            current_entity = _ensure_entity(entity_map, block_match.group(1))
            continue

        # --- Relationship ---
        rel = parse_relationship_line(line)
        if rel is not None:
            _ensure_entity(entity_map, rel.entity1)
            _ensure_entity(entity_map, rel.entity2)
            relationships.append(rel)

    nodes = [
        Node(
            id=entity.name,
            label=format_entity_label(entity),
            shape="rectangle",
            style_type=directive.styles.get(entity.name) or "db",
        )
        for entity in entity_map.values()
    ]

    edges = [
        Edge(
            source=rel.entity1,
            target=rel.entity2,
            label=rel.label or format_cardinality(rel.cardinality1, rel.cardinality2),
            arrow_type="arrow",
            line_style="solid" if rel.identifying else "dashed",
        )
        for rel in relationships
    ]

    return Diagram(
        type="er",
        direction="LR",
        nodes=nodes,
        edges=edges,
        directive=directive,
        source=text,
    )


def _ensure_entity(entity_map: dict[str, ErEntity], name: str) -> ErEntity:
    entity = entity_map.get(name)
    if entity is None:
        entity = ErEntity(name=name)
        entity_map[name] = entity
    return entity


def _parse_attribute(line: str) -> ErAttribute | None:
    """Parse an attribute line inside an entity block.

    Format: type name [PK|FK|UK [...]] ["comment"]
    """
    match = _ATTRIBUTE_RE.match(line)
    if not match:
        return None

    rest = (match.group(3) or "").strip()

    comment: str | None = None
    comment_match = re.search(r'"([^"]*)"', rest)
    if comment_match:
        comment = comment_match.group(1)

    keys: list[KeyType] = []
    for part in re.sub(r'"[^"]*"', "", rest).replace(",", " ").split():
        upper = part.upper()
        if upper in ("PK", "FK", "UK") and upper not in keys:
            keys.append(upper)  # type: ignore[arg-type]

    return ErAttribute(type=match.group(1), name=match.group(2), keys=keys, comment=comment)


def parse_relationship_line(line: str) -> ErRelationship | None:
    """Parse a relationship line.

    The detailed cardinality pattern is tried before the generic fallback;
    lines that match both are read with the detailed pattern.
    """
    match = _RELATIONSHIP_RE.match(line)
    if match:
        return ErRelationship(
            entity1=match.group(1),
            entity2=match.group(5),
            cardinality1=match.group(2),
            cardinality2=match.group(4),
            label=_clean_label(match.group(6)),
            identifying=match.group(3) == "--",
        )

    match = _SIMPLE_RELATIONSHIP_RE.match(line)
    if match:
        return ErRelationship(
            entity1=match.group(1),
            entity2=match.group(2),
            cardinality1="||",
            cardinality2="o{",
            label=_clean_label(match.group(3)),
        )

    return None


def format_entity_label(entity: ErEntity) -> str:
    """Entity name followed by one `- name: type [KEYS]` line per attribute."""
    if not entity.attributes:
        return entity.name

    rows = []
    for attr in entity.attributes:
        keys = f" [{','.join(attr.keys)}]" if attr.keys else ""
        rows.append(f"- {attr.name}: {attr.type}{keys}")

    return "\n".join([entity.name, *rows])


def format_cardinality(card1: str, card2: str) -> str:
    left = CARDINALITY_LABELS.get(card1, card1)
    right = CARDINALITY_LABELS.get(card2, card2)
    return f"{left}:{right}"


def _clean_label(label: str | None) -> str | None:
    if label is None:
        return None
    label = label.strip()
    if len(label) >= 2 and label[0] == '"' and label[-1] == '"':
        label = label[1:-1]
    return label or None
