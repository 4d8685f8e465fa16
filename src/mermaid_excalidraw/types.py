from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ============================================================================
# Parsed diagram — dialect-neutral structure extracted from Mermaid text
# ============================================================================

DiagramType = Literal["flowchart", "sequence", "er"]

Direction = Literal["TD", "TB", "LR", "RL", "BT"]

NodeShape = Literal[
    "rectangle",
    "cylinder",   # [(text)]
    "stadium",    # ([text])
    "hexagon",    # {{text}}
    "ellipse",    # ((text)) or (text)
    "diamond",    # {text}
]

StyleType = Literal[
    "ui",
    "api",
    "db",
    "cache",
    "queue",
    "gateway",
    "external",
    "agent",
    "storage",
    "user",
    "orchestrator",
    "problem",
    "solution",
    "highlight",
    "group",
]

# Which ends of an edge carry an arrowhead
ArrowType = Literal["arrow", "none", "both"]
# Closed (filled) heads come from sequence `->>`; everything else is open
ArrowHead = Literal["closed", "open"]
LineStyle = Literal["solid", "dashed"]


@dataclass(slots=True)
class Directive:
    """Inline `%%{excali: ...}%%` block: optional theme plus id -> style map."""

    theme: str | None = None
    styles: dict[str, StyleType] = field(default_factory=dict)


@dataclass(slots=True)
class Node:
    id: str
    label: str
    shape: NodeShape
    style_type: StyleType | None = None


@dataclass(slots=True)
class Edge:
    source: str
    target: str
    label: str | None = None
    arrow_type: ArrowType = "arrow"
    arrow_head: ArrowHead = "open"
    line_style: LineStyle | None = None


@dataclass(slots=True)
class Subgraph:
    id: str
    label: str
    node_ids: list[str] = field(default_factory=list)
    style_type: StyleType | None = None


@dataclass(slots=True)
class Diagram:
    type: DiagramType
    direction: Direction
    # Insertion order = first appearance in the source
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    subgraphs: list[Subgraph] = field(default_factory=list)
    directive: Directive = field(default_factory=Directive)
    # Raw input text, carried through for the document layer
    source: str = ""

    def node(self, node_id: str) -> Node | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None


# ============================================================================
# Layout geometry — absolute positions, derived per conversion
# ============================================================================


@dataclass(slots=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class LayoutNode:
    id: str
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)


@dataclass(slots=True)
class LayoutEdge:
    source: str
    target: str
    # Empty when either endpoint is unknown; renderers skip such edges
    points: list[Point] = field(default_factory=list)
    label: str | None = None
    line_style: LineStyle | None = None


@dataclass(slots=True)
class LayoutSubgraph:
    id: str
    x: float
    y: float
    width: float
    height: float
    label: str


@dataclass(slots=True)
class Lifeline:
    """Vertical guide below a sequence participant."""

    node_id: str
    x: float
    top_y: float
    bottom_y: float


@dataclass(slots=True)
class LayoutResult:
    nodes: dict[str, LayoutNode] = field(default_factory=dict)
    edges: list[LayoutEdge] = field(default_factory=list)
    subgraphs: list[LayoutSubgraph] = field(default_factory=list)
    lifelines: list[Lifeline] = field(default_factory=list)
    width: float = 0
    height: float = 0


# ============================================================================
# Convert options — user-facing configuration
# ============================================================================


@dataclass(slots=True)
class ConvertOptions:
    horizontal_gap: int | None = None
    vertical_gap: int | None = None
    subgraph_padding: int | None = None
    message_gap: int | None = None
    # Starting value for element seeds; also seeds the id generator
    seed: int | None = None
