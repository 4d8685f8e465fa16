from __future__ import annotations

import logging
import math

from ..types import ConvertOptions, Diagram, LayoutNode, LayoutResult
from ..styles import calculate_node_size, merge_layout_options
from ..routing import route_edge

# ============================================================================
# ER diagram layout engine
#
# Entities fill a grid row by row in declaration order. Each row is as tall
# as its tallest entity. Relationship edges join the facing sides of two
# boxes, fanned out by a small lateral offset so parallel edges stay apart.
# ============================================================================

log = logging.getLogger(__name__)

MAX_COLUMNS = 4
# ER grids are airier than the flowchart defaults
ER_EXTRA_HORIZONTAL_GAP = 60
ER_EXTRA_VERTICAL_GAP = 40
# Lateral offsets cycle through -1, 0, +1 times this step
EDGE_OFFSET_STEP = 15


def grid_columns(entity_count: int) -> int:
    """Columns for an entity count: grows with sqrt(n), capped to stay wide."""
    if entity_count <= 0:
        return 1
    return min(MAX_COLUMNS, math.ceil(math.sqrt(entity_count) * 1.5))


def edge_offset(index: int) -> float:
    return (index % 3 - 1) * EDGE_OFFSET_STEP


def layout_er_diagram(
    diagram: Diagram,
    options: ConvertOptions | None = None,
) -> LayoutResult:
    """Lay out entities in a grid and route relationships between them."""
    opts = merge_layout_options(options)
    if not diagram.nodes:
        return LayoutResult()

    h_gap = opts["horizontal_gap"] + ER_EXTRA_HORIZONTAL_GAP
    v_gap = opts["vertical_gap"] + ER_EXTRA_VERTICAL_GAP
    cols = grid_columns(len(diagram.nodes))

    nodes: dict[str, LayoutNode] = {}
    x = 0.0
    y = 0.0
    col = 0
    max_row_height = 0.0

    for node in diagram.nodes:
        w, h = calculate_node_size(node.label)
        nodes[node.id] = LayoutNode(id=node.id, x=x, y=y, width=w, height=h)

        max_row_height = max(max_row_height, h)
        x += w + h_gap
        col += 1

        if col >= cols:
            col = 0
            x = 0.0
            y += max_row_height + v_gap
            max_row_height = 0.0

    edges = []
    for i, edge in enumerate(diagram.edges):
        routed = route_edge(edge, nodes, edge_offset(i))
        if not routed.points:
            log.debug("relationship %s -> %s has an unknown entity", edge.source, edge.target)
        edges.append(routed)

    return LayoutResult(
        nodes=nodes,
        edges=edges,
        width=max(n.x + n.width for n in nodes.values()) + opts["horizontal_gap"],
        height=max(n.y + n.height for n in nodes.values()) + opts["vertical_gap"],
    )
