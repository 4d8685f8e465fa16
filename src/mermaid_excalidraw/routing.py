from __future__ import annotations

from .types import Edge, LayoutEdge, LayoutNode, Point
from .styles import SELF_LOOP

# ============================================================================
# Edge routing — straight connectors between facing sides of two boxes
#
# Shared by the flowchart and ER layouts. The dominant axis between the two
# box centers picks which sides face each other; the perpendicular coordinate
# is the box center shifted by a lateral offset.
# ============================================================================


def center_to_top_left(cx: float, cy: float, width: float, height: float) -> Point:
    """Convert center-based coordinates to top-left origin."""
    return Point(x=cx - width / 2, y=cy - height / 2)


def route_edge(
    edge: Edge,
    nodes: dict[str, LayoutNode],
    offset: float = 0,
) -> LayoutEdge:
    """Route one edge between its positioned endpoints.

    Returns an edge with no points when either endpoint is unknown.
    """
    source = nodes.get(edge.source)
    target = nodes.get(edge.target)

    if source is None or target is None:
        return LayoutEdge(
            source=edge.source,
            target=edge.target,
            points=[],
            label=edge.label,
            line_style=edge.line_style,
        )

    if source.id == target.id:
        points = self_loop_points(source, offset)
    else:
        points = facing_side_points(source, target, offset)

    return LayoutEdge(
        source=edge.source,
        target=edge.target,
        points=points,
        label=edge.label,
        line_style=edge.line_style,
    )


def facing_side_points(source: LayoutNode, target: LayoutNode, offset: float = 0) -> list[Point]:
    sc = source.center
    tc = target.center
    dx = tc.x - sc.x
    dy = tc.y - sc.y

    if abs(dx) > abs(dy):
        # Horizontal: right side -> left side, or the mirror
        if dx > 0:
            start_x = source.x + source.width
            end_x = target.x
        else:
            start_x = source.x
            end_x = target.x + target.width
        return [Point(x=start_x, y=sc.y + offset), Point(x=end_x, y=tc.y + offset)]

    # Vertical: bottom -> top, or the mirror; ties go downward
    if dy >= 0:
        start_y = source.y + source.height
        end_y = target.y
    else:
        start_y = source.y
        end_y = target.y + target.height
    return [Point(x=sc.x + offset, y=start_y), Point(x=tc.x + offset, y=end_y)]


def self_loop_points(node: LayoutNode, offset: float = 0) -> list[Point]:
    """Four-point loop leaving and re-entering the right side of a box."""
    right = node.x + node.width
    cy = node.center.y + offset
    half = SELF_LOOP["height"] / 2
    outer = right + SELF_LOOP["width"]
    return [
        Point(x=right, y=cy - half),
        Point(x=outer, y=cy - half),
        Point(x=outer, y=cy + half),
        Point(x=right, y=cy + half),
    ]
