from __future__ import annotations

import logging

from ..types import ConvertOptions, Diagram, LayoutEdge, LayoutNode, LayoutResult, Lifeline, Point
from ..styles import calculate_node_size, merge_layout_options, SELF_LOOP

# ============================================================================
# Sequence diagram layout engine
#
# Participants sit in one row in first-appearance order. Messages are
# horizontal segments between column centers, one row per message, stacked
# top to bottom in declaration order. Lifelines hang from each participant
# to just past the last message.
# ============================================================================

log = logging.getLogger(__name__)

# Participants are at least this wide
MIN_PARTICIPANT_WIDTH = 120
# Extra horizontal room between columns on top of the configured gap
COLUMN_EXTRA_GAP = 40
# First message row sits this far below the tallest participant box
FIRST_MESSAGE_OFFSET = 60
# Lifelines run this far past the last message row
LIFELINE_TAIL = 80


def layout_sequence_diagram(
    diagram: Diagram,
    options: ConvertOptions | None = None,
) -> LayoutResult:
    """Lay out participants, messages and lifelines on a timeline."""
    opts = merge_layout_options(options)
    column_gap = opts["horizontal_gap"] + COLUMN_EXTRA_GAP
    message_gap = opts["message_gap"]

    # 1. Participants left to right
    nodes: dict[str, LayoutNode] = {}
    x = 0.0
    for node in diagram.nodes:
        w, h = calculate_node_size(node.label)
        w = max(w, MIN_PARTICIPANT_WIDTH)
        nodes[node.id] = LayoutNode(id=node.id, x=x, y=0, width=w, height=h)
        x += w + column_gap

    # 2. Messages top to bottom
    header_height = max((n.height for n in nodes.values()), default=0)
    message_y = header_height + FIRST_MESSAGE_OFFSET
    last_row_y = message_y

    edges: list[LayoutEdge] = []
    for edge in diagram.edges:
        source = nodes.get(edge.source)
        target = nodes.get(edge.target)
        if source is None or target is None:
            log.debug("message %s -> %s has an unknown participant", edge.source, edge.target)
            edges.append(LayoutEdge(source=edge.source, target=edge.target, label=edge.label))
            continue

        start_x = source.center.x
        if source.id == target.id:
            # Self-message: loop out to the right and back one step lower
            loop_x = start_x + SELF_LOOP["width"]
            loop_bottom = message_y + SELF_LOOP["height"]
            points = [
                Point(x=start_x, y=message_y),
                Point(x=loop_x, y=message_y),
                Point(x=loop_x, y=loop_bottom),
                Point(x=start_x, y=loop_bottom),
            ]
            last_row_y = loop_bottom
            message_y += message_gap + SELF_LOOP["height"]
        else:
            points = [Point(x=start_x, y=message_y), Point(x=target.center.x, y=message_y)]
            last_row_y = message_y
            message_y += message_gap

        edges.append(
            LayoutEdge(
                source=edge.source,
                target=edge.target,
                points=points,
                label=edge.label,
                line_style=edge.line_style,
            )
        )

    # 3. Lifelines
    lifeline_bottom = last_row_y + LIFELINE_TAIL
    lifelines = [
        Lifeline(node_id=n.id, x=n.center.x, top_y=n.y + n.height, bottom_y=lifeline_bottom)
        for n in nodes.values()
    ]

    return LayoutResult(
        nodes=nodes,
        edges=edges,
        lifelines=lifelines,
        # x already includes the trailing column gap
        width=x,
        height=lifeline_bottom + message_gap,
    )
