from __future__ import annotations

import logging
from dataclasses import replace

from .types import ConvertOptions, Diagram, Edge, LayoutEdge, LayoutNode, LayoutResult, Node, Point
from .theme import DECORATION_COLOR, SUBGRAPH_LABEL_COLOR, TEXT_COLOR, get_style_colors
from .styles import (
    FONT_SIZES,
    NODE_SIZE,
    STROKE_WIDTHS,
    estimate_text_height,
    estimate_text_width,
)
from .scene import (
    ROUND_ADAPTIVE,
    Binding,
    BoundElement,
    Element,
    ElementFactory,
    Scene,
    TextElementInfo,
)

# ============================================================================
# Scene renderer — converts a diagram plus its layout into draw primitives.
#
# Emission order is the z-order:
#   1. subgraph boxes and their labels
#   2. each node's shape, label and (ER) separator line
#   3. sequence lifelines
#   4. arrows and their labels
# A final pass records on every shape the arrows bound to it.
# ============================================================================

log = logging.getLogger(__name__)

# Subgraph label inset from the box's top-left corner
SUBGRAPH_LABEL_INSET = (10, 5)
# ER separator line: horizontal inset and distance below the first text row
SEPARATOR_INSET = 8
SEPARATOR_GAP = 2
# Edge labels sit this far above the connector midpoint
EDGE_LABEL_RISE = 10


def render_scene(
    diagram: Diagram,
    layout: LayoutResult,
    options: ConvertOptions | None = None,
) -> Scene:
    """Render a laid-out diagram as an ordered scene graph."""
    factory = ElementFactory(options.seed if options else None)
    scene = Scene(width=layout.width, height=layout.height, theme=diagram.directive.theme)

    # 1. Subgraph backgrounds
    for sg in diagram.subgraphs:
        box = next((s for s in layout.subgraphs if s.id == sg.id), None)
        if box is None or (box.width == 0 and box.height == 0):
            continue

        colors = get_style_colors(sg.style_type)
        scene.elements.append(
            factory.rectangle(
                box.x,
                box.y,
                box.width,
                box.height,
                stroke_color=colors.stroke_color,
                background_color="transparent",
                stroke_style="dashed",
                stroke_width=STROKE_WIDTHS["subgraph"],
            )
        )
        _add_text(
            scene,
            factory.text(
                box.x + SUBGRAPH_LABEL_INSET[0],
                box.y + SUBGRAPH_LABEL_INSET[1],
                box.label,
                font_size=FONT_SIZES["group_header"],
                text_align="left",
                vertical_align="top",
                color=SUBGRAPH_LABEL_COLOR,
            ),
        )

    # 2. Nodes
    shape_ids: dict[str, str] = {}
    for node in diagram.nodes:
        placed = layout.nodes.get(node.id)
        if placed is None:
            continue

        shape = _render_node_shape(factory, node, placed)
        shape_ids[node.id] = shape.id
        scene.elements.append(shape)
        _add_text(scene, _render_node_label(factory, node, placed))

        if diagram.type == "er" and "\n" in node.label:
            scene.elements.append(_render_separator(factory, node, placed))

    # 3. Lifelines
    for lifeline in layout.lifelines:
        scene.elements.append(
            factory.line(
                [Point(x=lifeline.x, y=lifeline.top_y), Point(x=lifeline.x, y=lifeline.bottom_y)],
                color=DECORATION_COLOR,
                stroke_style="dashed",
            )
        )

    # 4. Arrows
    # Layout edges are emitted one per diagram edge, in the same order
    arrows: list[Element] = []
    for edge, routed in zip(diagram.edges, layout.edges):
        if len(routed.points) < 2:
            log.debug("no arrow for %s -> %s: edge was not routed", edge.source, edge.target)
            continue
        source_id = shape_ids.get(edge.source)
        target_id = shape_ids.get(edge.target)
        if source_id is None or target_id is None:
            log.debug("no arrow for %s -> %s: endpoint has no shape", edge.source, edge.target)
            continue

        arrow = _render_arrow(factory, edge, routed, source_id, target_id)
        arrows.append(arrow)
        scene.elements.append(arrow)

        if routed.label:
            _add_text(scene, _render_edge_label(factory, routed))

    scene.elements = _attach_bound_arrows(scene.elements, arrows)
    return scene


# ============================================================================
# Nodes
# ============================================================================


def _render_node_shape(factory: ElementFactory, node: Node, placed: LayoutNode) -> Element:
    colors = get_style_colors(node.style_type)
    attrs = {
        "stroke_color": colors.stroke_color,
        "background_color": colors.background_color,
    }

    # Cylinders have no native primitive; the ellipse is the closest fit
    if node.shape in ("ellipse", "cylinder"):
        return factory.ellipse(placed.x, placed.y, placed.width, placed.height, **attrs)
    if node.shape == "stadium":
        return factory.rectangle(
            placed.x, placed.y, placed.width, placed.height, roundness=ROUND_ADAPTIVE, **attrs
        )
    return factory.rectangle(placed.x, placed.y, placed.width, placed.height, **attrs)


def _render_node_label(factory: ElementFactory, node: Node, placed: LayoutNode) -> Element:
    """Label centered in the node box; multi-line labels are left-aligned."""
    font_size = FONT_SIZES["node_label"]
    text_width = estimate_text_width(node.label, font_size)
    text_height = estimate_text_height(node.label, font_size)

    return factory.text(
        placed.x + (placed.width - text_width) / 2,
        placed.y + (placed.height - text_height) / 2,
        node.label,
        font_size=font_size,
        text_align="left" if "\n" in node.label else "center",
        vertical_align="top",
        color=TEXT_COLOR,
    )


def _render_separator(factory: ElementFactory, node: Node, placed: LayoutNode) -> Element:
    """Rule between an entity's name and its attribute rows."""
    row = NODE_SIZE["row_height"]
    rows = len(node.label.split("\n"))
    y = placed.y + (placed.height - rows * row) / 2 + row + SEPARATOR_GAP

    return factory.line(
        [
            Point(x=placed.x + SEPARATOR_INSET, y=y),
            Point(x=placed.x + placed.width - SEPARATOR_INSET, y=y),
        ],
        color=DECORATION_COLOR,
    )


# ============================================================================
# Edges
# ============================================================================


def _render_arrow(
    factory: ElementFactory,
    edge: Edge,
    routed: LayoutEdge,
    source_id: str,
    target_id: str,
) -> Element:
    head = "triangle" if edge.arrow_head == "closed" else "arrow"

    if edge.arrow_type == "none":
        start_head, end_head = None, None
    elif edge.arrow_type == "both":
        start_head, end_head = head, head
    else:
        start_head, end_head = None, head

    return factory.arrow(
        routed.points,
        start_binding=Binding(element_id=source_id),
        end_binding=Binding(element_id=target_id),
        start_arrowhead=start_head,
        end_arrowhead=end_head,
        stroke_style=routed.line_style or edge.line_style or "solid",
    )


def _render_edge_label(factory: ElementFactory, routed: LayoutEdge) -> Element:
    """Small label centered on the midpoint between the first and last waypoint."""
    first = routed.points[0]
    last = routed.points[-1]
    mid_x = (first.x + last.x) / 2
    mid_y = (first.y + last.y) / 2

    font_size = FONT_SIZES["edge_label"]
    label = routed.label or ""
    return factory.text(
        mid_x - estimate_text_width(label, font_size) / 2,
        mid_y - EDGE_LABEL_RISE,
        label,
        font_size=font_size,
    )


def _add_text(scene: Scene, element: Element) -> None:
    scene.elements.append(element)
    scene.texts.append(TextElementInfo(id=element.id, text=element.text or ""))


def _attach_bound_arrows(elements: list[Element], arrows: list[Element]) -> list[Element]:
    """Give every shape the back-references of the arrows bound to it."""
    bound: dict[str, list[BoundElement]] = {}
    for arrow in arrows:
        ends = {arrow.start_binding.element_id, arrow.end_binding.element_id}
        for element_id in ends:
            bound.setdefault(element_id, []).append(BoundElement(id=arrow.id, type="arrow"))

    return [
        replace(el, bound_elements=tuple(bound[el.id])) if el.is_shape and el.id in bound else el
        for el in elements
    ]
