from __future__ import annotations

import logging
from collections import deque

from grandalf.graphs import Vertex, Edge, Graph

from .types import (
    ConvertOptions,
    Diagram,
    LayoutEdge,
    LayoutNode,
    LayoutResult,
    LayoutSubgraph,
    Subgraph,
)
from .styles import calculate_node_size, merge_layout_options, SUBGRAPH_LABEL_HEIGHT
from .routing import center_to_top_left, route_edge
from .sequence.layout import layout_sequence_diagram
from .er.layout import layout_er_diagram

log = logging.getLogger(__name__)


def layout_diagram(diagram: Diagram, options: ConvertOptions | None = None) -> LayoutResult:
    """Dispatch to the layout algorithm for the diagram's dialect."""
    if diagram.type == "sequence":
        return layout_sequence_diagram(diagram, options)
    if diagram.type == "er":
        return layout_er_diagram(diagram, options)
    return layout_flowchart(diagram, options)


# ============================================================================
# Flowchart rank layout
# ============================================================================


def layout_flowchart(diagram: Diagram, options: ConvertOptions | None = None) -> LayoutResult:
    """Place nodes in rows by longest-path rank from the roots.

    Rows run across the flow direction and are centered against the widest
    row. Subgraphs are drawn around their members afterwards and never move
    nodes.
    """
    opts = merge_layout_options(options)
    is_horizontal = diagram.direction in ("LR", "RL")
    is_reversed = diagram.direction in ("BT", "RL")

    if not diagram.nodes:
        return LayoutResult(
            subgraphs=[_layout_subgraph(sg, {}, opts) for sg in diagram.subgraphs],
        )

    ranks = compute_ranks(diagram)
    sizes = {node.id: calculate_node_size(node.label) for node in diagram.nodes}

    rows: dict[int, list[str]] = {}
    for node in diagram.nodes:
        rows.setdefault(ranks[node.id], []).append(node.id)
    ordered_ranks = sorted(rows)

    # Gaps follow screen axes: horizontal_gap separates along x, vertical_gap along y
    if is_horizontal:
        rank_gap, cross_gap = opts["horizontal_gap"], opts["vertical_gap"]
    else:
        rank_gap, cross_gap = opts["vertical_gap"], opts["horizontal_gap"]

    def rank_size(node_id: str) -> float:
        w, h = sizes[node_id]
        return w if is_horizontal else h

    def cross_size(node_id: str) -> float:
        w, h = sizes[node_id]
        return h if is_horizontal else w

    # Thickness of each rank along the rank axis and extent of each row across it
    thickness = {r: max(rank_size(nid) for nid in rows[r]) for r in ordered_ranks}
    extents = {
        r: sum(cross_size(nid) for nid in rows[r]) + cross_gap * (len(rows[r]) - 1)
        for r in ordered_ranks
    }
    widest = max(extents.values())

    rank_offsets: dict[int, float] = {}
    cursor = 0.0
    for r in ordered_ranks:
        rank_offsets[r] = cursor
        cursor += thickness[r] + rank_gap
    total_rank_extent = cursor - rank_gap

    nodes: dict[str, LayoutNode] = {}
    for r in ordered_ranks:
        cross = (widest - extents[r]) / 2
        for nid in rows[r]:
            w, h = sizes[nid]
            rank_center = rank_offsets[r] + thickness[r] / 2
            if is_reversed:
                rank_center = total_rank_extent - rank_center
            cross_center = cross + cross_size(nid) / 2

            if is_horizontal:
                top_left = center_to_top_left(rank_center, cross_center, w, h)
            else:
                top_left = center_to_top_left(cross_center, rank_center, w, h)

            nodes[nid] = LayoutNode(id=nid, x=top_left.x, y=top_left.y, width=w, height=h)
            cross += cross_size(nid) + cross_gap

    subgraphs = [_layout_subgraph(sg, nodes, opts) for sg in diagram.subgraphs]
    edges = _route_edges(diagram, nodes)

    right = [n.x + n.width for n in nodes.values()] + [s.x + s.width for s in subgraphs]
    bottom = [n.y + n.height for n in nodes.values()] + [s.y + s.height for s in subgraphs]

    return LayoutResult(
        nodes=nodes,
        edges=edges,
        subgraphs=subgraphs,
        width=max(right) + opts["horizontal_gap"],
        height=max(bottom) + opts["vertical_gap"],
    )


def compute_ranks(diagram: Diagram) -> dict[str, int]:
    """Rank of every node: length of the longest path from any root.

    Roots are nodes without incoming edges. Edges closing a cycle are ignored,
    and nodes no root reaches get rank 0.
    """
    vertices: dict[str, Vertex] = {node.id: Vertex(node.id) for node in diagram.nodes}

    edges_list: list[Edge] = []
    for edge in diagram.edges:
        src_v = vertices.get(edge.source)
        tgt_v = vertices.get(edge.target)
        if not src_v or not tgt_v:
            log.debug("rank pass skips edge %s -> %s: unknown endpoint", edge.source, edge.target)
            continue
        if src_v is tgt_v:
            continue
        edges_list.append(Edge(src_v, tgt_v))

    # Attaches every edge to its vertices so e_in()/e_out() work
    Graph(list(vertices.values()), edges_list)

    roots = [v for v in vertices.values() if not v.e_in()]
    back_edges = _find_back_edges(roots)

    ranks: dict[str, int] = {v.data: 0 for v in roots}
    queue = deque(roots)
    while queue:
        v = queue.popleft()
        next_rank = ranks[v.data] + 1
        for e in v.e_out():
            w = e.v[1]
            if (v.data, w.data) in back_edges:
                continue
            if ranks.get(w.data, -1) < next_rank:
                ranks[w.data] = next_rank
                queue.append(w)

    for node_id in vertices:
        ranks.setdefault(node_id, 0)
    return ranks


def _find_back_edges(roots: list[Vertex]) -> set[tuple[str, str]]:
    """Edges pointing at an ancestor on the current DFS path."""
    back: set[tuple[str, str]] = set()
    done: set[str] = set()

    for root in roots:
        if root.data in done:
            continue
        on_path = {root.data}
        stack = [(root, iter(root.e_out()))]
        while stack:
            v, children = stack[-1]
            for e in children:
                w = e.v[1]
                if w.data in on_path:
                    back.add((v.data, w.data))
                elif w.data not in done:
                    on_path.add(w.data)
                    stack.append((w, iter(w.e_out())))
                    break
            else:
                stack.pop()
                on_path.discard(v.data)
                done.add(v.data)

    return back


def _route_edges(diagram: Diagram, nodes: dict[str, LayoutNode]) -> list[LayoutEdge]:
    edges: list[LayoutEdge] = []
    for edge in diagram.edges:
        routed = route_edge(edge, nodes)
        if not routed.points:
            log.debug("edge %s -> %s has an unknown endpoint", edge.source, edge.target)
        edges.append(routed)
    return edges


def _layout_subgraph(sg: Subgraph, nodes: dict[str, LayoutNode], opts: dict) -> LayoutSubgraph:
    members = [nodes[nid] for nid in sg.node_ids if nid in nodes]

    if not members:
        return LayoutSubgraph(id=sg.id, x=0, y=0, width=0, height=0, label=sg.label)

    pad = opts["subgraph_padding"]
    min_x = min(n.x for n in members)
    min_y = min(n.y for n in members)
    max_x = max(n.x + n.width for n in members)
    max_y = max(n.y + n.height for n in members)

    return LayoutSubgraph(
        id=sg.id,
        x=min_x - pad,
        y=min_y - pad - SUBGRAPH_LABEL_HEIGHT,
        width=max_x - min_x + pad * 2,
        height=max_y - min_y + pad * 2 + SUBGRAPH_LABEL_HEIGHT,
        label=sg.label,
    )
