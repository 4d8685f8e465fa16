from __future__ import annotations

import re
from dataclasses import dataclass, field

from .types import (
    ArrowType,
    Diagram,
    Direction,
    Edge,
    LineStyle,
    Node,
    NodeShape,
    Subgraph,
)
from .directive import parse_directive, strip_directive
from .style_resolver import resolve_style

# ============================================================================
# Flowchart parser
#
# Line-oriented: every line is matched against the subgraph markers first,
# then against the edge/node statement grammar. Anything else is ignored.
# ============================================================================

_HEADER_RE = re.compile(r"^(?:flowchart|graph)\s+(TD|TB|LR|RL|BT)\b", re.IGNORECASE)
_SUBGRAPH_RE = re.compile(r"^subgraph\b\s*(.*)$")
_SUBGRAPH_BRACKET_RE = re.compile(r"^([\w-]+)\s*\[(.+)\]$")

# Statements starting with these words carry no nodes
_IGNORED_KEYWORDS = {"classdef", "class", "style", "linkstyle", "click", "direction"}

_ID = r"\w+(?:-\w+)*"

# Tried in order, first match wins: longer delimiter pairs must come before
# the single-character pairs they start with.
NODE_PATTERNS: list[tuple[re.Pattern[str], NodeShape]] = [
    # Triple delimiters
    (re.compile(rf"^({_ID})\(\(\((.+?)\)\)\)"), "ellipse"),
    # Double delimiters with mixed brackets
    (re.compile(rf"^({_ID})\[\((.+?)\)\]"), "cylinder"),
    (re.compile(rf"^({_ID})\(\[(.+?)\]\)"), "stadium"),
    (re.compile(rf"^({_ID})\{{\{{(.+?)\}}\}}"), "hexagon"),
    (re.compile(rf"^({_ID})\(\((.+?)\)\)"), "ellipse"),
    (re.compile(rf"^({_ID})\[\[(.+?)\]\]"), "rectangle"),
    # Trapezoids and the asymmetric flag have no shape of their own
    (re.compile(rf"^({_ID})\[/(.+?)\\\]"), "rectangle"),
    (re.compile(rf"^({_ID})\[\\(.+?)/\]"), "rectangle"),
    (re.compile(rf"^({_ID})>(.+?)\]"), "rectangle"),
    # Single-char delimiters
    (re.compile(rf"^({_ID})\{{(.+?)\}}"), "diamond"),
    (re.compile(rf"^({_ID})\[(.+?)\]"), "rectangle"),
    (re.compile(rf"^({_ID})\((.+?)\)"), "ellipse"),
]

BARE_NODE_REGEX = re.compile(rf"^({_ID})")
CLASS_SHORTHAND_REGEX = re.compile(r"^:::[\w][\w-]*")

# `-->`, `---`, `-.->`, `-.-`, `==>`, `===` (any length), optional `<` and `|label|`
ARROW_REGEX = re.compile(r"^(<)?(-{2,}>|-\.+->|={2,}>|-{3,}|-\.+-|={3,})(?:\s*\|([^|]*)\|)?")
# `-- label -->` form
TEXT_ARROW_REGEX = re.compile(r"^(<)?(?:--|==)\s+([^|>]+?)\s+(-{2,}>|={2,}>|-{3,}|={3,})")

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


@dataclass(slots=True)
class _NodeRef:
    id: str
    # None for a bare reference (`A`), set for an inline definition (`A[Label]`)
    label: str | None = None
    shape: NodeShape | None = None


@dataclass(slots=True)
class _Link:
    label: str | None
    arrow_type: ArrowType
    line_style: LineStyle


@dataclass(slots=True)
class _Statement:
    """One recognized line: node groups joined by links (len(links) == len(groups) - 1)."""

    groups: list[list[_NodeRef]] = field(default_factory=list)
    links: list[_Link] = field(default_factory=list)


def parse_flowchart(text: str) -> Diagram:
    """Parse flowchart/graph source into a Diagram."""
    directive = parse_directive(text)
    lines = _source_lines(strip_directive(text))

    direction = parse_direction(lines[0]) if lines else "TD"

    nodes: dict[str, Node] = {}
    edges: list[Edge] = []
    subgraphs: list[Subgraph] = []

    current: Subgraph | None = None
    depth = 0

    for line in lines[1:]:
        # --- subgraph start ---
        sg_match = _SUBGRAPH_RE.match(line)
        if sg_match:
            if depth == 0:
                current = _new_subgraph(sg_match.group(1).strip())
            depth += 1
            continue

        # --- subgraph end ---
        if line == "end":
            if depth == 0:
                continue
            depth -= 1
            if depth == 0 and current is not None:
                subgraphs.append(current)
                current = None
            continue

        statement = parse_statement(line)
        if statement is None:
            continue

        # Only direct member lines of the outermost subgraph record members
        member_of = current if depth == 1 else None

        for group in statement.groups:
            for ref in group:
                _register_node(nodes, ref)
                if member_of is not None and ref.id not in member_of.node_ids:
                    member_of.node_ids.append(ref.id)

        for i, link in enumerate(statement.links):
            for source in statement.groups[i]:
                for target in statement.groups[i + 1]:
                    edges.append(
                        Edge(
                            source=source.id,
                            target=target.id,
                            label=link.label,
                            arrow_type=link.arrow_type,
                            line_style=link.line_style,
                        )
                    )

    # An unterminated subgraph still counts
    if current is not None:
        subgraphs.append(current)

    for node in nodes.values():
        node.style_type = resolve_style(node.id, node.label, node.shape, directive.styles)

    for sg in subgraphs:
        sg.style_type = directive.styles.get(sg.id) or "group"

    return Diagram(
        type="flowchart",
        direction=direction,
        nodes=list(nodes.values()),
        edges=edges,
        subgraphs=subgraphs,
        directive=directive,
        source=text,
    )


def parse_direction(header: str) -> Direction:
    match = _HEADER_RE.match(header)
    if not match:
        return "TD"
    return match.group(1).upper()  # type: ignore[return-value]


def _source_lines(text: str) -> list[str]:
    return [
        l.strip()
        for l in re.split(r"[\n;]", text)
        if l.strip() and not l.strip().startswith("%%")
    ]


def _new_subgraph(rest: str) -> Subgraph:
    bracket_match = _SUBGRAPH_BRACKET_RE.match(rest)
    if bracket_match:
        return Subgraph(id=bracket_match.group(1), label=_clean_label(bracket_match.group(2)))
    label = _clean_label(rest)
    sg_id = re.sub(r"[^\w]", "", rest.replace(" ", "_")) or "subgraph"
    return Subgraph(id=sg_id, label=label or sg_id)


def _register_node(nodes: dict[str, Node], ref: _NodeRef) -> None:
    """Bare references create a default node; inline definitions overwrite."""
    existing = nodes.get(ref.id)

    if ref.label is None or ref.shape is None:
        if existing is None:
            nodes[ref.id] = Node(id=ref.id, label=ref.id, shape="rectangle")
        return

    if existing is None:
        nodes[ref.id] = Node(id=ref.id, label=ref.label, shape=ref.shape)
    else:
        existing.label = ref.label
        existing.shape = ref.shape


# ============================================================================
# Statement grammar: line -> _Statement | None
# ============================================================================


def parse_statement(line: str) -> _Statement | None:
    """Recognize a node definition or an edge chain; None if the line is neither."""
    first_word = line.split(None, 1)[0].lower()
    if first_word in _IGNORED_KEYWORDS or first_word in ("subgraph", "end"):
        return None

    first = _consume_node_group(line)
    if first is None:
        return None

    group, remaining = first
    statement = _Statement(groups=[group])

    while remaining:
        link_match = _consume_link(remaining)
        if link_match is None:
            return None
        link, remaining = link_match

        nxt = _consume_node_group(remaining)
        if nxt is None:
            return None
        group, remaining = nxt

        statement.links.append(link)
        statement.groups.append(group)

    return statement


def _consume_link(text: str) -> tuple[_Link, str] | None:
    m = TEXT_ARROW_REGEX.match(text)
    if m:
        has_start = bool(m.group(1))
        label = _clean_label(m.group(2))
        op = m.group(3)
    else:
        m = ARROW_REGEX.match(text)
        if not m:
            return None
        has_start = bool(m.group(1))
        label = _clean_label(m.group(3) or "")
        op = m.group(2)

    has_end = op.endswith(">")
    if has_end and has_start:
        arrow_type: ArrowType = "both"
    elif has_end:
        arrow_type = "arrow"
    else:
        arrow_type = "none"

    line_style: LineStyle = "dashed" if "." in op else "solid"

    return _Link(label=label or None, arrow_type=arrow_type, line_style=line_style), text[m.end():].strip()


def _consume_node_group(text: str) -> tuple[list[_NodeRef], str] | None:
    first = _consume_node(text)
    if first is None:
        return None

    refs = [first[0]]
    remaining = first[1]

    while remaining.startswith("&"):
        nxt = _consume_node(remaining[1:].strip())
        if nxt is None:
            return None
        refs.append(nxt[0])
        remaining = nxt[1]

    return refs, remaining


def _consume_node(text: str) -> tuple[_NodeRef, str] | None:
    ref: _NodeRef | None = None
    remaining = text

    for pattern, shape in NODE_PATTERNS:
        m = pattern.match(text)
        if m:
            ref = _NodeRef(id=m.group(1), label=_clean_label(m.group(2)), shape=shape)
            remaining = text[m.end():]
            break

    if ref is None:
        bare_match = BARE_NODE_REGEX.match(text)
        if not bare_match:
            return None
        ref = _NodeRef(id=bare_match.group(1))
        remaining = text[bare_match.end():]

    class_match = CLASS_SHORTHAND_REGEX.match(remaining)
    if class_match:
        remaining = remaining[class_match.end():]

    return ref, remaining.strip()


def _clean_label(label: str) -> str:
    label = label.strip()
    if len(label) >= 2 and label[0] == '"' and label[-1] == '"':
        label = label[1:-1]
    return _BR_RE.sub("\n", label)
