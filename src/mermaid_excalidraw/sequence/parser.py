from __future__ import annotations

import re

from .types import Participant, Message
from ..types import Diagram, Edge, Node
from ..directive import parse_directive, strip_directive
from ..style_resolver import infer_participant_style

# ============================================================================
# Sequence diagram parser
#
# Supported syntax:
#   participant A as Alice
#   actor B as Bob
#   A->>B: Solid arrow, closed head
#   A-->>B: Dashed arrow, closed head
#   A->B: Solid line, open head
#   A-->B: Dashed line, open head
#   A-xB / A--xB: Cross (closed head)
#   A-)B / A--)B: Async (open head)
#   A->>+B / A-->>-B: activation marks are accepted and ignored
#
# Notes, loops and other blocks are recognized by Mermaid but not drawn here;
# their lines are skipped.
# ============================================================================

_PARTICIPANT_RE = re.compile(r"^(participant|actor)\s+(\w+)(?:\s+as\s+(.+))?$")
_MSG_RE = re.compile(r"^(\w+)\s*(-->>|->>|-->|->|--x|-x|--\)|-\))\s*([+-]?)\s*(\w+)\s*:\s*(.*)$")


def parse_sequence_diagram(text: str) -> Diagram:
    """Parse sequenceDiagram source into a Diagram.

    Participants keep first-appearance order, whether declared or implied
    by a message.
    """
    directive = parse_directive(text)
    lines = [
        l.strip()
        for l in strip_directive(text).split("\n")
        if l.strip() and not l.strip().startswith("%%")
    ]

    participants: dict[str, Participant] = {}
    messages: list[Message] = []

    for line in lines:
        if line.lower().startswith("sequencediagram"):
            continue

        # --- participant / actor declaration ---
        participant_match = _PARTICIPANT_RE.match(line)
        if participant_match:
            participant_type = participant_match.group(1)
            id_ = participant_match.group(2)
            alias = (participant_match.group(3) or "").strip()
            if id_ not in participants:
                participants[id_] = Participant(
                    id=id_,
                    label=alias or id_,
                    type=participant_type,  # type: ignore[arg-type]
                )
            continue

        # --- message ---
        msg_match = _MSG_RE.match(line)
        if msg_match:
            messages.append(_parse_message(participants, msg_match))
            continue

    nodes = [
        Node(
            id=p.id,
            label=p.label,
            shape="ellipse" if p.type == "actor" else "rectangle",
            style_type=directive.styles.get(p.id) or infer_participant_style(p.label),
        )
        for p in participants.values()
    ]

    edges = [
        Edge(
            source=m.from_,
            target=m.to,
            label=m.label or None,
            arrow_type="arrow",
            arrow_head=m.arrow_head,
            line_style=m.line_style,
        )
        for m in messages
    ]

    return Diagram(
        type="sequence",
        # Participants run left to right, messages top to bottom
        direction="LR",
        nodes=nodes,
        edges=edges,
        directive=directive,
        source=text,
    )


def _parse_message(participants: dict[str, Participant], match: re.Match[str]) -> Message:
    from_ = match.group(1)
    arrow = match.group(2)
    to = match.group(4)
    label = match.group(5).strip()

    _ensure_participant(participants, from_)
    _ensure_participant(participants, to)

    return Message(
        from_=from_,
        to=to,
        label=label,
        line_style="dashed" if arrow.startswith("--") else "solid",
        arrow_head="closed" if (">>" in arrow or "x" in arrow) else "open",
    )


def _ensure_participant(participants: dict[str, Participant], id_: str) -> None:
    """Register an undeclared id as a plain participant at first use."""
    if id_ not in participants:
        participants[id_] = Participant(id=id_, label=id_, type="participant")
