from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..types import ArrowHead, LineStyle

# ============================================================================
# Sequence diagram types
#
# Intermediate records collected while parsing; the parser hands back a
# dialect-neutral Diagram built from them.
# ============================================================================

ParticipantType = Literal["participant", "actor"]


@dataclass(slots=True)
class Participant:
    id: str
    label: str
    # 'participant' renders as a box, 'actor' as an ellipse
    type: ParticipantType


@dataclass(slots=True)
class Message:
    from_: str
    to: str
    label: str
    # Arrow style: solid line or dashed line
    line_style: LineStyle
    # Arrow head: closed (filled) or open
    arrow_head: ArrowHead
