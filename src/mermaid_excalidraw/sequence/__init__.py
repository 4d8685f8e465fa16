from __future__ import annotations

from .types import Participant, Message
from .parser import parse_sequence_diagram
from .layout import layout_sequence_diagram

__all__ = [
    "Participant",
    "Message",
    "parse_sequence_diagram",
    "layout_sequence_diagram",
]
