from __future__ import annotations

from .types import ErEntity, ErAttribute, ErRelationship
from .parser import parse_er_diagram, format_cardinality
from .layout import layout_er_diagram

__all__ = [
    "ErEntity",
    "ErAttribute",
    "ErRelationship",
    "parse_er_diagram",
    "format_cardinality",
    "layout_er_diagram",
]
