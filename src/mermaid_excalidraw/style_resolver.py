from __future__ import annotations

import re
from typing import Mapping

from .types import NodeShape, StyleType

# ============================================================================
# Style resolution
#
# Precedence, most specific first:
#   1. explicit directive entry for the node id
#   2. node shape (cylinder, stadium, hexagon)
#   3. keyword match against the label
# ============================================================================

SEMANTIC_PATTERNS: list[tuple[re.Pattern[str], StyleType]] = [
    (re.compile(r"\b(database|db|postgres|mysql|mongo|sqlite|dynamo)\b", re.IGNORECASE), "db"),
    (re.compile(r"\b(redis|cache|memcached?)\b", re.IGNORECASE), "cache"),
    (re.compile(r"\b(queue|kafka|rabbit|sqs|pubsub)\b", re.IGNORECASE), "queue"),
    (re.compile(r"\b(api|service|backend|server)\b", re.IGNORECASE), "api"),
    (re.compile(r"\b(ui|frontend|react|vue|angular|client|app)\b", re.IGNORECASE), "ui"),
    (re.compile(r"\b(gateway|router|proxy|nginx|kong)\b", re.IGNORECASE), "gateway"),
    (re.compile(r"\b(external|third.?party|vendor)\b", re.IGNORECASE), "external"),
    (re.compile(r"\b(ai|ml|agent|llm|gpt|claude)\b", re.IGNORECASE), "agent"),
    (re.compile(r"\b(storage|s3|blob|file)\b", re.IGNORECASE), "storage"),
    (re.compile(r"\b(user|actor|client|customer)\b", re.IGNORECASE), "user"),
    (re.compile(r"\b(orchestrat\w*|workflow|step.?functions?)\b", re.IGNORECASE), "orchestrator"),
]

SHAPE_STYLES: dict[str, StyleType] = {
    "cylinder": "db",
    "stadium": "cache",
    "hexagon": "orchestrator",
}

# Sequence participants: plain substring checks, people first
PARTICIPANT_KEYWORDS: list[tuple[tuple[str, ...], StyleType]] = [
    (("user", "client", "actor"), "user"),
    (("api", "service", "backend"), "api"),
    (("db", "database"), "db"),
    (("cache", "redis"), "cache"),
    (("queue", "kafka"), "queue"),
    (("gateway", "proxy"), "gateway"),
    (("external", "third"), "external"),
]


def infer_style_from_label(label: str) -> StyleType | None:
    for pattern, style in SEMANTIC_PATTERNS:
        if pattern.search(label):
            return style
    return None


def infer_style_from_shape(shape: NodeShape | str) -> StyleType | None:
    return SHAPE_STYLES.get(shape)


def infer_participant_style(label: str) -> StyleType | None:
    """Default category for a sequence participant."""
    lower = label.lower()
    for keywords, style in PARTICIPANT_KEYWORDS:
        if any(k in lower for k in keywords):
            return style
    return None


def resolve_style(
    node_id: str,
    label: str,
    shape: NodeShape | str,
    explicit_styles: Mapping[str, StyleType],
) -> StyleType | None:
    """Resolve a node's style category, or None for the neutral palette."""
    explicit = explicit_styles.get(node_id)
    if explicit:
        return explicit

    shape_style = infer_style_from_shape(shape)
    if shape_style:
        return shape_style

    return infer_style_from_label(label)
