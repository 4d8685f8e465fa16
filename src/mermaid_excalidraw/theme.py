from __future__ import annotations

from dataclasses import dataclass

from .types import StyleType

# ============================================================================
# Types
# ============================================================================


@dataclass(frozen=True, slots=True)
class StyleColors:
    """Fill and stroke for one semantic style category."""

    background_color: str
    stroke_color: str


# ============================================================================
# Palette — one entry per style category
# ============================================================================

COLOR_PALETTE: dict[StyleType, StyleColors] = {
    "ui": StyleColors("#a5d8ff", "#1971c2"),
    "api": StyleColors("#d0bfff", "#7048e8"),
    "db": StyleColors("#b2f2bb", "#2f9e44"),
    "cache": StyleColors("#ffe8cc", "#fd7e14"),
    "queue": StyleColors("#fff3bf", "#fab005"),
    "gateway": StyleColors("#dee2e6", "#495057"),
    "external": StyleColors("#ffc9c9", "#e03131"),
    "agent": StyleColors("#e599f7", "#9c36b5"),
    "storage": StyleColors("#ffec99", "#f08c00"),
    "user": StyleColors("#e7f5ff", "#1971c2"),
    "orchestrator": StyleColors("#ffa8a8", "#c92a2a"),
    "problem": StyleColors("#ffc9c9", "#c92a2a"),
    "solution": StyleColors("#b2f2bb", "#087f5b"),
    "highlight": StyleColors("#e5dbff", "#5f3dc4"),
    "group": StyleColors("transparent", "#868e96"),
}

# Nodes without a resolved category
DEFAULT_STYLE = StyleColors("#e9ecef", "#495057")

STYLE_TYPES: frozenset[str] = frozenset(COLOR_PALETTE)

# What each category is meant for, shown by list_styles()
STYLE_DESCRIPTIONS: dict[StyleType, str] = {
    "ui": "Frontend components",
    "api": "Backend services",
    "db": "Databases",
    "cache": "Caches, Redis",
    "queue": "Message queues",
    "gateway": "Gateways, routers",
    "external": "External APIs",
    "agent": "AI/ML services",
    "storage": "File storage",
    "user": "Users, actors",
    "orchestrator": "Orchestration hubs",
    "problem": "Issues, deprecated",
    "solution": "Recommended paths",
    "highlight": "Key entities",
    "group": "Subgraph boundaries",
}

# ============================================================================
# Neutral colors for decorations
# ============================================================================

TEXT_COLOR = "#1e1e1e"
SUBGRAPH_LABEL_COLOR = "#495057"
DECORATION_COLOR = "#868e96"


def get_style_colors(style_type: StyleType | None) -> StyleColors:
    if not style_type:
        return DEFAULT_STYLE
    return COLOR_PALETTE.get(style_type, DEFAULT_STYLE)


def list_styles() -> list[tuple[str, str, str, str]]:
    """Rows of (category, background, stroke, use) for every style category."""
    return [
        (name, colors.background_color, colors.stroke_color, STYLE_DESCRIPTIONS[name])
        for name, colors in COLOR_PALETTE.items()
    ]
