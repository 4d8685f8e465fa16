from __future__ import annotations

from .types import ConvertOptions

# ============================================================================
# Font metrics — character-count estimates for the hand-drawn font.
#
# Text is never measured; widths come from a fixed average glyph width so
# centering is approximate.
# ============================================================================

CHAR_WIDTH_RATIO = 0.55
LINE_HEIGHT = 1.25


def estimate_text_width(text: str, font_size: float) -> float:
    """Width of the longest line in px."""
    lines = text.split("\n")
    return max(len(line) for line in lines) * font_size * CHAR_WIDTH_RATIO


def estimate_text_height(text: str, font_size: float, line_height: float = LINE_HEIGHT) -> float:
    return len(text.split("\n")) * font_size * line_height


# Fixed font sizes (px)
FONT_SIZES = {
    "node_label": 16,
    "edge_label": 12,
    "group_header": 14,
}

# ============================================================================
# Node sizing
# ============================================================================

NODE_SIZE = {
    "min_width": 160,
    "min_height": 60,
    # Sizing uses its own, wider, per-character estimate
    "char_width": 9,
    "row_height": 20,
    "padding": 20,
}


def calculate_node_size(label: str) -> tuple[float, float]:
    """Box size for a (possibly multi-line) label."""
    lines = label.split("\n")
    longest = max(len(line) for line in lines)
    width = max(NODE_SIZE["min_width"], longest * NODE_SIZE["char_width"] + NODE_SIZE["padding"])
    height = max(NODE_SIZE["min_height"], len(lines) * NODE_SIZE["row_height"] + NODE_SIZE["padding"])
    return width, height


# ============================================================================
# Spacing & stroke constants
# ============================================================================

# Height reserved above subgraph members for the subgraph label
SUBGRAPH_LABEL_HEIGHT = 30

STROKE_WIDTHS = {
    "shape": 1,
    "subgraph": 2,
    "decoration": 1,
}

# Arrow bindings: distance from the shape outline and focus (0 = aimed at center)
BINDING = {
    "gap": 1,
    "focus": 0,
}

# Self-loop size for edges whose source and target coincide
SELF_LOOP = {
    "width": 40,
    "height": 30,
}

# ============================================================================
# Layout spacing defaults, overridable per call through ConvertOptions
# ============================================================================

LAYOUT_DEFAULTS = {
    "horizontal_gap": 80,
    "vertical_gap": 100,
    "subgraph_padding": 40,
    "message_gap": 60,
}


def merge_layout_options(options: ConvertOptions | None) -> dict:
    opts = dict(LAYOUT_DEFAULTS)
    if options:
        if options.horizontal_gap is not None:
            opts["horizontal_gap"] = options.horizontal_gap
        if options.vertical_gap is not None:
            opts["vertical_gap"] = options.vertical_gap
        if options.subgraph_padding is not None:
            opts["subgraph_padding"] = options.subgraph_padding
        if options.message_gap is not None:
            opts["message_gap"] = options.message_gap
    return opts
