from __future__ import annotations

import re

from .types import Directive
from .theme import STYLE_TYPES

# ============================================================================
# Style directive
#
# An optional block anywhere in the source selects colors per node id:
#
#   %%{excali: theme: architecture, styles: {A: ui, B: db}}%%
#   %%{excali: styles: {A: ui}}%%
#
# Mermaid treats the block as a comment, so the text stays renderable by
# standard tools.
# ============================================================================

_DIRECTIVE_RE = re.compile(r"%%\{excali:\s*(.*?)\}%%", re.DOTALL)
_STRIP_RE = re.compile(r"%%\{excali:.*?\}%%\s*", re.DOTALL)
_THEME_RE = re.compile(r"theme:\s*(\w+)")
_STYLES_RE = re.compile(r"styles:\s*\{([^}]+)\}")
_PAIR_RE = re.compile(r"(\w+):\s*(\w+)")


def parse_directive(text: str) -> Directive:
    """Parse the first `%%{excali: ...}%%` block in the source.

    Unknown style categories are dropped. No block yields an empty directive.
    """
    directive = Directive()

    match = _DIRECTIVE_RE.search(text)
    if not match:
        return directive

    content = match.group(1).strip()

    theme_match = _THEME_RE.search(content)
    if theme_match:
        directive.theme = theme_match.group(1)

    styles_match = _STYLES_RE.search(content)
    if styles_match:
        for node_id, style_type in _PAIR_RE.findall(styles_match.group(1)):
            if style_type in STYLE_TYPES:
                directive.styles[node_id] = style_type  # type: ignore[assignment]

    return directive


def strip_directive(text: str) -> str:
    """Remove every directive block, leaving plain Mermaid."""
    return _STRIP_RE.sub("", text).strip()


def has_directive(text: str) -> bool:
    return "%%{excali:" in text
