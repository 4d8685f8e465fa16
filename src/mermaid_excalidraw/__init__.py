"""mermaid-excalidraw — Convert Mermaid diagrams into positioned, styled Excalidraw scenes."""

from __future__ import annotations

import logging
import re

from .types import ConvertOptions, Diagram, DiagramType, LayoutResult
from .errors import MermaidExcalidrawError, UnsupportedDiagramError
from .directive import parse_directive, strip_directive, has_directive
from .theme import COLOR_PALETTE, list_styles
from .parser import parse_flowchart
from .layout import layout_diagram
from .renderer import render_scene
from .scene import Element, Scene, TextElementInfo

from .sequence.parser import parse_sequence_diagram
from .er.parser import parse_er_diagram

__all__ = [
    "convert",
    "parse_diagram",
    "detect_diagram_type",
    "layout_diagram",
    "render_scene",
    "parse_directive",
    "strip_directive",
    "has_directive",
    "list_styles",
    "COLOR_PALETTE",
    "ConvertOptions",
    "Diagram",
    "LayoutResult",
    "Scene",
    "Element",
    "TextElementInfo",
    "MermaidExcalidrawError",
    "UnsupportedDiagramError",
]

log = logging.getLogger(__name__)

_HEADERS: list[tuple[re.Pattern[str], DiagramType]] = [
    (re.compile(r"^(?:flowchart|graph)\b", re.IGNORECASE), "flowchart"),
    (re.compile(r"^sequencediagram\b", re.IGNORECASE), "sequence"),
    (re.compile(r"^erdiagram\b", re.IGNORECASE), "er"),
]


def _first_significant_line(text: str) -> str:
    for line in strip_directive(text).split("\n"):
        line = line.strip()
        if line and not line.startswith("%%"):
            return line
    return ""


def detect_diagram_type(text: str) -> DiagramType | None:
    """Detect diagram type from the first line after the directive.

    Returns None when the header names no supported dialect.
    """
    first_line = _first_significant_line(text)
    for pattern, diagram_type in _HEADERS:
        if pattern.match(first_line):
            return diagram_type
    return None


def parse_diagram(text: str) -> Diagram:
    """Parse Mermaid text of any supported dialect.

    Raises UnsupportedDiagramError before parsing when the header is unknown.
    """
    diagram_type = detect_diagram_type(text)

    if diagram_type == "sequence":
        return parse_sequence_diagram(text)
    if diagram_type == "er":
        return parse_er_diagram(text)
    if diagram_type == "flowchart":
        return parse_flowchart(text)

    raise UnsupportedDiagramError(_first_significant_line(text))


def convert(
    text: str,
    options: ConvertOptions | None = None,
) -> Scene:
    """Convert Mermaid text into an Excalidraw scene.

    Every call is independent: seeds, ids and z-order keys start over.
    """
    diagram = parse_diagram(text)
    log.debug(
        "parsed %s diagram: %d nodes, %d edges, %d subgraphs",
        diagram.type,
        len(diagram.nodes),
        len(diagram.edges),
        len(diagram.subgraphs),
    )

    layout = layout_diagram(diagram, options)
    scene = render_scene(diagram, layout, options)
    log.debug("rendered %d elements (%d text)", len(scene.elements), len(scene.texts))
    return scene
