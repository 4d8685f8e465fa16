from __future__ import annotations


class MermaidExcalidrawError(Exception):
    """Base class for errors raised by mermaid-excalidraw."""


class UnsupportedDiagramError(MermaidExcalidrawError, ValueError):
    """The source text does not start with a recognized diagram header."""

    def __init__(self, header: str = "") -> None:
        self.header = header
        shown = f' "{header}"' if header else ""
        super().__init__(
            f"Could not detect diagram type from header{shown}. "
            "Supported types: flowchart/graph, sequenceDiagram, erDiagram"
        )
