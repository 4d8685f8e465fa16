"""Tests for the inline style directive: parsing, stripping, detection."""
from __future__ import annotations

import pytest

from mermaid_excalidraw.directive import parse_directive, strip_directive, has_directive


# ============================================================================
# parse_directive
# ============================================================================


class TestParseDirective:
    def test_parses_theme_and_styles(self):
        d = parse_directive(
            "%%{excali: theme: architecture, styles: {A: ui, B: db}}%%\n"
            "flowchart LR\n"
            "  A --> B"
        )
        assert d.theme == "architecture"
        assert d.styles == {"A": "ui", "B": "db"}

    def test_styles_without_theme(self):
        d = parse_directive("%%{excali: styles: {Cache: cache}}%%\ngraph TD\n  Cache")
        assert d.theme is None
        assert d.styles == {"Cache": "cache"}

    def test_drops_unknown_categories(self):
        d = parse_directive("%%{excali: styles: {A: ui, B: sparkly}}%%\ngraph TD")
        assert d.styles == {"A": "ui"}

    def test_no_block_yields_empty_directive(self):
        d = parse_directive("graph TD\n  A --> B")
        assert d.theme is None
        assert d.styles == {}

    def test_block_may_span_lines(self):
        d = parse_directive(
            "%%{excali:\n"
            "  theme: dark,\n"
            "  styles: {A: agent}\n"
            "}%%\n"
            "graph TD\n  A"
        )
        assert d.theme == "dark"
        assert d.styles == {"A": "agent"}

    def test_only_first_block_counts(self):
        d = parse_directive(
            "%%{excali: styles: {A: ui}}%%\n"
            "graph TD\n"
            "%%{excali: styles: {B: db}}%%\n"
        )
        assert d.styles == {"A": "ui"}

    def test_block_may_appear_after_the_header(self):
        d = parse_directive("graph TD\n  A --> B\n%%{excali: styles: {B: queue}}%%")
        assert d.styles == {"B": "queue"}


# ============================================================================
# strip_directive / has_directive
# ============================================================================


class TestStripDirective:
    def test_removes_block_and_trailing_whitespace(self):
        text = "%%{excali: styles: {A: ui}}%%\n\nflowchart LR\n  A --> B"
        assert strip_directive(text) == "flowchart LR\n  A --> B"

    def test_removes_every_block(self):
        text = "%%{excali: styles: {A: ui}}%%\ngraph TD\n  A\n%%{excali: theme: x}%%\n"
        assert "excali" not in strip_directive(text)

    @pytest.mark.parametrize(
        "text",
        [
            "graph TD\n  A --> B",
            "  sequenceDiagram\n  A->>B: hi  \n",
            "erDiagram\n  %% a plain comment stays\n  A ||--o{ B : has",
        ],
    )
    def test_text_without_block_is_only_trimmed(self, text):
        assert strip_directive(text) == text.strip()

    def test_is_idempotent(self):
        text = "%%{excali: styles: {A: ui}}%%\ngraph TD\n  A --> B\n"
        once = strip_directive(text)
        assert strip_directive(once) == once


class TestHasDirective:
    def test_detects_block(self):
        assert has_directive("%%{excali: styles: {A: ui}}%%\ngraph TD")

    def test_plain_comment_is_not_a_directive(self):
        assert not has_directive("%% just a comment\ngraph TD")
