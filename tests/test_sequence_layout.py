"""Tests for the sequence diagram timeline layout.

Verifies participant columns, message rows, self-messages and lifelines.
"""
from __future__ import annotations

import pytest

from mermaid_excalidraw.sequence.parser import parse_sequence_diagram
from mermaid_excalidraw.sequence.layout import layout_sequence_diagram
from mermaid_excalidraw.types import ConvertOptions, Point


def layout(text: str, options: ConvertOptions | None = None):
    return layout_sequence_diagram(parse_sequence_diagram(text), options)


CLIENT_API = (
    "sequenceDiagram\n"
    "  participant Client\n"
    "  participant API\n"
    "  Client->>API: request\n"
    "  API-->>Client: response"
)


# ============================================================================
# Participants
# ============================================================================


class TestParticipants:
    def test_single_row_left_to_right(self):
        res = layout(CLIENT_API)
        client, api = res.nodes["Client"], res.nodes["API"]
        assert (client.x, client.y) == (0, 0)
        assert (api.x, api.y) == (280, 0)
        assert (client.width, client.height) == (160, 60)

    def test_column_order_is_first_appearance(self):
        res = layout(
            "sequenceDiagram\n"
            "  B->>A: one\n"
            "  participant C\n"
            "  A->>C: two"
        )
        xs = [res.nodes[p].x for p in ("B", "A", "C")]
        assert xs == sorted(xs)
        assert len(set(xs)) == 3

    def test_wide_label_widens_column(self):
        res = layout("sequenceDiagram\n  participant A as A very descriptive participant\n  A->>B: x")
        a = res.nodes["A"]
        assert a.width == len("A very descriptive participant") * 9 + 20
        assert res.nodes["B"].x == a.width + 120


# ============================================================================
# Messages
# ============================================================================


class TestMessages:
    def test_rows_between_column_centers(self):
        res = layout(CLIENT_API)
        assert res.edges[0].points == [Point(80, 120), Point(360, 120)]
        assert res.edges[1].points == [Point(360, 180), Point(80, 180)]

    def test_line_style_and_label_carried(self):
        res = layout(CLIENT_API)
        assert res.edges[0].line_style == "solid"
        assert res.edges[1].line_style == "dashed"
        assert res.edges[1].label == "response"

    def test_self_message_loops_right(self):
        res = layout("sequenceDiagram\n  A->>A: think\n  A->>B: go")
        assert res.edges[0].points == [
            Point(80, 120),
            Point(120, 120),
            Point(120, 150),
            Point(80, 150),
        ]
        # The loop takes an extra row of height before the next message
        assert res.edges[1].points[0].y == 210

    def test_message_gap_option(self):
        res = layout(CLIENT_API, ConvertOptions(message_gap=100))
        assert res.edges[1].points[0].y == 220


# ============================================================================
# Lifelines and size
# ============================================================================


class TestLifelines:
    def test_one_lifeline_per_participant(self):
        res = layout(CLIENT_API)
        assert [l.node_id for l in res.lifelines] == ["Client", "API"]

    def test_lifeline_spans_past_last_message(self):
        res = layout(CLIENT_API)
        client = res.lifelines[0]
        assert client.x == 80
        assert client.top_y == 60
        assert client.bottom_y == 180 + 80

    def test_lifelines_without_messages(self):
        res = layout("sequenceDiagram\n  participant A")
        assert res.lifelines[0].bottom_y == 120 + 80

    def test_total_size(self):
        res = layout(CLIENT_API)
        assert res.width == 280 + 160 + 120
        assert res.height == 260 + 60

    def test_no_subgraphs(self):
        assert layout(CLIENT_API).subgraphs == []
