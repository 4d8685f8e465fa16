"""Tests for the flowchart parser."""

from __future__ import annotations

import pytest

from mermaid_excalidraw.parser import parse_flowchart, parse_statement


def node(d, node_id):
    n = d.node(node_id)
    assert n is not None, f"node {node_id} not found"
    return n


# ============================================================================
# Header / direction
# ============================================================================


class TestHeader:
    def test_parses_graph_td_header(self):
        d = parse_flowchart("graph TD\n  A --> B")
        assert d.direction == "TD"
        assert d.type == "flowchart"

    @pytest.mark.parametrize("direction", ["TD", "TB", "LR", "BT", "RL"])
    def test_accepts_all_directions(self, direction):
        d = parse_flowchart(f"flowchart {direction}\n  A --> B")
        assert d.direction == direction

    def test_case_insensitive_keyword(self):
        d = parse_flowchart("graph lr\n  A --> B")
        assert d.direction == "LR"

    def test_missing_direction_defaults_to_top_down(self):
        d = parse_flowchart("graph\n  A --> B")
        assert d.direction == "TD"

    def test_unknown_direction_defaults_to_top_down(self):
        d = parse_flowchart("flowchart XY\n  A --> B")
        assert d.direction == "TD"

    def test_keeps_raw_source(self):
        text = "%%{excali: styles: {A: ui}}%%\ngraph TD\n  A --> B\n"
        assert parse_flowchart(text).source == text


# ============================================================================
# Node shapes
# ============================================================================


class TestNodeShapes:
    @pytest.mark.parametrize(
        "definition, shape, label",
        [
            ("A[Hello World]", "rectangle", "Hello World"),
            ("A(Rounded)", "ellipse", "Rounded"),
            ("A((Circle))", "ellipse", "Circle"),
            ("A(((Double)))", "ellipse", "Double"),
            ("A{Decision}", "diamond", "Decision"),
            ("A{{Hexagon}}", "hexagon", "Hexagon"),
            ("A([Stadium])", "stadium", "Stadium"),
            ("A[(Database)]", "cylinder", "Database"),
            ("A[[Subroutine]]", "rectangle", "Subroutine"),
            ("A[/Trapezoid\\]", "rectangle", "Trapezoid"),
            ("A[\\Inverted/]", "rectangle", "Inverted"),
            ("A>Flag]", "rectangle", "Flag"),
        ],
    )
    def test_delimiters_select_shape(self, definition, shape, label):
        d = parse_flowchart(f"graph TD\n  {definition}")
        assert node(d, "A").shape == shape
        assert node(d, "A").label == label

    def test_bare_node_is_rectangle_labeled_with_id(self):
        d = parse_flowchart("graph TD\n  A --> B")
        assert node(d, "A").shape == "rectangle"
        assert node(d, "A").label == "A"

    def test_strips_quotes_from_labels(self):
        d = parse_flowchart('graph TD\n  A["Quoted label"]')
        assert node(d, "A").label == "Quoted label"

    def test_br_becomes_newline(self):
        d = parse_flowchart("graph TD\n  A[First<br/>Second]")
        assert node(d, "A").label == "First\nSecond"

    def test_hyphenated_ids(self):
        d = parse_flowchart("graph TD\n  api-gw[Gateway] --> auth-svc")
        assert [n.id for n in d.nodes] == ["api-gw", "auth-svc"]

    def test_class_shorthand_is_skipped(self):
        d = parse_flowchart("graph TD\n  A[Start]:::hot --> B")
        assert node(d, "A").label == "Start"
        assert len(d.edges) == 1


# ============================================================================
# Node registration
# ============================================================================


class TestNodeRegistration:
    def test_nodes_keep_first_seen_order(self):
        d = parse_flowchart("graph TD\n  C --> A\n  B --> C")
        assert [n.id for n in d.nodes] == ["C", "A", "B"]

    def test_inline_definition_updates_implicit_node(self):
        d = parse_flowchart("graph TD\n  A --> B\n  B{Check}")
        assert node(d, "B").shape == "diamond"
        assert node(d, "B").label == "Check"

    def test_bare_reference_does_not_overwrite_definition(self):
        d = parse_flowchart("graph TD\n  A[Start]\n  A --> B")
        assert node(d, "A").label == "Start"

    def test_later_definition_wins(self):
        d = parse_flowchart("graph TD\n  A[One]\n  A(Two)")
        assert node(d, "A").label == "Two"
        assert node(d, "A").shape == "ellipse"

    def test_nodes_are_unique(self):
        d = parse_flowchart("graph TD\n  A --> B\n  A --> C\n  B --> A")
        assert len(d.nodes) == 3


# ============================================================================
# Edges
# ============================================================================


class TestEdges:
    def test_solid_arrow(self):
        d = parse_flowchart("graph TD\n  A --> B")
        e = d.edges[0]
        assert (e.source, e.target) == ("A", "B")
        assert e.arrow_type == "arrow"
        assert e.line_style == "solid"

    def test_open_link_has_no_head(self):
        d = parse_flowchart("graph TD\n  A --- B")
        assert d.edges[0].arrow_type == "none"

    def test_dotted_arrow_is_dashed(self):
        d = parse_flowchart("graph TD\n  A -.-> B")
        assert d.edges[0].line_style == "dashed"
        assert d.edges[0].arrow_type == "arrow"

    def test_dotted_link_without_head(self):
        d = parse_flowchart("graph TD\n  A -.- B")
        assert d.edges[0].line_style == "dashed"
        assert d.edges[0].arrow_type == "none"

    def test_thick_arrow(self):
        d = parse_flowchart("graph TD\n  A ==> B")
        assert d.edges[0].arrow_type == "arrow"
        assert d.edges[0].line_style == "solid"

    def test_bidirectional_arrow(self):
        d = parse_flowchart("graph TD\n  A <--> B")
        assert d.edges[0].arrow_type == "both"

    def test_pipe_label(self):
        d = parse_flowchart("graph TD\n  A -->|Yes| B")
        assert d.edges[0].label == "Yes"

    def test_pipe_label_after_space(self):
        d = parse_flowchart("graph TD\n  A --> |No| B")
        assert d.edges[0].label == "No"

    def test_inline_text_label(self):
        d = parse_flowchart("graph TD\n  A -- retry --> B")
        assert d.edges[0].label == "retry"
        assert d.edges[0].target == "B"

    def test_unlabeled_edge_has_no_label(self):
        d = parse_flowchart("graph TD\n  A --> B")
        assert d.edges[0].label is None

    def test_chain(self):
        d = parse_flowchart("graph TD\n  A --> B --> C")
        assert [(e.source, e.target) for e in d.edges] == [("A", "B"), ("B", "C")]

    def test_ampersand_fans_out(self):
        d = parse_flowchart("graph TD\n  A & B --> C & D")
        pairs = [(e.source, e.target) for e in d.edges]
        assert pairs == [("A", "C"), ("A", "D"), ("B", "C"), ("B", "D")]

    def test_inline_shapes_on_both_ends(self):
        d = parse_flowchart("graph TD\n  A[Start] --> B{Check}")
        assert node(d, "A").label == "Start"
        assert node(d, "B").shape == "diamond"

    def test_semicolons_separate_statements(self):
        d = parse_flowchart("graph TD; A-->B; B-->C")
        assert len(d.edges) == 2


# ============================================================================
# Ignored lines
# ============================================================================


class TestIgnoredLines:
    def test_comments_are_ignored(self):
        d = parse_flowchart("graph TD\n  %% a comment\n  A --> B")
        assert len(d.nodes) == 2

    @pytest.mark.parametrize(
        "line",
        [
            "classDef hot fill:#f96",
            "class A hot",
            "style A fill:#f9f",
            "linkStyle 0 stroke:#ff3",
            "click A callback",
            "?? not mermaid ??",
        ],
    )
    def test_unrecognized_lines_are_ignored(self, line):
        d = parse_flowchart(f"graph TD\n  A --> B\n  {line}")
        assert [n.id for n in d.nodes] == ["A", "B"]
        assert len(d.edges) == 1

    def test_partially_matching_line_is_ignored(self):
        assert parse_statement("A --> ") is None
        assert parse_statement("A --> B -->") is None


# ============================================================================
# Subgraphs
# ============================================================================


class TestSubgraphs:
    def test_bracket_form(self):
        d = parse_flowchart(
            "graph TD\n"
            "  subgraph api[API Layer]\n"
            "    A --> B\n"
            "  end"
        )
        sg = d.subgraphs[0]
        assert sg.id == "api"
        assert sg.label == "API Layer"
        assert sg.node_ids == ["A", "B"]

    def test_free_title_derives_id(self):
        d = parse_flowchart("graph TD\n  subgraph Backend Services\n    A\n  end")
        sg = d.subgraphs[0]
        assert sg.id == "Backend_Services"
        assert sg.label == "Backend Services"

    def test_plain_id(self):
        d = parse_flowchart("graph TD\n  subgraph cluster\n    A\n  end")
        assert d.subgraphs[0].id == "cluster"
        assert d.subgraphs[0].label == "cluster"

    def test_nested_blocks_flatten_to_outer(self):
        d = parse_flowchart(
            "graph TD\n"
            "  subgraph outer[Outer]\n"
            "    A --> B\n"
            "    subgraph inner[Inner]\n"
            "      C\n"
            "    end\n"
            "    D\n"
            "  end"
        )
        assert [sg.id for sg in d.subgraphs] == ["outer"]
        assert d.subgraphs[0].node_ids == ["A", "B", "D"]
        assert d.node("C") is not None

    def test_nodes_after_end_are_not_members(self):
        d = parse_flowchart("graph TD\n  subgraph S\n    A\n  end\n  B --> A")
        assert d.subgraphs[0].node_ids == ["A"]

    def test_stray_end_is_ignored(self):
        d = parse_flowchart("graph TD\n  A --> B\n  end\n  B --> C")
        assert len(d.edges) == 2
        assert d.subgraphs == []

    def test_unterminated_subgraph_is_kept(self):
        d = parse_flowchart("graph TD\n  subgraph S[Open]\n    A --> B")
        assert d.subgraphs[0].node_ids == ["A", "B"]

    def test_empty_subgraph(self):
        d = parse_flowchart("graph TD\n  subgraph E[Empty]\n  end\n  A")
        assert d.subgraphs[0].node_ids == []

    def test_subgraph_style_defaults_to_group(self):
        d = parse_flowchart("graph TD\n  subgraph S\n    A\n  end")
        assert d.subgraphs[0].style_type == "group"

    def test_subgraph_style_override(self):
        d = parse_flowchart(
            "%%{excali: styles: {S: highlight}}%%\n"
            "graph TD\n  subgraph S\n    A\n  end"
        )
        assert d.subgraphs[0].style_type == "highlight"


# ============================================================================
# Style resolution at parse time
# ============================================================================


class TestNodeStyles:
    def test_shape_infers_style(self):
        d = parse_flowchart("graph TD\n  A[(Orders)]")
        assert node(d, "A").style_type == "db"

    def test_label_infers_style(self):
        d = parse_flowchart("graph TD\n  A[Redis]")
        assert node(d, "A").style_type == "cache"

    def test_directive_overrides_inference(self):
        d = parse_flowchart(
            "%%{excali: styles: {A: db}}%%\n"
            "flowchart LR\n"
            "  A[React App] --> B[API]"
        )
        assert node(d, "A").style_type == "db"
        assert node(d, "B").style_type == "api"

    def test_unmatched_label_has_no_style(self):
        d = parse_flowchart("graph TD\n  A[Start]")
        assert node(d, "A").style_type is None


# ============================================================================
# Reference scenario
# ============================================================================


class TestScenario:
    def test_start_check_end(self):
        d = parse_flowchart("flowchart TD\n  A[Start] --> B{Check}\n  B --> C[End]")
        assert [n.id for n in d.nodes] == ["A", "B", "C"]
        assert node(d, "B").shape == "diamond"
        assert [(e.source, e.target) for e in d.edges] == [("A", "B"), ("B", "C")]
