# tests/test_parsing/test_table_parsers.py
"""Tests for the text parsing strategies (B03 pipe matrix, B04 selection rows, B05 flat text)."""

import pytest

from compose_bom.B_parsing.B03_pipe_matrix_parser import PipeMatrixParser
from compose_bom.B_parsing.B04_selection_rows_parser import SelectionRowsParser
from compose_bom.B_parsing.B05_flat_text_parser import FlatTextParser

UI = "androidx.compose.ui:ui"
FOUNDATION = "androidx.compose.foundation:foundation"
MATERIAL3 = "androidx.compose.material3:material3"


@pytest.mark.parametrize(
    "parser",
    [PipeMatrixParser(), SelectionRowsParser(), FlatTextParser()],
    ids=lambda p: p.parser_id,
)
class TestParserContract:
    """Every strategy returns None for input it does not recognize."""

    @pytest.mark.parametrize("text", ["", "no tables here", "| a | b |\n|---|---|", None])
    def test_unrecognized_returns_none(self, parser, text):
        assert parser.parse(text) is None

    def test_repr_names_strategy(self, parser):
        assert parser.parser_id in repr(parser)


class TestPipeMatrixParser:
    """Header row of BOM versions, one artifact per row."""

    def test_minimal_table(self):
        text = "| Artifact | 2024.01.00 | 2023.12.00 |\n| ns.group:name | 1.2.0 | 1.1.0 |"
        result = PipeMatrixParser(artifact_namespace="ns.").parse(text)
        assert result.bom_versions == ["2024.01.00", "2023.12.00"]
        assert result.libraries == ["ns.group:name"]
        assert result.mapping["2024.01.00"]["ns.group:name"] == "1.2.0"
        assert result.mapping["2023.12.00"]["ns.group:name"] == "1.1.0"

    def test_sample_document(self, pipe_matrix_doc):
        result = PipeMatrixParser().parse(pipe_matrix_doc)
        assert result.bom_versions == ["2024.02.00", "2024.01.00", "2023.12.00"]
        assert result.libraries == [UI, MATERIAL3, "androidx.compose.animation:animation-graphics"]
        assert result.mapping["2024.02.00"][MATERIAL3] == "1.2.0"
        assert result.mapping["2023.12.00"][UI] == "1.5.4"

    def test_placeholders_are_absent_not_empty(self, pipe_matrix_doc):
        result = PipeMatrixParser().parse(pipe_matrix_doc)
        graphics = "androidx.compose.animation:animation-graphics"
        assert result.mapping["2024.02.00"][graphics] == "1.6.1"
        assert graphics not in result.mapping["2024.01.00"]
        assert graphics not in result.mapping["2023.12.00"]

    def test_rows_outside_namespace_ignored(self, pipe_matrix_doc):
        result = PipeMatrixParser().parse(pipe_matrix_doc)
        assert "com.example:not-compose" not in result.libraries

    def test_short_rows(self):
        text = "| Artifact | 2024.01.00 | 2023.12.00 |\n| androidx.compose.ui:ui | 1.6.0 |"
        result = PipeMatrixParser().parse(text)
        assert result.mapping == {"2024.01.00": {UI: "1.6.0"}, "2023.12.00": {}}

    def test_header_without_artifact_rows(self):
        assert PipeMatrixParser().parse("| Artifact | 2024.01.00 | 2023.12.00 |") is None

    def test_single_bom_header_not_recognized(self):
        text = "| Artifact | 2024.01.00 |\n| androidx.compose.ui:ui | 1.6.0 |"
        assert PipeMatrixParser().parse(text) is None


class TestSelectionRowsParser:
    """Selector line fixes BOM order; rows accumulate per artifact."""

    def test_sample_document(self, selection_rows_doc):
        result = SelectionRowsParser().parse(selection_rows_doc)
        assert result.bom_versions == ["2024.02.00", "2024.01.00"]
        assert result.libraries == [UI, FOUNDATION]
        assert result.mapping["2024.02.00"] == {UI: "1.6.1", FOUNDATION: "1.6.1"}
        assert result.mapping["2024.01.00"] == {UI: "1.6.0", FOUNDATION: "1.6.0"}

    def test_alignment_follows_selector_not_row_position(self):
        text = "\n".join(
            [
                "| androidx.compose.foundation:foundation | 1.6.1 |",
                "MAKE A SELECTION 2024.02.00 2024.01.00",
                "| androidx.compose.ui:ui | 1.6.1 |",
                "| androidx.compose.foundation:foundation | 1.6.0 |",
                "| androidx.compose.ui:ui | 1.6.0 |",
            ]
        )
        result = SelectionRowsParser().parse(text)
        assert result.mapping["2024.02.00"][UI] == "1.6.1"
        assert result.mapping["2024.01.00"][UI] == "1.6.0"
        assert result.mapping["2024.02.00"][FOUNDATION] == "1.6.1"
        assert result.mapping["2024.01.00"][FOUNDATION] == "1.6.0"

    def test_release_notes_only_http(self, selection_rows_doc):
        result = SelectionRowsParser().parse(selection_rows_doc)
        note = result.release_notes[UI]["1.6.1"]
        assert note.label == "Release notes"
        assert note.url.startswith("https://")
        assert "1.6.0" not in result.release_notes[UI]
        assert FOUNDATION not in result.release_notes

    def test_over_long_sequence_discarded(self):
        text = "\n".join(
            [
                "Make a selection 2024.02.00 2024.01.00",
                "| androidx.compose.ui:ui | 1.6.2 |",
                "| androidx.compose.ui:ui | 1.6.1 |",
                "| androidx.compose.ui:ui | 1.6.0 |",
                "| androidx.compose.foundation:foundation | 1.6.1 |",
                "| androidx.compose.foundation:foundation | 1.6.0 |",
            ]
        )
        result = SelectionRowsParser().parse(text)
        assert result.libraries == [FOUNDATION]
        assert UI not in result.mapping["2024.02.00"]

    def test_single_version_sequence_discarded(self):
        text = "\n".join(
            [
                "Make a selection 2024.02.00 2024.01.00",
                "| androidx.compose.ui:ui | 1.6.1 |",
            ]
        )
        assert SelectionRowsParser().parse(text) is None

    def test_partial_sequence_fills_leading_boms(self):
        text = "\n".join(
            [
                "Make a selection 2024.03.00 2024.02.00 2024.01.00",
                "| androidx.compose.ui:ui | 1.6.2 |",
                "| androidx.compose.ui:ui | 1.6.1 |",
            ]
        )
        result = SelectionRowsParser().parse(text)
        assert result.mapping == {
            "2024.03.00": {UI: "1.6.2"},
            "2024.02.00": {UI: "1.6.1"},
            "2024.01.00": {},
        }

    def test_custom_marker(self):
        text = "Choose a BOM 2024.02.00 2024.01.00\n| ns.a:b | 1.0.1 |\n| ns.a:b | 1.0.0 |"
        parser = SelectionRowsParser(artifact_namespace="ns.", selection_marker="choose a bom")
        result = parser.parse(text)
        assert result.mapping["2024.01.00"]["ns.a:b"] == "1.0.0"

    def test_no_marker(self):
        text = "2024.02.00 2024.01.00\n| androidx.compose.ui:ui | 1.6.1 |\n| androidx.compose.ui:ui | 1.6.0 |"
        assert SelectionRowsParser().parse(text) is None


class TestFlatTextParser:
    """One token per line; blocks must be complete."""

    def test_sample_document(self, flat_text_doc):
        result = FlatTextParser().parse(flat_text_doc)
        assert result.bom_versions == ["2024.02.00", "2024.01.00"]
        assert result.libraries == [UI, FOUNDATION]
        assert result.mapping["2024.02.00"] == {UI: "1.6.1", FOUNDATION: "1.6.1"}
        assert result.mapping["2024.01.00"] == {UI: "1.6.0", FOUNDATION: "1.6.0"}

    def test_incomplete_block_discarded(self, flat_text_doc):
        result = FlatTextParser().parse(flat_text_doc)
        assert "androidx.compose.runtime:runtime" not in result.libraries

    def test_incomplete_block_at_end_discarded(self):
        text = "2024.02.00\n2024.01.00\nandroidx.compose.ui:ui\n1.6.1\n1.6.0\nandroidx.compose.runtime:runtime\n1.6.1\n"
        result = FlatTextParser().parse(text)
        assert result.libraries == [UI]

    def test_non_version_lines_skipped(self):
        text = "2024.02.00\n2024.01.00\nandroidx.compose.ui:ui\nRelease notes\n1.6.1\n\n1.6.0"
        result = FlatTextParser().parse(text)
        assert result.mapping["2024.01.00"][UI] == "1.6.0"

    def test_single_bom_version(self):
        assert FlatTextParser().parse("2024.02.00\nandroidx.compose.ui:ui\n1.6.1") is None
