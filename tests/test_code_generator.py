"""
Tests for hierarchical WBS code generation.

Tests cover:
- Root and child code generation
- Malformed and missing codes
- Unknown parents
"""

import pytest

from pmflow.managers.code_generator import next_code, parse_code_segment


class TestParseCodeSegment:
    """Test code segment parsing."""

    @pytest.mark.parametrize(
        "segment,expected",
        [("3", 3), ("12", 12), (" 4 ", 4), ("", 0), (None, 0), ("abc", 0), ("2a", 0)],
    )
    def test_parse(self, segment, expected):
        """Numeric segments parse, anything else counts as 0."""
        assert parse_code_segment(segment) == expected


class TestRootCodes:
    """Test code generation for root-level nodes."""

    def test_first_root(self):
        """Empty collection yields code 1."""
        assert next_code([], None) == "1"

    def test_next_after_existing_roots(self, mock_data):
        """Root nodes 1 and 2 exist, next root is 3."""
        nodes = [
            mock_data.create_node("a", "1"),
            mock_data.create_node("b", "2"),
        ]
        assert next_code(nodes, None) == "3"

    def test_uses_max_not_count(self, mock_data):
        """Gaps left by deletions are not reused."""
        nodes = [
            mock_data.create_node("a", "1"),
            mock_data.create_node("b", "5"),
        ]
        assert next_code(nodes, None) == "6"

    def test_ignores_child_codes(self, sample_nodes):
        """Only root nodes are considered for the root code."""
        assert next_code(sample_nodes, None) == "3"

    def test_malformed_root_codes_count_as_zero(self, mock_data):
        """Corrupted root codes don't break generation."""
        nodes = [
            mock_data.create_node("a", "x"),
            mock_data.create_node("b", ""),
            mock_data.create_node("c", "2"),
        ]
        assert next_code(nodes, None) == "3"


class TestChildCodes:
    """Test code generation for child nodes."""

    def test_first_child(self, mock_data):
        """First child of 2.1 is 2.1.1."""
        nodes = [
            mock_data.create_node("p", "2"),
            mock_data.create_node("c", "2.1", parent_id="p", level=1),
        ]
        assert next_code(nodes, "c") == "2.1.1"

    def test_next_sibling(self, sample_nodes):
        """Planning (1.1) has two children, next is 1.1.3."""
        assert next_code(sample_nodes, "w2") == "1.1.3"

    def test_uses_last_segment_only(self, mock_data):
        """Sibling suffix comes from the last dot-segment."""
        nodes = [
            mock_data.create_node("p", "1"),
            mock_data.create_node("a", "1.9", parent_id="p", level=1),
            mock_data.create_node("b", "1.10", parent_id="p", level=1),
        ]
        assert next_code(nodes, "p") == "1.11"

    def test_malformed_sibling_suffix(self, mock_data):
        """A sibling with a non-numeric suffix counts as 0."""
        nodes = [
            mock_data.create_node("p", "3"),
            mock_data.create_node("a", "3.x", parent_id="p", level=1),
        ]
        assert next_code(nodes, "p") == "3.1"

    def test_unknown_parent_falls_back(self, sample_nodes):
        """Unknown parent yields the degenerate code 1."""
        assert next_code(sample_nodes, "missing") == "1"

    def test_pure(self, sample_nodes):
        """Generation does not modify the collection."""
        before = [node.model_dump() for node in sample_nodes]
        next_code(sample_nodes, "w2")
        assert [node.model_dump() for node in sample_nodes] == before
