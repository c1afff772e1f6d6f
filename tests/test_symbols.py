"""
Tests for symbol flattening into payload fields.
"""

from repo_indexer.core.symbols import flatten_symbols


class TestFlattenSymbols:
    """Test symbol flattening."""

    def test_empty(self):
        """Test no symbols give empty lists."""
        assert flatten_symbols([]) == {
            "symbol_names": [],
            "symbol_references": [],
            "symbol_kinds": [],
            "unity_tags": [],
        }

    def test_definitions_and_references_separated(self):
        """Test references are kept apart from definitions."""
        meta = flatten_symbols([
            {"name": "Indexer", "kind": "class"},
            {"name": "run", "kind": "method"},
            {"name": "logger", "kind": "reference"},
        ])

        assert meta["symbol_names"] == ["Indexer", "run"]
        assert meta["symbol_kinds"] == ["class", "method"]
        assert meta["symbol_references"] == ["logger"]

    def test_duplicates_removed_in_order(self):
        """Test duplicates are removed keeping first order."""
        meta = flatten_symbols([
            {"name": "load", "kind": "function"},
            {"name": "save", "kind": "function"},
            {"name": "load", "kind": "function"},
        ])

        assert meta["symbol_names"] == ["load", "save"]
        assert meta["symbol_kinds"] == ["function"]

    def test_unity_tags(self):
        """Test Unity kinds map to tags."""
        meta = flatten_symbols([
            {"name": "Update", "kind": "unity_lifecycle"},
            {"name": "speed", "kind": "serialized_field"},
            {"name": "Config", "kind": "scriptable_object"},
        ])

        assert meta["unity_tags"] == ["lifecycle", "serialized_field", "scriptable_object"]

    def test_missing_fields_tolerated(self):
        """Test symbols without name or kind are tolerated."""
        meta = flatten_symbols([{"kind": "function"}, {"name": "orphan"}])

        assert meta["symbol_names"] == ["orphan"]
        assert meta["symbol_kinds"] == ["function"]
