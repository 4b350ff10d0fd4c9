"""Tests for field path resolution and value helpers."""

import pytest

from memstore.paths import MISSING, is_absent, resolve_path, split_path
from memstore.values import compare_values, orderable, to_text


class TestResolvePath:
    """Tests for resolve_path."""

    def test_top_level_field(self):
        """A single segment reads a top-level field."""
        assert resolve_path({"title": "Hello"}, "title") == "Hello"

    def test_nested_field(self):
        """Dotted segments walk nested mappings."""
        doc = {"category": {"id": "cat-1", "meta": {"rank": 3}}}
        assert resolve_path(doc, "category.id") == "cat-1"
        assert resolve_path(doc, "category.meta.rank") == 3

    def test_missing_key(self):
        """A missing key at any depth gives MISSING."""
        assert resolve_path({"a": 1}, "b") is MISSING
        assert resolve_path({"a": {"b": 1}}, "a.c") is MISSING

    def test_non_mapping_mid_path(self):
        """A scalar or list in the middle of a path resolves to MISSING."""
        assert resolve_path({"a": 5}, "a.b") is MISSING
        assert resolve_path({"a": [{"b": 1}]}, "a.b") is MISSING

    def test_present_null_is_not_missing(self):
        """A stored null is returned as None."""
        assert resolve_path({"a": None}, "a") is None

    def test_empty_path(self):
        """An empty path resolves to nothing."""
        assert resolve_path({"": 1}, "") is MISSING

    def test_missing_is_falsy_singleton(self):
        """MISSING is falsy and prints its name."""
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_split_path(self):
        """Paths split on dots."""
        assert split_path("a.b.c") == ["a", "b", "c"]

    def test_is_absent(self):
        """Only MISSING and None count as absent."""
        assert is_absent(MISSING)
        assert is_absent(None)
        assert not is_absent(0)
        assert not is_absent("")


class TestValues:
    """Tests for string forms and comparisons."""

    @pytest.mark.parametrize("value, expected", [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (2.5, "2.5"),
        ("abc", "abc"),
    ])
    def test_to_text(self, value, expected):
        """Values render in their JSON-like string form."""
        assert to_text(value) == expected

    def test_orderable(self):
        """Only number pairs and string pairs are orderable."""
        assert orderable(1, 2.5)
        assert orderable("a", "b")
        assert not orderable(1, "1")
        assert not orderable(True, 1)
        assert not orderable([1], [2])

    def test_compare_values_native(self):
        """Orderable pairs compare natively."""
        assert compare_values(1, 2) == -1
        assert compare_values(2.0, 2) == 0
        assert compare_values("b", "a") == 1

    def test_compare_values_falls_back_to_lowercase_text(self):
        """Other pairs compare by lowercased string form."""
        assert compare_values(True, False) == 1
        assert compare_values(10, "9") == -1
        assert compare_values({"a": 1}, {"a": 1}) == 0
