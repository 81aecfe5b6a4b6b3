"""Unit tests for lookup-path resolution."""

import copy
import unittest

import pytest

from hdf_converters.mapping.path import ABSENT, is_absent, parse_path, resolve


class TestAbsent(unittest.TestCase):
    """Tests for the ABSENT marker."""

    def test_absent_is_falsy(self):
        self.assertFalse(ABSENT)

    def test_absent_distinct_from_real_values(self):
        for value in (None, False, 0, "", [], {}):
            self.assertIsNot(ABSENT, value)
            self.assertFalse(is_absent(value))

    def test_absent_survives_copies(self):
        self.assertIs(copy.copy(ABSENT), ABSENT)
        self.assertIs(copy.deepcopy({"x": ABSENT})["x"], ABSENT)


class TestParsePath(unittest.TestCase):
    """Tests for path parsing."""

    def test_dotted_keys(self):
        self.assertEqual(parse_path("a.b.c"), ("a", "b", "c"))

    def test_index_and_wildcard(self):
        self.assertEqual(parse_path("a.b[0].c[*]"), ("a", "b", 0, "c", "*"))

    def test_invalid_path(self):
        with self.assertRaises(ValueError):
            parse_path("a.b[x]")


class TestResolve:
    """Tests for resolve()."""

    def test_nested_keys(self):
        assert resolve({"a": {"b": [1, 2, 3]}}, "a.b") == [1, 2, 3]

    def test_missing_path_is_absent(self):
        assert resolve({}, "x.y") is ABSENT

    def test_step_into_scalar_is_absent(self):
        assert resolve({"a": "text"}, "a.b") is ABSENT

    def test_index(self):
        assert resolve({"items": ["x", "y"]}, "items[1]") == "y"
        assert resolve({"items": ["x", "y"]}, "items[5]") is ABSENT

    def test_index_on_string_is_absent(self):
        assert resolve({"items": "xy"}, "items[0]") is ABSENT

    def test_wildcard_skips_absent(self):
        record = {"items": [{"name": "a"}, {}, {"name": "c"}]}
        assert resolve(record, "items[*].name") == ["a", "c"]

    def test_falsy_values_are_returned(self):
        record = {"none": None, "zero": 0, "empty": "", "false": False}
        assert resolve(record, "none") is None
        assert resolve(record, "zero") == 0
        assert resolve(record, "empty") == ""
        assert resolve(record, "false") is False

    def test_root_prefix(self):
        root = {"source": "scan", "findings": [{"id": 1}]}
        item = root["findings"][0]
        assert resolve(item, "$.source", root) == "scan"
        assert resolve(item, "source", root) is ABSENT

    def test_root_prefix_without_root_uses_record(self):
        assert resolve({"a": 1}, "$.a") == 1

    def test_empty_path_returns_record(self):
        record = {"a": 1}
        assert resolve(record, "") is record

    @pytest.mark.parametrize("path", ["a.b", "a[0]", "a[*].b"])
    def test_never_raises_on_missing(self, path):
        assert resolve({"a": None}, path) is ABSENT
