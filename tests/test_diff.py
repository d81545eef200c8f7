# tests/test_diff.py

"""Tests for structural JSON comparison"""

# Local imports
from json_smart_parser.diff import ADDED
from json_smart_parser.diff import MODIFIED
from json_smart_parser.diff import REMOVED
from json_smart_parser.diff import UNCHANGED
from json_smart_parser.diff import compare_json
from json_smart_parser.diff import generate_diff_report


class TestCompareJson:
    """Test diff generation"""

    def test_mixed_changes(self):
        diffs = compare_json({"a": 1, "b": [1, 2]}, {"a": 2, "b": [1], "c": True})
        assert [(d.path, d.type) for d in diffs] == [
            ("$.a", MODIFIED),
            ("$.b[0]", UNCHANGED),
            ("$.b[1]", REMOVED),
            ("$.c", ADDED),
        ]
        assert diffs[0].old_value == 1
        assert diffs[0].new_value == 2
        assert diffs[2].old_value == 2
        assert diffs[3].new_value is True

    def test_identical(self):
        diffs = compare_json({"a": [1]}, {"a": [1]})
        assert [(d.path, d.type) for d in diffs] == [("$", UNCHANGED)]

    def test_kind_change(self):
        diffs = compare_json({"a": 1}, {"a": [1]})
        assert [(d.path, d.type) for d in diffs] == [("$.a", MODIFIED)]

    def test_array_growth(self):
        diffs = compare_json([1], [1, {"x": None}])
        assert diffs[-1].path == "$[1]"
        assert diffs[-1].type == ADDED
        assert diffs[-1].new_value == {"x": None}

    def test_report(self):
        report = generate_diff_report(compare_json({"a": 1}, {"a": 1, "c": True}))
        assert "- Added: 1" in report
        assert "- Unchanged: 1" in report
        assert "+ $.c (added)" in report
        assert "  new: true" in report
