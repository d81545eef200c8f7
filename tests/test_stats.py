# tests/test_stats.py

"""Tests for JSON statistics and quality scoring"""

# Local imports
from json_smart_parser.stats import analyze_json_data
from json_smart_parser.stats import format_bytes
from json_smart_parser.stats import generate_stats_report


SAMPLE = {"name": "Ann", "tags": [], "token": "abc", "n": None, "x": 1, "y": 1.0}


class TestAnalyze:
    """Test structural counts"""

    def test_counts(self):
        stats = analyze_json_data(SAMPLE)
        assert stats.total_fields == 10
        assert stats.total_objects == 1
        assert stats.total_arrays == 1
        assert stats.max_depth == 1
        assert stats.array_lengths == [0]
        assert stats.type_distribution == {"object": 1, "string": 2, "array": 1, "null": 1, "number": 2}

    def test_empty_and_sensitive_fields(self):
        stats = analyze_json_data(SAMPLE)
        assert stats.empty_fields == ["$.tags", "$.n"]
        assert stats.sensitive_fields == ["$.token"]

    def test_integral_float_counts_as_duplicate_of_int(self):
        assert analyze_json_data(SAMPLE).duplicate_values == {"1": 2}

    def test_scores(self):
        stats = analyze_json_data(SAMPLE)
        assert stats.complexity_score == 15
        assert stats.quality_score == 70
        assert len(stats.issues) == 2

    def test_booleans_are_not_numbers(self):
        stats = analyze_json_data([True, 1])
        assert stats.type_distribution == {"array": 1, "boolean": 1, "number": 1}

    def test_blank_string_is_empty(self):
        assert analyze_json_data({"s": "  "}).empty_fields == ["$.s"]

    def test_deep_nesting_penalized(self):
        value = 1
        for _ in range(12):
            value = [value]
        stats = analyze_json_data(value)
        assert stats.max_depth == 12
        assert any("nested" in issue for issue in stats.issues)

    def test_complexity_capped(self):
        stats = analyze_json_data([{} for _ in range(60)])
        assert stats.complexity_score == 100


class TestReport:
    """Test the Markdown report"""

    def test_report_sections(self):
        report = generate_stats_report(analyze_json_data(SAMPLE))
        assert "- Fields: 10" in report
        assert "- Quality score: 70/100" in report
        assert "- number: 2 (20.0%)" in report
        assert "## Sensitive fields" in report
        assert "- $.token" in report

    def test_empty_object(self):
        report = generate_stats_report(analyze_json_data({}))
        assert "- object: 1 (0.0%)" in report

    def test_format_bytes(self):
        assert format_bytes(10) == "10 B"
        assert format_bytes(2048) == "2.00 KB"
        assert format_bytes(3 * 1024 * 1024) == "3.00 MB"
