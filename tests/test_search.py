# tests/test_search.py

"""Tests for path search over keys and values"""

# Local imports
from json_smart_parser.search import MAX_SEARCH_RESULTS
from json_smart_parser.search import search_json_paths


class TestSearch:
    """Test key and value matching"""

    def test_leaf_value(self):
        assert search_json_paths({"a": {"b": "findme"}}, "findme") == ['$["a"]["b"]']

    def test_case_insensitive_keys(self):
        data = {"UserName": "x", "n": [{"user": 1}]}
        assert search_json_paths(data, "user") == ['$["UserName"]', '$["n"][0]["user"]']

    def test_non_string_values(self):
        data = {"n": 42, "flag": True, "none": None}
        assert search_json_paths(data, "4") == ['$["n"]']
        assert search_json_paths(data, "TRUE") == ['$["flag"]']
        assert search_json_paths(data, "null") == ['$["none"]']

    def test_array_elements(self):
        assert search_json_paths(["alpha", "beta", ["alphabet"]], "alpha") == ["$[0]", "$[2][0]"]

    def test_integral_floats_match_as_integers(self):
        data = {"price": 1.0, "ratio": 0.5}
        assert search_json_paths(data, "1.0") == []
        assert search_json_paths(data, "1") == ['$["price"]']
        assert search_json_paths(data, "0.5") == ['$["ratio"]']

    def test_primitive_root(self):
        assert search_json_paths("Hello", "ell") == ["$"]
        assert search_json_paths(12, "3") == []

    def test_matching_parent_and_descendant(self):
        assert search_json_paths({"match": {"match": 1}}, "match") == ['$["match"]', '$["match"]["match"]']

    def test_preorder(self):
        data = {"a": {"x": "hit"}, "b": "hit", "c": [{"d": "hit"}]}
        assert search_json_paths(data, "hit") == ['$["a"]["x"]', '$["b"]', '$["c"][0]["d"]']

    def test_empty_term(self):
        assert search_json_paths({"a": 1}, "") == []

    def test_quoted_keys(self):
        assert search_json_paths({'say "hi"': 1}, "hi") == ['$["say \\"hi\\""]']


class TestResultCap:
    """Test the result ceiling"""

    def test_cap(self):
        data = {f"k{i}": "match" for i in range(250)}
        results = search_json_paths(data, "match")
        assert len(results) == MAX_SEARCH_RESULTS
        assert results[0] == '$["k0"]'
        assert results[-1] == '$["k199"]'

    def test_custom_limit(self):
        assert search_json_paths(["a", "a", "a"], "a", limit=2) == ["$[0]", "$[1]"]
