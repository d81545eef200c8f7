# tests/test_masking.py

"""Tests for field masking"""

# Standard library imports
import re

# Local imports
from json_smart_parser.masking import DEFAULT_MASK_RULES
from json_smart_parser.masking import REPLACE
from json_smart_parser.masking import MaskRule
from json_smart_parser.masking import mask_data
from json_smart_parser.masking import mask_value
from json_smart_parser.masking import string_hash


class TestMaskValue:
    """Test the individual masking styles"""

    def test_partial(self):
        assert mask_value("ab", "partial") == "*"
        assert mask_value("abc", "partial") == "a**"
        assert mask_value("alice@example.com", "partial") == "alice@*****le.com"

    def test_full(self):
        assert mask_value("hunter2", "full") == "*******"
        assert mask_value("x" * 15, "full") == "*" * 10

    def test_hash(self):
        assert string_hash("hello") == 99162322
        assert string_hash("polygenelubricants") == -2147483648
        assert mask_value("polygenelubricants", "hash") == "hash_-8000000"
        assert mask_value("hello", "hash") == "hash_5e918d2"

    def test_replace(self):
        assert mask_value("anything", "replace") == "***"
        assert mask_value("anything", "replace", "[redacted]") == "[redacted]"

    def test_unknown_type_unchanged(self):
        assert mask_value("keep", "other") == "keep"


class TestMaskData:
    """Test masking a whole document"""

    def test_default_rules(self):
        data = {"user": {"email": "alice@example.com", "password": "hunter2", "age": 30}, "items": [{"phone": "5551234"}]}
        masked, log = mask_data(data)
        assert masked == {"user": {"email": "alice@*****le.com", "password": "*******", "age": 30}, "items": [{"phone": "555*234"}]}
        assert log == [
            '$.user.email: applied rule "Email address"',
            '$.user.password: applied rule "Password"',
            '$.items[0].phone: applied rule "Phone number"',
        ]

    def test_input_not_modified(self):
        data = {"password": "hunter2"}
        mask_data(data)
        assert data == {"password": "hunter2"}

    def test_matched_container_is_descended(self):
        masked, log = mask_data({"card": {"number": "4111"}, "secret": 5})
        assert masked == {"card": {"number": "4111"}, "secret": 5}
        assert log == []

    def test_disabled_rules_skipped(self):
        rules = [MaskRule(r.id, r.name, r.pattern, r.mask_type, enabled=False) for r in DEFAULT_MASK_RULES]
        assert mask_data({"password": "x"}, rules) == ({"password": "x"}, [])

    def test_custom_replace_rule(self):
        rule = MaskRule("api", "API key", re.compile("api_?key", re.IGNORECASE), REPLACE, replacement="<hidden>")
        masked, _ = mask_data([{"API_KEY": "abc"}], [rule])
        assert masked == [{"API_KEY": "<hidden>"}]

    def test_first_matching_rule_wins(self):
        masked, log = mask_data({"email_password": "hunter22"})
        assert log == ['$.email_password: applied rule "Email address"']
        assert masked["email_password"] == "hun**r22"
