from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

PARTIAL = 'partial'
FULL = 'full'
HASH = 'hash'
REPLACE = 'replace'


@dataclass(frozen=True)
class MaskRule:
    id: str
    name: str
    pattern: re.Pattern
    mask_type: str
    enabled: bool = True
    replacement: Optional[str] = None


def _rule(rule_id: str, name: str, pattern: str, mask_type: str) -> MaskRule:
    return MaskRule(rule_id, name, re.compile(pattern, re.IGNORECASE), mask_type)


# First matching rule wins, so order matters.
DEFAULT_MASK_RULES: List[MaskRule] = [
    _rule('email', 'Email address', r'email|mail', PARTIAL),
    _rule('phone', 'Phone number', r'phone|mobile|tel', PARTIAL),
    _rule('idcard', 'ID document', r'id_?card|passport|ssn', PARTIAL),
    _rule('password', 'Password', r'password|pwd|secret', FULL),
    _rule('credit', 'Credit card', r'credit|card|cvv', PARTIAL),
    _rule('ip', 'IP address', r'ip_?address|ip', PARTIAL),
    _rule('address', 'Postal address', r'address|addr|location', HASH),
    _rule('name', 'Name', r'name|username', PARTIAL),
]


def string_hash(value: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, as a signed 32-bit int."""
    h = 0
    data = value.encode('utf-16-le')
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    return h - 0x100000000 if h >= 0x80000000 else h


def mask_value(value: str, mask_type: str, replacement: Optional[str] = None) -> str:
    if mask_type == FULL:
        return '*' * min(len(value), 10)
    if mask_type == PARTIAL:
        if len(value) <= 2:
            return '*'
        if len(value) <= 4:
            return value[0] + '*' * (len(value) - 1)
        show = math.ceil(len(value) * 0.3)
        return value[:show] + '*' * (len(value) - show * 2) + value[len(value) - show:]
    if mask_type == HASH:
        h = string_hash(value)
        digits = ('-' if h < 0 else '') + format(abs(h), 'x')
        return f"hash_{digits[:8]}"
    if mask_type == REPLACE:
        return replacement or '***'
    return value


def mask_data(data: Any, rules: Optional[List[MaskRule]] = None) -> Tuple[Any, List[str]]:
    """Return a masked copy of `data` and a log line per masked field.

    Only string values under a key matched by an enabled rule are masked;
    other matched values are left alone or descended into.
    """
    enabled = [r for r in (DEFAULT_MASK_RULES if rules is None else rules) if r.enabled]
    log: List[str] = []

    def mask(value: Any, path: str) -> Any:
        if isinstance(value, list):
            return [mask(item, f"{path}[{i}]") for i, item in enumerate(value)]
        if not isinstance(value, dict):
            return value

        out = {}
        for key, item in value.items():
            rule = next((r for r in enabled if r.pattern.search(key)), None)
            if rule is not None and isinstance(item, str):
                out[key] = mask_value(item, rule.mask_type, rule.replacement)
                log.append(f'{path}.{key}: applied rule "{rule.name}"')
            else:
                out[key] = mask(item, f"{path}.{key}")
        return out

    return mask(data, '$'), log
