from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .type_nodes import format_number

SENSITIVE_PATTERNS = [
    re.compile(r'password|pwd|secret|token|key|auth', re.IGNORECASE),
    re.compile(r'email|mail', re.IGNORECASE),
    re.compile(r'phone|mobile|tel', re.IGNORECASE),
    re.compile(r'ssn|id_?card|passport', re.IGNORECASE),
    re.compile(r'credit|card|cvv', re.IGNORECASE),
    re.compile(r'address|addr', re.IGNORECASE),
    re.compile(r'salary|income', re.IGNORECASE),
]


@dataclass
class DataStats:
    total_fields: int = 0
    total_objects: int = 0
    total_arrays: int = 0
    max_depth: int = 0
    type_distribution: Dict[str, int] = field(default_factory=dict)
    array_lengths: List[int] = field(default_factory=list)
    empty_fields: List[str] = field(default_factory=list)
    sensitive_fields: List[str] = field(default_factory=list)
    duplicate_values: Dict[str, int] = field(default_factory=dict)
    estimated_size: int = 0
    complexity_score: int = 0
    quality_score: int = 100
    issues: List[str] = field(default_factory=list)


def _leaf_type(value: Any) -> str:
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    return 'string'


def _leaf_text(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return format_number(value)
    return value


def analyze_json_data(data: Any) -> DataStats:
    """Count structure, empty and sensitive fields, and score a JSON value.

    Leaves and object keys both count towards `total_fields`. Empty
    fields are nulls, blank strings and empty containers. The quality
    score starts at 100 and loses points for many empty fields, sensitive
    key names, heavy value duplication and nesting deeper than 10.
    """
    stats = DataStats()
    seen: Dict[str, int] = {}

    def bump(kind: str) -> None:
        stats.type_distribution[kind] = stats.type_distribution.get(kind, 0) + 1

    def walk(value: Any, path: str, depth: int) -> None:
        stats.max_depth = max(stats.max_depth, depth)

        if value is None:
            bump('null')
            stats.empty_fields.append(path)
            return

        if isinstance(value, list):
            stats.total_arrays += 1
            stats.array_lengths.append(len(value))
            bump('array')
            if not value:
                stats.empty_fields.append(path)
            for i, item in enumerate(value):
                walk(item, f"{path}[{i}]", depth + 1)
            return

        if isinstance(value, dict):
            stats.total_objects += 1
            bump('object')
            if not value:
                stats.empty_fields.append(path)
            for key, item in value.items():
                stats.total_fields += 1
                if any(p.search(key) for p in SENSITIVE_PATTERNS):
                    stats.sensitive_fields.append(f"{path}.{key}")
                walk(item, f"{path}.{key}", depth + 1)
            return

        bump(_leaf_type(value))
        stats.total_fields += 1
        if isinstance(value, str) and not value.strip():
            stats.empty_fields.append(path)
        text = _leaf_text(value)
        seen[text] = seen.get(text, 0) + 1

    walk(data, '$', 0)

    stats.duplicate_values = {text: count for text, count in seen.items() if count > 1}
    stats.estimated_size = len(json.dumps(data, ensure_ascii=False, separators=(',', ':')))
    stats.complexity_score = min(100, stats.max_depth * 10 + stats.total_objects * 2 + stats.total_arrays * 3)

    if len(stats.empty_fields) > stats.total_fields * 0.1:
        stats.quality_score -= 20
        stats.issues.append(f"Too many empty fields ({len(stats.empty_fields)})")
    if stats.sensitive_fields:
        stats.quality_score -= 10
        stats.issues.append(f"Sensitive fields detected ({len(stats.sensitive_fields)})")
    if len(stats.duplicate_values) > stats.total_fields * 0.3:
        stats.quality_score -= 15
        stats.issues.append(f"Heavy value duplication ({len(stats.duplicate_values)} repeated values)")
    if stats.max_depth > 10:
        stats.quality_score -= 15
        stats.issues.append(f"Structure is deeply nested ({stats.max_depth} levels)")
    stats.quality_score = max(0, stats.quality_score)
    return stats


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def generate_stats_report(stats: DataStats) -> str:
    lines = [
        '# JSON Statistics',
        '',
        '## Overview',
        f"- Fields: {stats.total_fields}",
        f"- Objects: {stats.total_objects}",
        f"- Arrays: {stats.total_arrays}",
        f"- Max depth: {stats.max_depth}",
        f"- Estimated size: {format_bytes(stats.estimated_size)}",
        '',
        '## Type distribution',
    ]
    for kind, count in stats.type_distribution.items():
        share = count / stats.total_fields * 100 if stats.total_fields else 0.0
        lines.append(f"- {kind}: {count} ({share:.1f}%)")

    lines += ['', '## Quality', f"- Quality score: {stats.quality_score}/100", f"- Complexity: {stats.complexity_score}"]

    if stats.issues:
        lines += ['', '## Issues']
        lines += [f"- {issue}" for issue in stats.issues]
    if stats.empty_fields:
        lines += ['', '## Empty fields (first 10)']
        lines += [f"- {path}" for path in stats.empty_fields[:10]]
    if stats.sensitive_fields:
        lines += ['', '## Sensitive fields']
        lines += [f"- {path}" for path in stats.sensitive_fields]
    return '\n'.join(lines)
