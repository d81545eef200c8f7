from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List

from .accessors import UNDEFINED

ADDED = 'added'
REMOVED = 'removed'
MODIFIED = 'modified'
UNCHANGED = 'unchanged'


@dataclass
class DiffResult:
    path: str
    type: str
    old_value: Any = UNDEFINED
    new_value: Any = UNDEFINED


def _kind(value: Any) -> str:
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return 'primitive'


def _same(a: Any, b: Any) -> bool:
    return json.dumps(a, ensure_ascii=False) == json.dumps(b, ensure_ascii=False)


def compare_json(old: Any, new: Any) -> List[DiffResult]:
    """List the differences between two JSON values, rooted at `$`.

    Array elements are compared by index (`path[i]`) and object members
    by key (`path.key`).
    """
    results: List[DiffResult] = []

    def compare(a: Any, b: Any, path: str) -> None:
        if _same(a, b):
            results.append(DiffResult(path, UNCHANGED))
            return

        if _kind(a) != _kind(b) or _kind(a) == 'primitive':
            results.append(DiffResult(path, MODIFIED, a, b))
            return

        if isinstance(a, list):
            for i in range(max(len(a), len(b))):
                child = f"{path}[{i}]"
                if i >= len(a):
                    results.append(DiffResult(child, ADDED, new_value=b[i]))
                elif i >= len(b):
                    results.append(DiffResult(child, REMOVED, old_value=a[i]))
                else:
                    compare(a[i], b[i], child)
            return

        keys = list(a) + [k for k in b if k not in a]
        for key in keys:
            child = f"{path}.{key}"
            if key not in a:
                results.append(DiffResult(child, ADDED, new_value=b[key]))
            elif key not in b:
                results.append(DiffResult(child, REMOVED, old_value=a[key]))
            else:
                compare(a[key], b[key], child)

    compare(old, new, '$')
    return results


def generate_diff_report(diffs: List[DiffResult]) -> str:
    counts = {t: sum(1 for d in diffs if d.type == t) for t in (ADDED, REMOVED, MODIFIED, UNCHANGED)}
    lines = [
        '# JSON Diff Report',
        '',
        '## Summary',
        f"- Added: {counts[ADDED]}",
        f"- Removed: {counts[REMOVED]}",
        f"- Modified: {counts[MODIFIED]}",
        f"- Unchanged: {counts[UNCHANGED]}",
        '',
        '## Changes',
        '',
    ]
    markers = {ADDED: '+', REMOVED: '-', MODIFIED: '~'}
    for d in diffs:
        if d.type == UNCHANGED:
            continue
        lines.append(f"{markers[d.type]} {d.path} ({d.type})")
        if d.old_value is not UNDEFINED:
            lines.append(f"  old: {json.dumps(d.old_value, ensure_ascii=False)}")
        if d.new_value is not UNDEFINED:
            lines.append(f"  new: {json.dumps(d.new_value, ensure_ascii=False)}")
    return '\n'.join(lines)
