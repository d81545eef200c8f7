from __future__ import annotations

import json
from typing import Any, List

from .type_nodes import format_number

MAX_SEARCH_RESULTS = 200


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


class _ResultsFull(Exception):
    pass


def search_json_paths(root: Any, term: str, limit: int = MAX_SEARCH_RESULTS) -> List[str]:
    """Find bracket-form paths whose key or value contains `term`.

    Matching is a case-insensitive substring test against object keys and
    leaf values; booleans and null are compared by their JSON text and
    numbers in the same form as flattened cells (`1.0` reads `1`).
    Objects and arrays match only through their key, and each path is
    reported at most once. Results are in depth-first pre-order and capped
    at `limit`.
    """
    if not term or limit <= 0:
        return []

    results: List[str] = []
    needle = term.lower()

    def record(path: str) -> None:
        results.append(path)
        if len(results) >= limit:
            raise _ResultsFull()

    def value_hit(value: Any) -> bool:
        return not _is_container(value) and needle in _stringify(value).lower()

    def walk(node: Any, path: str) -> None:
        if isinstance(node, list):
            for i, item in enumerate(node):
                child = f"{path}[{i}]"
                if _is_container(item):
                    walk(item, child)
                elif value_hit(item):
                    record(child)
            return

        for key, value in node.items():
            child = f"{path}[{json.dumps(key, ensure_ascii=False)}]"
            if needle in key.lower() or value_hit(value):
                record(child)
            if _is_container(value):
                walk(value, child)

    try:
        if _is_container(root):
            walk(root, '$')
        elif value_hit(root):
            record('$')
    except _ResultsFull:
        pass
    return results
