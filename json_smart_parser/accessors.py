from __future__ import annotations

from typing import Any, List

from .paths import PathSegment, json_path_to_segments


class _Undefined:
    """Marker for a location that does not exist (distinct from JSON null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'UNDEFINED'


UNDEFINED = _Undefined()


def _step(node: Any, segment: PathSegment) -> Any:
    if isinstance(node, dict):
        return node.get(str(segment), UNDEFINED)
    if isinstance(node, list):
        if isinstance(segment, bool):
            return UNDEFINED
        if isinstance(segment, int):
            index = segment
        elif isinstance(segment, str) and segment.isascii() and segment.isdigit():
            index = int(segment)
        else:
            return UNDEFINED
        if 0 <= index < len(node):
            return node[index]
        return UNDEFINED
    return UNDEFINED


def get_by_segments(data: Any, segments: List[PathSegment]) -> Any:
    """Walk `data` along `segments`.

    Returns UNDEFINED when an intermediate node is null, is not a
    container, or lacks the key or index. Never raises.
    """
    val = data
    for segment in segments:
        if val is None or val is UNDEFINED:
            return UNDEFINED
        val = _step(val, segment)
    return val


def get_by_path(data: Any, path: str) -> Any:
    """Retrieve a value using a bracket-form path such as `$["a"][0]`."""
    return get_by_segments(data, json_path_to_segments(path))
