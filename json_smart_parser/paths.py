"""Conversions between path strings and path segments.

A path is a list of segments: `str` keys and `int` indices. Two textual
forms exist:

- bracket form: `$["key"][0]["nested"]`
- dot form: `$.key[0].nested`

A string key made only of digits renders the same as an integer index
in both forms, so `["3"]` and `[3]` produce the same path string and
read back as `[3]`.
"""
from __future__ import annotations

import json
import re
from typing import Iterator, List, Union

PathSegment = Union[str, int]

_DIGITS_RE = re.compile(r'[0-9]+')
_IDENTIFIER_RE = re.compile(r'[A-Za-z_$][A-Za-z0-9_$]*')


def is_identifier(segment: str) -> bool:
    return bool(_IDENTIFIER_RE.fullmatch(segment))


def _is_index(segment: PathSegment) -> bool:
    if isinstance(segment, bool):
        return False
    if isinstance(segment, int):
        return True
    return bool(_DIGITS_RE.fullmatch(str(segment)))


def _quote(segment: str) -> str:
    return json.dumps(segment, ensure_ascii=False)


def _bracket_groups(path: str) -> Iterator[str]:
    """Yield the text inside each `[...]` group.

    A `]` inside a quoted key does not close its group.
    """
    n = len(path)
    i = path.find('[')
    while i != -1:
        body = i + 1
        k = body
        while k < n and path[k].isspace():
            k += 1
        end = -1
        if k < n and path[k] in ('"', "'"):
            quote = path[k]
            k += 1
            while k < n and path[k] != quote:
                k += 2 if path[k] == '\\' else 1
            if k < n:
                end = path.find(']', k + 1)
        if end == -1:
            end = path.find(']', body)
        if end == -1:
            return
        yield path[body:end]
        i = path.find('[', end + 1)


def json_path_to_segments(path: str) -> List[PathSegment]:
    """Split a bracket-form path into segments.

    Text outside brackets (such as the leading `$`) is ignored. Quoted
    groups are read as JSON strings, falling back to stripping the quotes.
    Malformed input yields whatever segments the groups produce.
    """
    segments: List[PathSegment] = []
    for inner in _bracket_groups(path or ''):
        if _DIGITS_RE.fullmatch(inner):
            segments.append(int(inner))
            continue
        s = inner.strip()
        if s and s[0] in ('"', "'"):
            try:
                segments.append(json.loads(s))
            except ValueError:
                segments.append(s[1:-1])
        else:
            segments.append(inner)
    return segments


def segments_to_json_path(segments: List[PathSegment]) -> str:
    out = ['$']
    for seg in segments:
        if _is_index(seg):
            out.append(f"[{seg}]")
        else:
            out.append(f"[{_quote(str(seg))}]")
    return ''.join(out)


def segments_to_dot_path(segments: List[PathSegment]) -> str:
    out = ['$']
    for seg in segments:
        if _is_index(seg):
            out.append(f"[{seg}]")
        elif is_identifier(seg):
            out.append(f".{seg}")
        else:
            out.append(f"[{_quote(seg)}]")
    return ''.join(out)


def pointer_to_json_path(pointer: str) -> str:
    """Convert an RFC 6901 JSON Pointer (`/a/0/b`) to bracket form."""
    if not pointer:
        return '$'
    parts = [p.replace('~1', '/').replace('~0', '~') for p in pointer.split('/')[1:]]
    return segments_to_json_path(parts)
