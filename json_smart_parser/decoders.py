from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import unquote

_BASE64_RE = re.compile(r'^[A-Za-z0-9+/_-]+={0,2}$')
_WHITESPACE_RE = re.compile(r'\s+')
_MALFORMED_PERCENT_RE = re.compile(r'%(?![0-9A-Fa-f]{2})')


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of a single decode attempt.

    `value` is set when `ok` is true; `reason` explains a failure.
    """

    ok: bool
    value: Optional[str] = None
    reason: str = ''

    @classmethod
    def success(cls, value: str) -> 'DecodeResult':
        return cls(True, value, '')

    @classmethod
    def failure(cls, reason: str) -> 'DecodeResult':
        return cls(False, None, reason)


def is_likely_base64(s: str) -> bool:
    stripped = _WHITESPACE_RE.sub('', s or '')
    return bool(_BASE64_RE.match(stripped)) and len(stripped) % 4 == 0


def base64_to_utf8(b64: str) -> str:
    """Decode standard or URL-safe Base64 into text.

    Missing padding is added. Bytes that are not valid UTF-8 come back
    as Latin-1 text instead of failing.
    """
    norm = _WHITESPACE_RE.sub('', b64).replace('-', '+').replace('_', '/')
    pad = '=' * ((4 - (len(norm) % 4 or 4)) % 4)
    raw = base64.b64decode(norm + pad, validate=True)
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        return raw.decode('latin-1')


def _percent_decode(s: str) -> str:
    # decodeURIComponent semantics: a lone '%' or a non-UTF-8 sequence is an error.
    if _MALFORMED_PERCENT_RE.search(s):
        raise ValueError(f"malformed percent sequence in {s[:40]!r}")
    return unquote(s, encoding='utf-8', errors='strict')


def decode_url(s: str) -> DecodeResult:
    try:
        once = _percent_decode(s)
        if '%' in once:
            return DecodeResult.success(_percent_decode(once))
        return DecodeResult.success(once)
    except (ValueError, UnicodeDecodeError) as exc:
        return DecodeResult.failure(f"URL decode failed: {exc}")


def decode_base64(s: str) -> DecodeResult:
    if not is_likely_base64(s):
        return DecodeResult.failure("not Base64-shaped")
    try:
        return DecodeResult.success(base64_to_utf8(s))
    except (binascii.Error, ValueError) as exc:
        return DecodeResult.failure(f"Base64 decode failed: {exc}")


def decode_jwt(s: str) -> DecodeResult:
    """Peek at the payload segment of a compact JWT. The signature is not checked."""
    parts = s.split('.')
    if len(parts) != 3:
        return DecodeResult.failure(f"expected 3 JWT segments, got {len(parts)}")
    try:
        return DecodeResult.success(base64_to_utf8(parts[1]))
    except (binascii.Error, ValueError) as exc:
        return DecodeResult.failure(f"JWT payload decode failed: {exc}")


def try_url_decode(s: str) -> Optional[str]:
    return decode_url(s).value


def try_base64_decode(s: str) -> Optional[str]:
    return decode_base64(s).value


def try_jwt_decode(s: str) -> Optional[str]:
    return decode_jwt(s).value


def _is_json(candidate: str) -> bool:
    try:
        json.loads(candidate)
    except (ValueError, RecursionError):
        return False
    return True


def extract_first_json(text: str) -> Optional[str]:
    """Return the first complete, parseable JSON object or array embedded in text.

    Brackets inside single- or double-quoted strings are ignored and
    backslash escapes are honoured. A mismatched closing bracket resets
    the scan; a balanced candidate that fails to parse is skipped and the
    scan continues.
    """
    if not text:
        return None

    start = -1
    stack: List[str] = []
    in_str = False
    str_ch = ''
    esc = False

    for i, ch in enumerate(text):
        if in_str:
            if esc:
                esc = False
            elif ch == '\\':
                esc = True
            elif ch == str_ch:
                in_str = False
                str_ch = ''
            continue

        if ch in ('"', "'"):
            in_str = True
            str_ch = ch
            continue

        if ch in ('{', '['):
            if not stack:
                start = i
            stack.append(ch)
            continue

        if ch in ('}', ']'):
            last = stack[-1] if stack else None
            if (last == '{' and ch == '}') or (last == '[' and ch == ']'):
                stack.pop()
                if not stack and start != -1:
                    candidate = text[start:i + 1]
                    if _is_json(candidate):
                        return candidate
            else:
                stack.clear()
                start = -1

    return None
