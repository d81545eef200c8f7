from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

from .decoders import DecodeResult, decode_base64, decode_jwt, decode_url, extract_first_json

logger = getLogger(__name__)

STEP_DIRECT = "direct parse"
STEP_URL = "URL-decoded"
STEP_JWT = "JWT payload decoded"
STEP_BASE64 = "Base64-decoded"
STEP_QUERY = "parsed from URL query parameters"
STEP_LOG_TEXT = "extracted from log text"

_URL_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*:\S*$')
_DEFAULT_PORTS = {'http': 80, 'https': 443, 'ws': 80, 'wss': 443, 'ftp': 21}


class SmartParseError(ValueError):
    """Raised when no strategy recovers a JSON structure from the input."""

    def __init__(self, message: str, reasons: Optional[List[str]] = None):
        super().__init__(message)
        self.reasons = list(reasons or [])


@dataclass
class SmartParseOptions:
    auto_decode: bool = True
    sort_keys: bool = False
    parse_nested: bool = False


@dataclass
class SmartParseResult:
    data: Any
    steps: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParseAttempt:
    ok: bool
    value: Any = None
    reason: str = ''


def _load_json(text: Optional[str]) -> ParseAttempt:
    if text is None:
        return ParseAttempt(False, reason="nothing to parse")
    try:
        return ParseAttempt(True, json.loads(text.strip()))
    except (ValueError, RecursionError) as exc:
        return ParseAttempt(False, reason=str(exc))


def _load_decoded(decoded: DecodeResult) -> ParseAttempt:
    """Parse a decoder's output as JSON, then its URL-decoded form."""
    if not decoded.ok:
        return ParseAttempt(False, reason=decoded.reason)
    attempt = _load_json(decoded.value)
    if attempt.ok:
        return attempt
    unescaped = decode_url(decoded.value)
    return _load_json(unescaped.value if unescaped.ok else decoded.value)


def _load_unescaped(raw: str) -> ParseAttempt:
    decoded = decode_url(raw)
    if not decoded.ok:
        return ParseAttempt(False, reason=decoded.reason)
    return _load_json(decoded.value)


def try_parse_json(value: str) -> Any:
    """Parse `value` if it is bracketed like a JSON object or array.

    Anything else, including bracketed text that fails to parse, is
    returned unchanged.
    """
    if not isinstance(value, str):
        return value
    if (value.startswith('{') and value.endswith('}')) or (value.startswith('[') and value.endswith(']')):
        attempt = _load_json(value)
        if attempt.ok:
            return attempt.value
    return value


def parse_nested_json(value: Any) -> Any:
    # Recurses into each freshly parsed value rather than stopping after one
    # level per string, so doubly encoded JSON is unwrapped completely.
    if isinstance(value, str):
        parsed = try_parse_json(value)
        if parsed is value:
            return value
        return parse_nested_json(parsed)
    if isinstance(value, list):
        return [parse_nested_json(item) for item in value]
    if isinstance(value, dict):
        return {k: parse_nested_json(v) for k, v in value.items()}
    return value


def sort_keys_deep(value: Any) -> Any:
    if isinstance(value, list):
        return [sort_keys_deep(item) for item in value]
    if isinstance(value, dict):
        return {k: sort_keys_deep(value[k]) for k in sorted(value)}
    return value


def _decode_param_value(value: str) -> Any:
    strategies: List[Callable[[], ParseAttempt]] = [
        lambda: _load_json(value),
        lambda: _load_decoded(decode_url(value)),
        lambda: _load_decoded(decode_jwt(value)),
        lambda: _load_decoded(decode_base64(value)),
    ]
    for strategy in strategies:
        attempt = strategy()
        if attempt.ok:
            return attempt.value
    return value


def _params_to_object(query: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, raw_value in parse_qsl(query, keep_blank_values=True):
        candidate = _decode_param_value(raw_value)
        if key in out:
            prev = out[key]
            out[key] = prev + [candidate] if isinstance(prev, list) else [prev, candidate]
        else:
            out[key] = candidate
    return out


def _url_origin(scheme: str, parts) -> str:
    if not parts.netloc:
        return 'null'
    host = (parts.hostname or '').lower()
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


def parse_url_payload(raw: str) -> Optional[Dict[str, Any]]:
    """Build `{url, ...query, hash?}` from an absolute URL.

    Returns None when the text is not a URL or carries no parameters.
    """
    text = raw.strip()
    if not _URL_SCHEME_RE.match(text):
        return None
    try:
        parts = urlsplit(text)
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    path = parts.path or ('/' if parts.netloc else '')

    payload: Dict[str, Any] = {'url': _url_origin(scheme, parts) + path}
    payload.update(_params_to_object(parts.query))
    fragment = parts.fragment[1:] if parts.fragment.startswith('?') else parts.fragment
    hash_obj = _params_to_object(fragment) if fragment else {}
    if hash_obj:
        payload['hash'] = hash_obj

    if len(payload) > 1:
        return payload
    return None


def parse_smart(raw: str, options: Optional[SmartParseOptions] = None) -> SmartParseResult:
    """Recover a JSON value from possibly-encoded or noisy text.

    Strategies run in a fixed order and stop at the first success:
    direct parse, then (with auto_decode) URL, JWT payload and Base64
    decoding, then URL query parameters, then the first JSON structure
    embedded in surrounding text.
    """
    opt = options or SmartParseOptions()
    raw = raw or ''
    steps: List[str] = []
    reasons: List[str] = []

    def attempt_strategy(step: str, run: Callable[[], ParseAttempt]) -> Tuple[bool, Any]:
        attempt = run()
        if attempt.ok:
            logger.debug("Strategy '%s' succeeded", step)
            steps.append(step)
            return True, attempt.value
        logger.debug("Strategy '%s' failed: %s", step, attempt.reason)
        reasons.append(f"{step}: {attempt.reason}")
        return False, None

    def url_query() -> ParseAttempt:
        payload = parse_url_payload(raw)
        if payload is None:
            return ParseAttempt(False, reason="not a URL with query or fragment parameters")
        return ParseAttempt(True, payload)

    def log_text() -> ParseAttempt:
        sub = extract_first_json(raw)
        if sub is None:
            return ParseAttempt(False, reason="no embedded JSON structure found")
        return _load_json(sub)

    strategies: List[Tuple[str, Callable[[], ParseAttempt]]] = [(STEP_DIRECT, lambda: _load_json(raw))]
    if opt.auto_decode:
        strategies += [
            (STEP_URL, lambda: _load_unescaped(raw)),
            (STEP_JWT, lambda: _load_decoded(decode_jwt(raw))),
            (STEP_BASE64, lambda: _load_decoded(decode_base64(raw))),
        ]
    strategies += [(STEP_QUERY, url_query), (STEP_LOG_TEXT, log_text)]

    found = False
    data: Any = None
    for step, run in strategies:
        found, data = attempt_strategy(step, run)
        if found:
            break

    if not found:
        last = reasons[-1] if reasons else "empty input"
        raise SmartParseError(f"No valid JSON structure could be recovered ({last})", reasons)

    try:
        if opt.parse_nested:
            data = parse_nested_json(data)
        if opt.sort_keys:
            data = sort_keys_deep(data)
    except RecursionError as exc:
        raise SmartParseError("Parsed value is nested too deeply to normalize", [str(exc)]) from exc
    return SmartParseResult(data=data, steps=steps)


def locate_parse_error(raw: str) -> Optional[Tuple[int, int, str]]:
    """Line, column and message of a plain JSON parse failure, or None if it parses."""
    try:
        json.loads((raw or '').strip())
    except json.JSONDecodeError as exc:
        return exc.lineno, exc.colno, exc.msg
    except RecursionError:
        return 1, 1, "nesting too deep"
    return None
