"""Core logic for the JSON Smart Parser.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- recover JSON from encoded or noisy text (URL, Base64, JWT, query strings, logs)
- convert, resolve and search JSONPath-style paths
- infer TypeScript declarations from decoded values
- extract columns, diff documents and keep a parse history
- summarize and mask documents, time operations and keep UI preferences
"""
from __future__ import annotations

from .accessors import UNDEFINED, get_by_path, get_by_segments
from .masking import DEFAULT_MASK_RULES, MaskRule, mask_data
from .monitor import PerformanceMonitor
from .parser import SmartParseError, SmartParseOptions, SmartParseResult, parse_smart
from .paths import json_path_to_segments, pointer_to_json_path, segments_to_dot_path, segments_to_json_path
from .search import search_json_paths
from .settings import SettingsStore
from .stats import analyze_json_data, generate_stats_report
from .ts_generator import generate_ts_from_json
from .type_nodes import TsGenOptions

__all__ = [
    "DEFAULT_MASK_RULES",
    "MaskRule",
    "PerformanceMonitor",
    "SettingsStore",
    "UNDEFINED",
    "SmartParseError",
    "SmartParseOptions",
    "SmartParseResult",
    "TsGenOptions",
    "analyze_json_data",
    "generate_stats_report",
    "generate_ts_from_json",
    "get_by_path",
    "get_by_segments",
    "json_path_to_segments",
    "mask_data",
    "parse_smart",
    "pointer_to_json_path",
    "search_json_paths",
    "segments_to_dot_path",
    "segments_to_json_path",
]
