from __future__ import annotations

import json
import os
import tempfile
from contextlib import nullcontext
from logging import getLogger
from typing import Any, List

import gradio as gr

from .accessors import UNDEFINED, get_by_segments
from .diff import compare_json, generate_diff_report
from .flattening import ExtractOptions, extract_to_table, to_csv, to_records
from .history import HistoryStore
from .io_utils import read_text_content
from .masking import DEFAULT_MASK_RULES, mask_data
from .monitor import PerformanceMonitor, calculate_data_size, generate_metrics_report
from .parser import SmartParseError, SmartParseOptions, locate_parse_error, parse_smart
from .paths import json_path_to_segments, pointer_to_json_path, segments_to_dot_path
from .search import MAX_SEARCH_RESULTS, search_json_paths
from .settings import SettingsStore
from .stats import analyze_json_data, generate_stats_report
from .ts_generator import generate_ts_from_json
from .type_nodes import TsGenOptions

logger = getLogger(__name__)


def format_parse_error(raw: str, exc: Exception) -> str:
    location = locate_parse_error(raw)
    if location is None:
        return f"Error: {exc}"
    line, column, message = location
    return f"Error: {exc}\nJSON syntax error at line {line}, column {column}: {message}"


def load_file_handler(file_obj):
    try:
        return read_text_content(file_obj), "File loaded."
    except (OSError, ValueError) as e:
        return "", f"Error reading file: {str(e)}"


def parse_input_handler(
    raw_text,
    auto_decode,
    sort_keys,
    parse_nested,
    history: HistoryStore = None,
    monitor: PerformanceMonitor = None,
):
    if not raw_text or not raw_text.strip():
        return None, "", "Nothing to parse."

    options = SmartParseOptions(auto_decode=bool(auto_decode), sort_keys=bool(sort_keys), parse_nested=bool(parse_nested))
    tracking = monitor.track('parse', calculate_data_size(raw_text)) if monitor is not None else nullcontext()
    try:
        with tracking:
            result = parse_smart(raw_text, options)
    except SmartParseError as e:
        return None, "", format_parse_error(raw_text, e)

    if history is not None:
        history.save(raw_text, result.steps)

    status = "Parsed: " + " -> ".join(result.steps)
    try:
        pretty = json.dumps(result.data, indent=2, ensure_ascii=False)
    except RecursionError:
        return result.data, "", status + " (too deeply nested to display)"
    return result.data, pretty, status


def resolve_path_input(path: str) -> List[Any]:
    """Accept either a bracket-form path or a JSON Pointer."""
    path = (path or '').strip()
    if path.startswith('/'):
        path = pointer_to_json_path(path)
    return json_path_to_segments(path)


def path_lookup_handler(data, path):
    if data is None:
        return None, "", "No data loaded."
    segments = resolve_path_input(path)
    value = get_by_segments(data, segments)
    if value is UNDEFINED:
        return None, segments_to_dot_path(segments), "Path not found."
    return value, segments_to_dot_path(segments), "OK"


def search_handler(data, term):
    if data is None:
        return gr.update(choices=[], value=None), "No data loaded."
    results = search_json_paths(data, (term or '').strip())
    status = f"Found {len(results)} matches."
    if len(results) >= MAX_SEARCH_RESULTS:
        status = f"Showing the first {MAX_SEARCH_RESULTS} matches."
    return gr.update(choices=results, value=results[0] if results else None), status


def _enum_mode(enabled):
    return 'auto' if enabled else False


def generate_ts_handler(data, root_name, sample, enum_strings, enum_max, enum_max_len, enum_numbers, enum_num_max, detect_date):
    if data is None:
        return "// No data loaded."
    options = TsGenOptions(
        root_name=(root_name or "Root").strip() or "Root",
        array_sample=int(sample or 100),
        enum_strings=_enum_mode(enum_strings),
        enum_max_unique=int(enum_max or 8),
        enum_max_length=int(enum_max_len or 32),
        enum_numbers=_enum_mode(enum_numbers),
        enum_num_max_unique=int(enum_num_max or 8),
        detect_date=bool(detect_date),
    )
    return generate_ts_from_json(data, options)


def _split_paths(paths_text) -> List[str]:
    return [line.strip() for line in (paths_text or '').splitlines() if line.strip()]


def _extract(data, paths_text, expand, joiner, placeholder):
    options = ExtractOptions(expand_arrays=bool(expand), joiner=joiner if joiner is not None else ",", placeholder=placeholder or "")
    return extract_to_table(data, _split_paths(paths_text), options)


def extract_preview_handler(data, paths_text, expand, joiner, placeholder, limit: int = 3):
    if data is None:
        return None, "No data loaded."
    result = _extract(data, paths_text, expand, joiner, placeholder)
    if not result.header:
        return None, "No paths given."
    preview = to_records(result.header, result.rows[:max(1, int(limit))])
    return preview, f"Rows: {result.stats.total_rows}" + (" (expanded)" if result.stats.expanded else "")


def export_table_handler(data, paths_text, expand, joiner, placeholder, output_format, file_name):
    if data is None:
        return None, "No data loaded."

    result = _extract(data, paths_text, expand, joiner, placeholder)
    if not result.header:
        return None, "No paths given."

    if not file_name or not file_name.strip():
        file_name = "extract"

    ext = f".{output_format.lower()}"
    if not file_name.lower().endswith(ext):
        file_name += ext

    temp_dir = tempfile.gettempdir()
    path = os.path.join(temp_dir, file_name)

    try:
        if output_format == "CSV":
            with open(path, 'w', newline='', encoding='utf-8') as f:
                f.write(to_csv(result.header, result.rows))
        else:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(to_records(result.header, result.rows), f, indent=2, ensure_ascii=False)

        return path, f"Export successful! Saved to {path}"
    except OSError as e:
        logger.error("Export to %s failed: %s", path, e)
        return None, f"Error during export: {str(e)}"


def diff_handler(old_raw, new_raw, auto_decode=True):
    options = SmartParseOptions(auto_decode=bool(auto_decode))
    try:
        old = parse_smart(old_raw or '', options).data
    except SmartParseError as e:
        return f"Left side: {format_parse_error(old_raw or '', e)}"
    try:
        new = parse_smart(new_raw or '', options).data
    except SmartParseError as e:
        return f"Right side: {format_parse_error(new_raw or '', e)}"
    return generate_diff_report(compare_json(old, new))


def history_choices_handler(history: HistoryStore):
    items = history.load()
    choices = [(f"{item.raw[:60]}", item.id) for item in items]
    return gr.update(choices=choices, value=None)


def load_history_item_handler(item_id, history: HistoryStore):
    for item in history.load():
        if item.id == item_id:
            return item.raw
    return gr.update()


def remove_history_item_handler(item_id, history: HistoryStore):
    if item_id:
        history.remove(item_id)
    return history_choices_handler(history)


def clear_history_handler(history: HistoryStore):
    history.clear()
    return history_choices_handler(history)


def stats_handler(data):
    if data is None:
        return "No data loaded."
    return generate_stats_report(analyze_json_data(data))


def mask_rule_choices():
    return [(rule.name, rule.id) for rule in DEFAULT_MASK_RULES]


def mask_handler(data, rule_ids):
    if data is None:
        return None, "No data loaded."
    selected = set(rule_ids or [])
    rules = [rule for rule in DEFAULT_MASK_RULES if rule.id in selected]
    masked, log = mask_data(data, rules)
    return masked, "\n".join(log) if log else "Nothing masked."


def metrics_handler(monitor: PerformanceMonitor):
    return generate_metrics_report(monitor.get_metrics())


def clear_metrics_handler(monitor: PerformanceMonitor):
    monitor.clear_history()
    return metrics_handler(monitor)


def load_settings_handler(settings: SettingsStore):
    prefs = settings.load()
    return (
        bool(prefs.get("auto_decode", True)),
        bool(prefs.get("sort_keys", False)),
        bool(prefs.get("parse_nested", False)),
        prefs.get("ts_root_name") or "Root",
    )


def save_settings_handler(auto_decode, sort_keys, parse_nested, ts_root_name, settings: SettingsStore):
    settings.save({
        "auto_decode": bool(auto_decode),
        "sort_keys": bool(sort_keys),
        "parse_nested": bool(parse_nested),
        "ts_root_name": (ts_root_name or "Root").strip() or "Root",
    })
    return "Settings saved."
