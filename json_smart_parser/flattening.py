from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .accessors import UNDEFINED, get_by_segments
from .paths import json_path_to_segments
from .type_nodes import format_number


@dataclass
class ExtractOptions:
    # Expand the primary array column into one row per element.
    expand_arrays: bool = False
    joiner: str = ","
    placeholder: str = ""
    # Column whose array drives expansion; defaults to the longest array.
    primary_index: Optional[int] = None


@dataclass
class ExtractStats:
    expanded: bool = False
    primary_len: int = 0
    total_rows: int = 0


@dataclass
class ExtractResult:
    header: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)
    stats: ExtractStats = field(default_factory=ExtractStats)


def _scalar_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))


def cell_to_string(value: Any, joiner: str = ",", placeholder: str = "") -> str:
    if value is None or value is UNDEFINED:
        return placeholder
    if isinstance(value, list):
        return joiner.join(_scalar_text(v) for v in value)
    return _scalar_text(value)


def extract_to_table(root: Any, paths: List[str], options: Optional[ExtractOptions] = None) -> ExtractResult:
    """Pull the values at several bracket-form paths into a table.

    Without expansion the table has one row. With `expand_arrays`, the
    primary array column yields one row per element; array columns of the
    same length expand alongside it and every other column is repeated.
    """
    opt = options or ExtractOptions()
    header = [p.strip() for p in paths if p and p.strip()]
    if not header:
        return ExtractResult()

    values = [get_by_segments(root, json_path_to_segments(p)) for p in header]

    primary_len = 1
    if opt.expand_arrays:
        if opt.primary_index is not None and 0 <= opt.primary_index < len(values):
            pv = values[opt.primary_index]
            primary_len = len(pv) if isinstance(pv, list) else 1
        else:
            primary_len = max(len(v) if isinstance(v, list) else 1 for v in values)

    rows: List[List[str]] = []
    if primary_len <= 1:
        rows.append([cell_to_string(v, opt.joiner, opt.placeholder) for v in values])
    else:
        for i in range(primary_len):
            row: List[str] = []
            for v in values:
                if isinstance(v, list) and len(v) == primary_len:
                    row.append(cell_to_string(v[i], opt.joiner, opt.placeholder))
                else:
                    row.append(cell_to_string(v, opt.joiner, opt.placeholder))
            rows.append(row)

    stats = ExtractStats(expanded=primary_len > 1, primary_len=primary_len, total_rows=len(rows))
    return ExtractResult(header=header, rows=rows, stats=stats)


def to_csv(header: List[str], rows: List[List[str]]) -> str:
    """Render a table as CSV with every cell quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(header)
    writer.writerows(rows)
    text = buf.getvalue()
    return text[:-1] if text.endswith('\n') else text


def to_records(header: List[str], rows: List[List[str]]) -> List[Dict[str, str]]:
    return [dict(zip(header, row)) for row in rows]
