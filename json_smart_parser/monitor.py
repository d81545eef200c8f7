from __future__ import annotations

import json
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
from uuid import uuid4

logger = getLogger(__name__)

MAX_RECORDS = 100
OPERATION_TYPES = ('parse', 'search', 'format', 'validate', 'generate', 'convert')

SLOW_PARSE_MS = 1000
LOW_SUCCESS_RATE = 90
LARGE_DATA_BYTES = 1024 * 1024


@dataclass
class OperationRecord:
    id: str
    type: str
    timestamp: int
    duration: float
    success: bool
    error: Optional[str] = None
    data_size: Optional[int] = None


@dataclass
class PerformanceMetrics:
    operation_history: List[OperationRecord] = field(default_factory=list)
    average_parse_time: float = 0.0
    total_operations: int = 0
    success_rate: float = 100.0


class PerformanceMonitor:
    """Newest-first record of timed operations, bounded at `max_records`."""

    def __init__(self, max_records: int = MAX_RECORDS, clock: Callable[[], float] = time.time):
        self.max_records = max_records
        self.clock = clock
        self._operations: List[OperationRecord] = []
        self._pending: Dict[str, Tuple[str, float]] = {}

    def start_operation(self, op_type: str) -> str:
        if op_type not in OPERATION_TYPES:
            raise ValueError(f"Unknown operation type: {op_type}")
        started = self.clock()
        op_id = f"{op_type}_{int(started * 1000)}_{uuid4().hex[:6]}"
        self._pending[op_id] = (op_type, started)
        return op_id

    def end_operation(
        self,
        op_id: str,
        success: bool,
        error: Optional[str] = None,
        data_size: Optional[int] = None,
    ) -> Optional[OperationRecord]:
        pending = self._pending.pop(op_id, None)
        if pending is None:
            logger.warning("Ignoring end of unknown operation %s", op_id)
            return None
        op_type, started = pending
        record = OperationRecord(
            id=op_id,
            type=op_type,
            timestamp=int(started * 1000),
            duration=(self.clock() - started) * 1000,
            success=success,
            error=error,
            data_size=data_size,
        )
        self._operations = ([record] + self._operations)[:self.max_records]
        return record

    @contextmanager
    def track(self, op_type: str, data_size: Optional[int] = None) -> Iterator[str]:
        """Time the enclosed block; an exception marks the operation failed and propagates."""
        op_id = self.start_operation(op_type)
        try:
            yield op_id
        except Exception as e:
            self.end_operation(op_id, False, str(e), data_size)
            raise
        self.end_operation(op_id, True, data_size=data_size)

    @property
    def operations(self) -> List[OperationRecord]:
        return list(self._operations)

    def get_metrics(self) -> PerformanceMetrics:
        ops = self._operations
        parse_ops = [op for op in ops if op.type == 'parse']
        avg_parse = sum(op.duration for op in parse_ops) / len(parse_ops) if parse_ops else 0.0
        success_rate = sum(1 for op in ops if op.success) / len(ops) * 100 if ops else 100.0
        return PerformanceMetrics(
            operation_history=list(ops),
            average_parse_time=avg_parse,
            total_operations=len(ops),
            success_rate=success_rate,
        )

    def clear_history(self) -> None:
        self._operations = []


def get_recommendations(metrics: PerformanceMetrics) -> List[str]:
    recommendations: List[str] = []
    if metrics.average_parse_time > SLOW_PARSE_MS:
        recommendations.append("Average parse time exceeds 1s; consider splitting large inputs.")
    if metrics.success_rate < LOW_SUCCESS_RATE:
        recommendations.append(f"Low success rate ({metrics.success_rate:.1f}%); check the input format.")
    recent = metrics.operation_history[:10]
    if any((op.data_size or 0) > LARGE_DATA_BYTES for op in recent):
        recommendations.append("Large inputs (>1MB) detected; consider processing them in batches.")
    return recommendations


def calculate_data_size(data: Any) -> int:
    """Size in UTF-8 bytes of a string, or of a value's compact JSON text."""
    if not isinstance(data, str):
        data = json.dumps(data, ensure_ascii=False, separators=(',', ':'))
    return len(data.encode('utf-8'))


def format_duration(ms: float) -> str:
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{ms / 1000:.2f}s"


def generate_metrics_report(metrics: PerformanceMetrics) -> str:
    lines = [
        '# Performance',
        '',
        f"- Operations: {metrics.total_operations}",
        f"- Success rate: {metrics.success_rate:.1f}%",
        f"- Average parse time: {format_duration(metrics.average_parse_time)}",
    ]
    recommendations = get_recommendations(metrics)
    if recommendations:
        lines += ['', '## Recommendations']
        lines += [f"- {r}" for r in recommendations]
    if metrics.operation_history:
        lines += ['', '## Recent operations']
        for op in metrics.operation_history[:10]:
            status = 'ok' if op.success else f"failed: {op.error}"
            lines.append(f"- {op.type} {format_duration(op.duration)} ({status})")
    return '\n'.join(lines)
