# tests/test_monitor.py

"""Tests for the operation performance monitor"""

# Third party imports
import pytest

# Local imports
from json_smart_parser.monitor import PerformanceMetrics
from json_smart_parser.monitor import PerformanceMonitor
from json_smart_parser.monitor import calculate_data_size
from json_smart_parser.monitor import format_duration
from json_smart_parser.monitor import generate_metrics_report
from json_smart_parser.monitor import get_recommendations


class FakeClock:
    def __init__(self, now=10.0):
        self.now = now

    def __call__(self):
        return self.now


class TestPerformanceMonitor:
    """Test operation recording and metrics"""

    def test_duration_in_milliseconds(self):
        clock = FakeClock()
        monitor = PerformanceMonitor(clock=clock)
        op_id = monitor.start_operation("parse")
        clock.now += 0.25
        record = monitor.end_operation(op_id, True, data_size=42)
        assert record.type == "parse"
        assert record.timestamp == 10000
        assert record.duration == 250.0
        assert record.data_size == 42
        assert monitor.operations == [record]

    def test_records_are_bounded_newest_first(self):
        monitor = PerformanceMonitor(max_records=3)
        ids = [monitor.start_operation("search") for _ in range(5)]
        for op_id in ids:
            monitor.end_operation(op_id, True)
        assert [op.id for op in monitor.operations] == list(reversed(ids))[:3]

    def test_metrics(self):
        clock = FakeClock()
        monitor = PerformanceMonitor(clock=clock)
        for success in (True, True, False):
            op_id = monitor.start_operation("parse")
            clock.now += 0.1
            monitor.end_operation(op_id, success)
        op_id = monitor.start_operation("generate")
        monitor.end_operation(op_id, True)

        metrics = monitor.get_metrics()
        assert metrics.total_operations == 4
        assert metrics.success_rate == pytest.approx(75.0)
        assert metrics.average_parse_time == pytest.approx(100.0)

    def test_empty_metrics(self):
        metrics = PerformanceMonitor().get_metrics()
        assert metrics.total_operations == 0
        assert metrics.success_rate == 100.0
        assert metrics.average_parse_time == 0.0

    def test_track_marks_failure_and_reraises(self):
        monitor = PerformanceMonitor()
        with pytest.raises(ValueError):
            with monitor.track("convert"):
                raise ValueError("bad input")
        record = monitor.operations[0]
        assert not record.success
        assert record.error == "bad input"

    def test_track_success(self):
        monitor = PerformanceMonitor()
        with monitor.track("format", data_size=3):
            pass
        assert monitor.operations[0].success
        assert monitor.operations[0].data_size == 3

    def test_unknown_operation_type(self):
        with pytest.raises(ValueError):
            PerformanceMonitor().start_operation("sleep")

    def test_unknown_id_ignored(self, caplog):
        monitor = PerformanceMonitor()
        assert monitor.end_operation("parse_0_abc", True) is None
        assert monitor.operations == []
        assert "unknown operation" in caplog.text

    def test_clear_and_separate_instances(self):
        one = PerformanceMonitor()
        two = PerformanceMonitor()
        one.end_operation(one.start_operation("parse"), True)
        assert two.operations == []
        one.clear_history()
        assert one.operations == []


class TestRecommendations:
    """Test advice derived from metrics"""

    def test_healthy(self):
        assert get_recommendations(PerformanceMetrics()) == []

    def test_slow_and_failing(self):
        advice = get_recommendations(PerformanceMetrics(average_parse_time=1500, success_rate=50.0))
        assert len(advice) == 2
        assert "50.0%" in advice[1]

    def test_large_data(self):
        monitor = PerformanceMonitor()
        monitor.end_operation(monitor.start_operation("parse"), True, data_size=2 * 1024 * 1024)
        assert any("1MB" in line for line in get_recommendations(monitor.get_metrics()))

    def test_report(self):
        monitor = PerformanceMonitor()
        monitor.end_operation(monitor.start_operation("parse"), False, "boom")
        report = generate_metrics_report(monitor.get_metrics())
        assert "- Operations: 1" in report
        assert "failed: boom" in report
        assert "## Recommendations" in report


class TestHelpers:
    """Test size and duration formatting"""

    def test_data_size(self):
        assert calculate_data_size("é") == 2
        assert calculate_data_size({"a": 1}) == 7

    def test_format_duration(self):
        assert format_duration(250) == "250ms"
        assert format_duration(1500) == "1.50s"
