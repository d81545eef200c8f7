# tests/test_history.py

"""Tests for the parse history store"""

# Standard library imports
import json

# Local imports
from json_smart_parser.history import HISTORY_KEY
from json_smart_parser.history import HistoryStore
from json_smart_parser.storage import JsonFileBackend
from json_smart_parser.storage import MemoryBackend


class FailingBackend:
    def load(self, key):
        raise OSError("disk unavailable")

    def save(self, key, value):
        raise OSError("disk unavailable")

    def remove(self, key):
        raise OSError("disk unavailable")


def fixed_clock():
    return 1700000000.0


class TestHistoryStore:
    """Test history bookkeeping"""

    def test_newest_first(self):
        store = HistoryStore(MemoryBackend(), clock=fixed_clock)
        store.save("first", ["direct parse"])
        store.save("second")
        items = store.load()
        assert [item.raw for item in items] == ["second", "first"]
        assert items[1].steps == ["direct parse"]
        assert items[0].time == 1700000000000

    def test_duplicate_of_newest_skipped(self):
        store = HistoryStore(MemoryBackend())
        assert store.save("same") is not None
        assert store.save("same") is None
        assert len(store.load()) == 1

    def test_limits(self):
        store = HistoryStore(MemoryBackend(), max_items=3, max_raw_length=10)
        for i in range(5):
            store.save(f"raw{i}")
        assert [item.raw for item in store.load()] == ["raw4", "raw3", "raw2"]
        assert store.save("x" * 11) is None
        assert store.save("") is None

    def test_remove_and_clear(self):
        store = HistoryStore(MemoryBackend())
        first = store.save("a")
        store.save("b")
        store.remove(first.id)
        assert [item.raw for item in store.load()] == ["b"]
        store.clear()
        assert store.load() == []

    def test_separate_instances_do_not_share_state(self):
        one = HistoryStore(MemoryBackend())
        two = HistoryStore(MemoryBackend())
        one.save("only in one")
        assert two.load() == []

    def test_backend_failures_are_swallowed(self, caplog):
        store = HistoryStore(FailingBackend())
        assert store.load() == []
        store.save("raw")
        store.clear()
        assert "Could not" in caplog.text
        assert all(record.args for record in caplog.records)


class TestJsonFileBackend:
    """Test on-disk persistence"""

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "history.json")
        HistoryStore(JsonFileBackend(path)).save('{"a": 1}', ["direct parse"])
        items = HistoryStore(JsonFileBackend(path)).load()
        assert [item.raw for item in items] == ['{"a": 1}']
        with open(path, encoding="utf-8") as f:
            assert HISTORY_KEY in json.load(f)

    def test_missing_file_is_empty(self, tmp_path):
        assert HistoryStore(JsonFileBackend(str(tmp_path / "none.json"))).load() == []

    def test_corrupt_file_is_empty(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert HistoryStore(JsonFileBackend(str(path))).load() == []
