# tests/test_settings.py

"""Tests for the UI preferences store"""

# Local imports
from json_smart_parser.settings import DEFAULT_PREFS
from json_smart_parser.settings import SETTINGS_KEY
from json_smart_parser.settings import SettingsStore
from json_smart_parser.storage import JsonFileBackend
from json_smart_parser.storage import MemoryBackend


class FailingBackend:
    def load(self, key):
        raise OSError("disk unavailable")

    def save(self, key, value):
        raise OSError("disk unavailable")

    def remove(self, key):
        raise OSError("disk unavailable")


class TestSettingsStore:
    """Test loading, merging and resetting preferences"""

    def test_defaults(self):
        assert SettingsStore(MemoryBackend()).load() == DEFAULT_PREFS

    def test_save_merges(self):
        backend = MemoryBackend()
        store = SettingsStore(backend)
        store.save({"sort_keys": True})
        result = store.save({"ts_root_name": "Payload"})
        assert result["sort_keys"] is True
        assert result["ts_root_name"] == "Payload"
        assert result["auto_decode"] is True
        assert backend.load(SETTINGS_KEY) == {"sort_keys": True, "ts_root_name": "Payload"}

    def test_reset(self):
        store = SettingsStore(MemoryBackend())
        store.save({"sort_keys": True})
        store.reset()
        assert store.load() == DEFAULT_PREFS

    def test_non_dict_value_ignored(self):
        backend = MemoryBackend()
        backend.save(SETTINGS_KEY, ["not", "prefs"])
        assert SettingsStore(backend).load() == DEFAULT_PREFS

    def test_custom_defaults(self):
        assert SettingsStore(MemoryBackend(), defaults={"dark_mode": False}).load() == {"dark_mode": False}

    def test_backend_failures_are_swallowed(self, caplog):
        store = SettingsStore(FailingBackend())
        assert store.load() == DEFAULT_PREFS
        assert store.save({"sort_keys": True})["sort_keys"] is True
        store.reset()
        assert "Could not" in caplog.text

    def test_persists_on_disk(self, tmp_path):
        path = str(tmp_path / "settings.json")
        SettingsStore(JsonFileBackend(path)).save({"parse_nested": True})
        assert SettingsStore(JsonFileBackend(path)).load()["parse_nested"] is True
