from __future__ import annotations

import json
import os
from typing import Any, Dict


class MemoryBackend:
    """Key-value storage held in a dict."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def load(self, key: str) -> Any:
        return self._data.get(key)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileBackend:
    """Key-value storage persisted as a single JSON document on disk."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            doc = json.load(f)
        return doc if isinstance(doc, dict) else {}

    def _write(self, doc: Dict[str, Any]) -> None:
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)

    def load(self, key: str) -> Any:
        return self._read().get(key)

    def save(self, key: str, value: Any) -> None:
        doc = self._read()
        doc[key] = value
        self._write(doc)

    def remove(self, key: str) -> None:
        doc = self._read()
        if key in doc:
            del doc[key]
            self._write(doc)
