from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from logging import getLogger
from typing import Callable, List, Optional
from uuid import uuid4

logger = getLogger(__name__)

HISTORY_KEY = "parse_history_v1"
MAX_ITEMS = 20
MAX_RAW_LENGTH = 500_000


@dataclass
class HistoryItem:
    id: str
    raw: str
    time: int
    steps: List[str] = field(default_factory=list)


class HistoryStore:
    """Most-recent-first list of parsed inputs, kept in a caller-supplied backend.

    Storage errors are logged and never raised; a failed load reads as
    an empty history.
    """

    def __init__(
        self,
        backend,
        max_items: int = MAX_ITEMS,
        max_raw_length: int = MAX_RAW_LENGTH,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.max_items = max_items
        self.max_raw_length = max_raw_length
        self.clock = clock

    def load(self) -> List[HistoryItem]:
        try:
            stored = self.backend.load(HISTORY_KEY)
        except (OSError, ValueError) as e:
            logger.warning("Could not load history: %s", e)
            return []
        if not isinstance(stored, list):
            return []
        items: List[HistoryItem] = []
        for entry in stored:
            if isinstance(entry, dict) and 'id' in entry and 'raw' in entry:
                items.append(HistoryItem(
                    id=entry['id'],
                    raw=entry['raw'],
                    time=entry.get('time', 0),
                    steps=list(entry.get('steps') or []),
                ))
        return items

    def _store(self, items: List[HistoryItem]) -> None:
        try:
            self.backend.save(HISTORY_KEY, [asdict(item) for item in items])
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save history: %s", e)

    def save(self, raw: str, steps: Optional[List[str]] = None) -> Optional[HistoryItem]:
        """Record `raw` as the newest entry.

        Empty or oversized input is skipped, as is input identical to the
        current newest entry.
        """
        if not raw or len(raw) > self.max_raw_length:
            return None
        items = self.load()
        if items and items[0].raw == raw:
            return None
        now_ms = int(self.clock() * 1000)
        item = HistoryItem(id=f"{now_ms}_{uuid4().hex[:6]}", raw=raw, time=now_ms, steps=list(steps or []))
        self._store(([item] + items)[:self.max_items])
        return item

    def remove(self, item_id: str) -> None:
        self._store([item for item in self.load() if item.id != item_id])

    def clear(self) -> None:
        try:
            self.backend.remove(HISTORY_KEY)
        except OSError as e:
            logger.warning("Could not clear history: %s", e)
