from __future__ import annotations

from logging import getLogger
from typing import Any, Dict, Optional

logger = getLogger(__name__)

SETTINGS_KEY = "ui_prefs_v1"

DEFAULT_PREFS: Dict[str, Any] = {
    "auto_decode": True,
    "sort_keys": False,
    "parse_nested": False,
    "ts_root_name": "Root",
}


class SettingsStore:
    """UI preferences kept in a caller-supplied backend.

    Saved preferences are merged over what is already stored. Storage
    errors are logged and never raised; a failed load reads as no saved
    preferences.
    """

    def __init__(self, backend, defaults: Optional[Dict[str, Any]] = None):
        self.backend = backend
        self.defaults = dict(DEFAULT_PREFS if defaults is None else defaults)

    def _stored(self) -> Dict[str, Any]:
        try:
            value = self.backend.load(SETTINGS_KEY)
        except (OSError, ValueError) as e:
            logger.warning("Could not load settings: %s", e)
            return {}
        return value if isinstance(value, dict) else {}

    def load(self) -> Dict[str, Any]:
        prefs = dict(self.defaults)
        prefs.update(self._stored())
        return prefs

    def save(self, prefs: Dict[str, Any]) -> Dict[str, Any]:
        merged = self._stored()
        merged.update(prefs)
        try:
            self.backend.save(SETTINGS_KEY, merged)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save settings: %s", e)
        result = dict(self.defaults)
        result.update(merged)
        return result

    def reset(self) -> None:
        try:
            self.backend.remove(SETTINGS_KEY)
        except OSError as e:
            logger.warning("Could not reset settings: %s", e)
