"""Per-device key/value storage for view preferences.

Values are strings, mirroring browser local storage. The preference subset
lives under the fixed ``ue5_pref_*`` keys.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from ..constants import FILTER_MODES, STORAGE_KEYS

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Minimal string key/value interface."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        """Factory reset: drop every stored key."""
        raise NotImplementedError

    def load_preferences(self) -> dict:
        search = self.get(STORAGE_KEYS["PREF_SEARCH"]) or ""
        mode = self.get(STORAGE_KEYS["PREF_FILTER"]) or "pending"
        if mode not in FILTER_MODES:
            logger.warning("Ignoring stored filter mode %r", mode)
            mode = "pending"
        history = self.get(STORAGE_KEYS["PREF_HISTORY"]) == "true"
        return {"search_term": search, "filter_mode": mode, "show_history": history}

    def save_preferences(self, search_term: str, filter_mode: str, show_history: bool) -> None:
        self.set(STORAGE_KEYS["PREF_SEARCH"], search_term)
        self.set(STORAGE_KEYS["PREF_FILTER"], filter_mode)
        self.set(STORAGE_KEYS["PREF_HISTORY"], "true" if show_history else "false")


class MemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = str(value)

    def clear(self) -> None:
        self.data.clear()


class JsonPreferenceStore(PreferenceStore):
    """Stores all keys in one JSON object on disk, rewritten on every ``set``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Preference file %s is unreadable or corrupt; starting empty", self.path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Preference file %s is not an object; starting empty", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._write()

    def clear(self) -> None:
        self._data = {}
        if self.path.exists():
            self.path.unlink()
