"""
Local key-value storage for reader preferences.

This module defines the KeyValueStore contract used for likes and comments,
with an in-memory implementation for tests and a JSON file implementation
for the command line reader.
"""

import json
import logging
import os
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """
    Protocol for string key-value stores.

    Values are opaque strings; callers own their serialization.
    """

    def get(self, key: str) -> Optional[str]:
        """Returns the stored value or None."""

    def set(self, key: str, value: str) -> None:
        """Stores a value, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Removes a key if present."""


class MemoryStore:
    """Keeps values for the lifetime of the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Persists values to a single JSON object on disk."""

    def __init__(self, path: str):
        self.path = path
        self._data: Dict[str, str] = {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                self._data = {str(k): str(v) for k, v in loaded.items()}
            else:
                logger.warning("Ignoring malformed store at %s.", path)
        except FileNotFoundError:
            logger.debug("No local store at %s yet.", path)
        except json.JSONDecodeError as e:
            logger.warning("Local store at %s is corrupt: %s", path, e)

    def _flush(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()
