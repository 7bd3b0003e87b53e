"""
Key-value storage for session summaries and resume data.

Entries are short-lived: a summary is written when a session ends and
consumed once by report generation.
"""
import os
import re
import json
import logging
import threading
from typing import Dict, Any, Optional

logger = logging.getLogger("session_store")

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class SessionStore:
    """Interface for the session key-value store."""

    def save(self, key: str, value: Dict[str, Any]) -> None:
        raise NotImplementedError

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def pop(self, key: str) -> Optional[Dict[str, Any]]:
        """Load and remove an entry."""
        value = self.load(key)
        if value is not None:
            self.delete(key)
        return value

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def __contains__(self, key: str) -> bool:
        return self.load(key) is not None


class MemorySessionStore(SessionStore):
    """Process-local store; values are JSON round-tripped so callers never share state."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, key: str, value: Dict[str, Any]) -> None:
        encoded = json.dumps(value)
        with self._lock:
            self._data[key] = encoded
        logger.debug(f"Stored {key} in memory")

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            encoded = self._data.get(key)
        return json.loads(encoded) if encoded is not None else None

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self):
        with self._lock:
            return list(self._data)


class FileSessionStore(SessionStore):
    """One JSON file per key under ``directory``."""

    def __init__(self, directory: str = "./_interviews"):
        self.directory = directory
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json")

    def save(self, key: str, value: Dict[str, Any]) -> None:
        path = self._path(key)
        tmp_path = path + ".tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
        logger.info(f"Saved {key} to {path}")

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {key} from {path}: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object entry for {key}")
            return None
        return data

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass

    def keys(self):
        return [name[:-5] for name in sorted(os.listdir(self.directory)) if name.endswith('.json')]
