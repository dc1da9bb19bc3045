"""Local key/value storage and the current server selection."""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

from ..config import Config

__all__ = ["LocalRepository", "CurrentServerRepository"]

logger = logging.getLogger(__name__)


class LocalRepository:
    """Small JSON-file backed key/value store.

    Holds non-secret app state: the push token handed over by the push
    subsystem, the last authenticated username, the current server and
    cached server settings. Auth tokens live in the keychain instead.
    """

    KEY_PUSH_TOKEN = "KEY_PUSH_TOKEN"
    USERNAME_KEY = "my_username"
    CURRENT_SERVER_KEY = "current_server"

    def __init__(self, path: Optional[Path] = None):
        """Initialize the repository.

        Args:
            path: JSON file to store values in (defaults to the app data dir)
        """
        if path is None:
            path = Config.get_data_dir() / "local.json"
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read local store {self.path}: {e}")
            return {}

    def _write(self, data: dict) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".tmp")
            with open(tmp, "w") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self.path)
            return True
        except OSError as e:
            logger.error(f"Failed to write local store {self.path}: {e}")
            return False

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._read().get(key)

    def save(self, key: str, value: Any) -> bool:
        """Store ``value`` under ``key``. A None value removes the key."""
        with self._lock:
            data = self._read()
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
            return self._write(data)

    def delete(self, key: str) -> bool:
        return self.save(key, None)


class CurrentServerRepository:
    """Which server the user is currently signing in to."""

    def __init__(self, local: LocalRepository):
        self.local = local

    def get(self) -> Optional[str]:
        return self.local.get(LocalRepository.CURRENT_SERVER_KEY) or None

    def save(self, server: str) -> None:
        self.local.save(LocalRepository.CURRENT_SERVER_KEY, server.rstrip("/"))
        logger.info(f"Current server set to {server}")

    def clear(self) -> None:
        self.local.delete(LocalRepository.CURRENT_SERVER_KEY)
