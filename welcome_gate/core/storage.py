"""
Preference Storage - namespaced key/value records on disk.

Each namespace is one JSON document. Commits replace the whole document
atomically (temp file + fsync + os.replace), so a concurrent reader sees
either the previous record or the new one, never a mix of both.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional
import json
import os
import tempfile
import threading

from loguru import logger

from .errors import StorageFailure


class Preferences(ABC):
    """A single preference namespace."""

    def __init__(self, namespace: str):
        self.namespace = namespace

    @abstractmethod
    def read(self) -> Optional[Dict[str, Any]]:
        """Return the stored record, or None when nothing was ever written."""

    @abstractmethod
    def commit(self, values: Dict[str, Any]) -> None:
        """Replace the stored record with `values` in one atomic step."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored record."""


class MemoryPreferences(Preferences):
    """In-process namespace; used by tests and when no writable disk is available."""

    def __init__(self, namespace: str, initial: Optional[Dict[str, Any]] = None):
        super().__init__(namespace)
        self._lock = threading.Lock()
        self._record = dict(initial) if initial is not None else None

    def read(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            return dict(self._record) if self._record is not None else None

    def commit(self, values: Dict[str, Any]) -> None:
        with self._lock:
            self._record = dict(values)

    def clear(self) -> None:
        with self._lock:
            self._record = None


class JsonFilePreferences(Preferences):
    """
    Namespace persisted as `<directory>/<filename>`.

    Usage:
        prefs = JsonFilePreferences("onboarding", Path("data/welcome_config.json"))
        prefs.commit({"is_first_launch": False})
        prefs.read()  # {"is_first_launch": False}
    """

    def __init__(self, namespace: str, path: Path):
        super().__init__(namespace)
        self.path = Path(path)
        self._lock = threading.Lock()

    def read(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            if not self.path.exists():
                return None
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    record = json.load(f)
            except (OSError, ValueError) as e:
                raise StorageFailure(self.namespace, "read", e) from e

        if not isinstance(record, dict):
            raise StorageFailure(self.namespace, "read", ValueError("record is not an object"))
        return record

    def commit(self, values: Dict[str, Any]) -> None:
        with self._lock:
            tmp_path = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(
                    prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(values, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
                tmp_path = None
            except (OSError, TypeError, ValueError) as e:
                raise StorageFailure(self.namespace, "write", e) from e
            finally:
                if tmp_path and os.path.exists(tmp_path):
                    os.unlink(tmp_path)

        logger.debug(f"Committed {len(values)} keys to '{self.namespace}' ({self.path})")

    def clear(self) -> None:
        with self._lock:
            try:
                self.path.unlink(missing_ok=True)
            except OSError as e:
                raise StorageFailure(self.namespace, "clear", e) from e
