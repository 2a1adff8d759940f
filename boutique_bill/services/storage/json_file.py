"""
JSON File Storage

Persists the key/value store as one small JSON object on disk. Writes go
to a temporary file first and are then moved into place, so a crash
mid-write never leaves a half-written store behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from boutique_bill.services.storage.interface import (
    CorruptStorageError,
    LocalStorageInterface,
    StorageError,
)


class JsonFileStorage(LocalStorageInterface):
    """Key/value storage in a single JSON file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise CorruptStorageError(f"Storage file {self._path} is not valid JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptStorageError(f"Storage file {self._path} does not hold an object")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Could not write {self._path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
