"""
JSON Directory Store: Infrastructure adapter for file-backed state.

Implements KeyValueStore with one ``<key>.json`` file per key.
"""

import logging
import os
import re
import tempfile
from pathlib import Path

from alfanumrik.domain.errors import StorageError
from alfanumrik.domain.learning.ports import KeyValueStore

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonDirectoryStore(KeyValueStore):
    """
    Stores each key as a file under ``data_dir``.

    Writes go to a temporary file first and are moved into place, so a
    crash never leaves a half-written collection behind.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Could not write {path}: {e}") from e

        logger.debug(f"Wrote {len(value)} bytes to {path}")

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        path.unlink(missing_ok=True)
