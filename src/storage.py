# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Durable key-value storage for the scramble word engine.

Values are JSON-compatible objects. Two backends are provided:
- JsonFileStore: one JSON file per key inside a directory
- MemoryStore: in-process dict, used for tests and ephemeral sessions

Both can enforce a byte quota, raising StorageQuotaError when a save would
exceed it. There are no transactional guarantees.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional


class StorageError(Exception):
    """Raised when a value cannot be read or written."""
    pass


class StorageQuotaError(StorageError):
    """Raised when a save would exceed the store's byte quota."""

    def __init__(self, key: str, needed: int, quota: int):
        self.key = key
        self.needed = needed
        self.quota = quota
        super().__init__(
            f"Storage quota exceeded saving '{key}': "
            f"{needed} bytes needed, quota is {quota}"
        )


class KeyValueStore:
    """Interface for durable stores."""

    def load(self, key: str) -> Optional[Any]:
        """
        Load a value.

        Returns:
            Decoded value, or None if the key is absent

        Raises:
            StorageError: If the stored data cannot be decoded
        """
        raise NotImplementedError

    def save(self, key: str, value: Any) -> None:
        """
        Save a value.

        Raises:
            StorageQuotaError: If the quota would be exceeded
            StorageError: If the value cannot be written
        """
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value, separators=(',', ':'))
    except (TypeError, ValueError) as e:
        raise StorageError(f"Value for '{key}' is not JSON-serializable: {e}")


def _decode(key: str, text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageError(f"Corrupt data stored under '{key}': {e}")


class MemoryStore(KeyValueStore):
    """
    In-memory store that keeps values as encoded JSON text.

    Encoding on save means callers get copies back, the same as with a
    file store.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._data: Dict[str, str] = {}

    def load(self, key: str) -> Optional[Any]:
        text = self._data.get(key)
        if text is None:
            return None
        return _decode(key, text)

    def save(self, key: str, value: Any) -> None:
        text = _encode(key, value)
        if self.quota_bytes is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            needed = used + len(text)
            if needed > self.quota_bytes:
                raise StorageQuotaError(key, needed, self.quota_bytes)
        self._data[key] = text

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def put_raw(self, key: str, text: str) -> None:
        """Store raw text without encoding (for simulating corruption)."""
        self._data[key] = text

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStore(KeyValueStore):
    """
    Directory-backed store writing one `<key>.json` file per key.

    Writes go to a temporary file that is renamed into place, so a crash
    mid-write leaves the previous value intact.
    """

    _SAFE_KEY = re.compile(r'[^A-Za-z0-9_.-]')
    _TMP_PREFIX = '.tmp-'

    def __init__(
        self,
        directory: str,
        quota_bytes: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.directory = Path(os.path.expanduser(directory))
        self.quota_bytes = quota_bytes
        self.logger = logger if logger else logging.getLogger(__name__)

    def _path(self, key: str) -> Path:
        return self.directory / f"{self._SAFE_KEY.sub('_', key)}.json"

    def load(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}")
        return _decode(key, text)

    def save(self, key: str, value: Any) -> None:
        text = _encode(key, value)
        path = self._path(key)

        if self.quota_bytes is not None:
            needed = self._used_bytes(exclude=path) + len(text.encode('utf-8'))
            if needed > self.quota_bytes:
                raise StorageQuotaError(key, needed, self.quota_bytes)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.directory, prefix=self._TMP_PREFIX, suffix='.json'
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(text)
                os.replace(tmp_path, path)
            except OSError:
                os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}")

        self.logger.debug(f"Saved '{key}' ({len(text)} bytes) to {path}")

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Could not remove {path}: {e}")

    def _used_bytes(self, exclude: Optional[Path] = None) -> int:
        if not self.directory.exists():
            return 0
        total = 0
        for path in self.directory.glob('*.json'):
            if path != exclude and not path.name.startswith(self._TMP_PREFIX):
                total += path.stat().st_size
        return total
