# kv_store.py
# Description: Durable key-value stores used for session persistence
#
# Imports
import json
from pathlib import Path
from typing import Dict, Optional, Protocol, Union
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from .atomic_file_ops import atomic_write_json
#
#######################################################################################################################
#
# Classes:

class KeyValueStore(Protocol):
    """String-to-string storage that outlives the process."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Dict-backed store. Survives nothing, which is what tests want."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"InMemoryKeyValueStore(keys={sorted(self._data)})"


class JsonFileKeyValueStore:
    """
    Key-value store kept as a single JSON object on disk.

    The file is read lazily on first access. Every ``set`` rewrites the whole
    file atomically; the values stored here are small serialized blobs, so a
    full rewrite is fine.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._data: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._data is not None:
            return self._data

        self._data = {}
        if not self.path.exists():
            logger.debug(f"Key-value store {self.path} does not exist yet")
            return self._data

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read key-value store {self.path}, starting empty: {e}")
            return self._data

        if not isinstance(raw, dict):
            logger.error(f"Key-value store {self.path} does not hold a JSON object, starting empty")
            return self._data

        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        logger.debug(f"Loaded {len(self._data)} keys from {self.path}")
        return self._data

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        atomic_write_json(self.path, data)
        self._data = data

    def __repr__(self) -> str:
        return f"JsonFileKeyValueStore(path={self.path})"

#
# End of kv_store.py
#######################################################################################################################
