# Utils/__init__.py
# Description: Storage helpers shared by the state modules
#
from .kv_store import KeyValueStore, InMemoryKeyValueStore, JsonFileKeyValueStore

__all__ = ["KeyValueStore", "InMemoryKeyValueStore", "JsonFileKeyValueStore"]
