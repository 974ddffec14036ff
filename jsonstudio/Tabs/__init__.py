# Tabs/__init__.py
# Description: Tab session state: the store, diff mode and persistence
#
from typing import Optional

from loguru import logger

from ..config import get_cli_setting, get_session_store_path
from ..Utils.kv_store import JsonFileKeyValueStore, KeyValueStore
from .diff_session import DiffSession, DiffSide, merge_diff_tracks
from .tab_models import MAX_TABS, JsonStats, Tab, TabsState, tab_display_label
from .tab_persistence import MAX_PERSISTED_CONTENT_CHARS, STORAGE_KEY, TabSessionPersistence
from .tab_session_store import TabSessionStore


def create_tab_session(kv_store: Optional[KeyValueStore] = None) -> TabSessionStore:
    """
    Build the application's tab session from configuration.

    Restores the last session from ``kv_store`` (the configured JSON file store
    by default) and keeps it written through on every change.
    """
    if kv_store is None:
        kv_store = JsonFileKeyValueStore(get_session_store_path())

    max_tabs = int(get_cli_setting("tabs", "max_tabs", MAX_TABS))
    persistence = TabSessionPersistence(
        kv_store,
        storage_key=get_cli_setting("tabs", "storage_key", STORAGE_KEY),
        max_content_chars=int(get_cli_setting("tabs", "max_persisted_content_chars", MAX_PERSISTED_CONTENT_CHARS)),
    )
    store = TabSessionStore(persistence.load(), max_tabs=max_tabs)
    persistence.attach(store)
    logger.info(f"Tab session ready: {store!r}")
    return store


__all__ = [
    "DiffSession",
    "DiffSide",
    "JsonStats",
    "MAX_TABS",
    "Tab",
    "TabSessionPersistence",
    "TabSessionStore",
    "TabsState",
    "create_tab_session",
    "merge_diff_tracks",
    "tab_display_label",
]
