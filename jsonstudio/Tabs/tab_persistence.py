# tab_persistence.py
# Description: Save and restore the tab session through a key-value store
#
# File paths are never written and never read back: a restored tab is always
# an unsaved buffer until the user opens the file again.
#
# Imports
import json
from typing import Any, Dict, List, Optional
#
# 3rd-Party Imports
from loguru import logger
from pydantic import BaseModel, Field, ValidationError
#
# Local Imports
from ..Utils.kv_store import KeyValueStore
from .tab_models import JsonStats, Tab, TabsState, create_new_tab, single_tab_state
from .tab_session_store import TabSessionStore, Unsubscribe
#
#######################################################################################################################
#
# Constants:

STORAGE_KEY = "jsonstudio_tabs_state"
MAX_PERSISTED_CONTENT_CHARS = 100_000

#######################################################################################################################
#
# Persisted schema:

class PersistedStats(BaseModel):
    valid: bool = False
    key_count: int = 0
    depth: int = 0
    byte_size: int = 0
    error_info: Optional[Dict[str, Any]] = None


class PersistedTab(BaseModel):
    id: str = Field(..., min_length=1)
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    content: str = ""
    is_modified: bool = False
    stats: PersistedStats = Field(default_factory=PersistedStats)
    is_default: bool = False
    is_pinned: bool = False


class PersistedTabsState(BaseModel):
    tabs: List[PersistedTab] = Field(default_factory=list)
    active_tab_id: Optional[str] = None

#######################################################################################################################
#
# Classes:

class TabSessionPersistence:
    """
    Writes the tab session to a KeyValueStore on every change and rebuilds it
    on startup.

    Both directions sanitize: paths are dropped, and content longer than
    ``max_content_chars`` is replaced with an empty string while the rest of
    the tab (id, modified flag, stats) is kept.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = STORAGE_KEY,
        max_content_chars: int = MAX_PERSISTED_CONTENT_CHARS,
    ):
        self.store = store
        self.storage_key = storage_key
        self.max_content_chars = max_content_chars

    def sanitize_tab(self, tab: Tab) -> Tab:
        content = tab.content if len(tab.content) <= self.max_content_chars else ""
        return Tab(
            id=tab.id,
            content=content,
            file_path=None,
            file_name=None,
            is_modified=tab.is_modified,
            stats=tab.stats,
            is_default=tab.is_default,
            is_pinned=tab.is_pinned,
        )

    def serialize(self, state: TabsState) -> str:
        payload = PersistedTabsState(
            tabs=[
                PersistedTab(
                    id=tab.id,
                    content=tab.content,
                    is_modified=tab.is_modified,
                    stats=PersistedStats(**tab.stats.to_dict()),
                    is_default=tab.is_default,
                    is_pinned=tab.is_pinned,
                )
                for tab in map(self.sanitize_tab, state.tabs)
            ],
            active_tab_id=state.active_tab_id,
        )
        return payload.model_dump_json()

    def deserialize(self, raw: str) -> TabsState:
        """
        Rebuild a TabsState from stored JSON, treating it as untrusted.

        Raises:
            json.JSONDecodeError: If ``raw`` is not JSON
            ValidationError: If the JSON does not have the persisted shape
        """
        parsed = PersistedTabsState.model_validate(json.loads(raw))

        tabs: List[Tab] = []
        seen_ids = set()
        for stored in parsed.tabs:
            if stored.id in seen_ids:
                logger.warning(f"Dropping duplicate persisted tab {stored.id}")
                continue
            seen_ids.add(stored.id)
            tabs.append(self.sanitize_tab(Tab(
                id=stored.id,
                content=stored.content,
                file_path=stored.file_path,
                file_name=stored.file_name,
                is_modified=stored.is_modified,
                stats=JsonStats(**stored.stats.model_dump()),
                is_default=stored.is_default,
                is_pinned=stored.is_pinned,
            )))

        if not tabs:
            tabs.append(create_new_tab())

        # Pinned tabs lead, each group in stored order
        tabs.sort(key=lambda tab: not tab.is_pinned)

        state = TabsState(tabs=tuple(tabs), active_tab_id=parsed.active_tab_id)
        if state.index_of(parsed.active_tab_id) == -1:
            state = TabsState(tabs=state.tabs, active_tab_id=tabs[0].id)
        return state

    def save(self, state: TabsState) -> None:
        """Write ``state``; failures are logged, never raised."""
        try:
            self.store.set(self.storage_key, self.serialize(state))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save tabs state: {e}")

    def load(self) -> TabsState:
        """The persisted session, or a fresh single-tab session."""
        try:
            raw = self.store.get(self.storage_key)
        except OSError as e:
            logger.error(f"Failed to read tabs state: {e}")
            raw = None

        if raw:
            try:
                state = self.deserialize(raw)
                logger.info(f"Restored {len(state)} tabs from {self.storage_key}")
                return state
            except (json.JSONDecodeError, ValidationError) as e:
                logger.error(f"Failed to load tabs state: {e}")
        else:
            logger.debug(f"No persisted tabs state under {self.storage_key}")

        return single_tab_state(create_new_tab())

    def attach(self, session_store: TabSessionStore) -> Unsubscribe:
        """Write through on every session change. Diff mode is never persisted."""
        return session_store.subscribe(self.save)

#
# End of tab_persistence.py
#######################################################################################################################
