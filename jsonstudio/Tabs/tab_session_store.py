# tab_session_store.py
# Description: Single source of truth for the open tabs and diff mode
#
# Imports
from typing import Callable, List, Optional, Union
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from . import tab_track
from .diff_session import DiffSession, DiffSide, fork_diff_session, merge_diff_tracks
from .tab_models import MAX_TABS, JsonStats, Tab, TabsState, single_tab_state
#
#######################################################################################################################
#
# Types:

StateListener = Callable[[TabsState], None]
DiffListener = Callable[[Optional[DiffSession]], None]
Unsubscribe = Callable[[], None]

#######################################################################################################################
#
# Classes:

class TabSessionStore:
    """
    Owns the ordered tab collection, the active tab pointer and, while diff
    mode is on, the diff session.

    All changes go through the operations below; each runs to completion and
    then notifies subscribers synchronously with the new value. Operations
    that turn out to be no-ops (unknown id, full track, nothing changed)
    return the current state and notify nobody.
    """

    def __init__(self, initial_state: Optional[TabsState] = None, max_tabs: int = MAX_TABS):
        self.max_tabs = max_tabs
        self._state = self._normalize(initial_state)
        self._diff_session: Optional[DiffSession] = None
        self._listeners: List[StateListener] = []
        self._diff_listeners: List[DiffListener] = []
        logger.debug(f"TabSessionStore initialized with {len(self._state)} tabs, max_tabs: {max_tabs}")

    @staticmethod
    def _normalize(state: Optional[TabsState]) -> TabsState:
        if state is None or not state.tabs:
            return single_tab_state()
        if state.index_of(state.active_tab_id) == -1:
            return TabsState(tabs=tuple(state.tabs), active_tab_id=state.tabs[0].id)
        return state

    # Read access

    @property
    def state(self) -> TabsState:
        return self._state

    @property
    def tabs(self):
        return self._state.tabs

    @property
    def active_tab_id(self) -> Optional[str]:
        return self._state.active_tab_id

    @property
    def active_tab(self) -> Tab:
        return self._state.active_tab

    @property
    def tab_count(self) -> int:
        return len(self._state.tabs)

    @property
    def is_full(self) -> bool:
        """True when add_tab would be rejected."""
        return self.tab_count >= self.max_tabs

    def get_tab(self, tab_id: str) -> Optional[Tab]:
        return self._state.get_tab(tab_id)

    def has_unsaved_changes(self) -> bool:
        """Whether any file-backed tab has edits that were not saved."""
        return any(tab.has_unsaved_changes for tab in self._state.tabs)

    @property
    def diff_session(self) -> Optional[DiffSession]:
        return self._diff_session

    @property
    def is_diff_mode(self) -> bool:
        return self._diff_session is not None

    def get_diff_side(self, side: Union[DiffSide, str]) -> Optional[TabsState]:
        """One side of the diff session; None when inactive or for an unknown side."""
        if self._diff_session is None:
            return None
        resolved = self._resolve_side(side, "get_diff_side")
        return self._diff_session.side(resolved) if resolved is not None else None

    @staticmethod
    def _resolve_side(side: Union[DiffSide, str], operation: str) -> Optional[DiffSide]:
        try:
            return DiffSide.coerce(side)
        except ValueError:
            logger.warning(f"{operation}: unknown diff side {side!r}")
            return None

    # Subscriptions

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        """
        Call ``listener`` with the current state now and after every change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)
        listener(self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe_diff_mode(self, listener: DiffListener) -> Unsubscribe:
        """Like subscribe, for the diff session (None while diff mode is off)."""
        self._diff_listeners.append(listener)
        listener(self._diff_session)

        def unsubscribe() -> None:
            if listener in self._diff_listeners:
                self._diff_listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_state: TabsState, operation: str) -> TabsState:
        if new_state is self._state:
            return self._state
        self._state = new_state
        logger.debug(f"{operation}: {len(new_state)} tabs, active={new_state.active_tab_id}")
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                logger.exception(f"Tab state listener failed after {operation}: {e}")
        return self._state

    def _commit_diff(self, new_session: Optional[DiffSession], operation: str) -> Optional[DiffSession]:
        if new_session is self._diff_session:
            return self._diff_session
        self._diff_session = new_session
        logger.debug(f"{operation}: diff mode {'active' if new_session else 'inactive'}")
        for listener in list(self._diff_listeners):
            try:
                listener(new_session)
            except Exception as e:
                logger.exception(f"Diff mode listener failed after {operation}: {e}")
        return self._diff_session

    # Single-track operations

    def add_tab(self, content: str = "", file_path: Optional[str] = None, file_name: Optional[str] = None) -> TabsState:
        return self._commit(
            tab_track.add_tab(self._state, content, file_path, file_name, max_tabs=self.max_tabs),
            "add_tab",
        )

    def remove_tab(self, tab_id: str) -> TabsState:
        return self._commit(tab_track.remove_tab(self._state, tab_id), "remove_tab")

    def set_active_tab(self, tab_id: str) -> TabsState:
        return self._commit(tab_track.set_active_tab(self._state, tab_id), "set_active_tab")

    def update_content(self, tab_id: str, content: str) -> TabsState:
        return self._commit(tab_track.update_content(self._state, tab_id, content), "update_content")

    def update_file(self, tab_id: str, file_path: Optional[str], file_name: Optional[str]) -> TabsState:
        return self._commit(tab_track.update_file(self._state, tab_id, file_path, file_name), "update_file")

    def update_modified(self, tab_id: str, is_modified: bool) -> TabsState:
        return self._commit(tab_track.update_modified(self._state, tab_id, is_modified), "update_modified")

    def update_stats(self, tab_id: str, stats: JsonStats) -> TabsState:
        return self._commit(tab_track.update_stats(self._state, tab_id, stats), "update_stats")

    def reorder_tabs(self, from_index: int, to_index: int) -> TabsState:
        return self._commit(tab_track.reorder_tabs(self._state, from_index, to_index), "reorder_tabs")

    def toggle_pin_tab(self, tab_id: str) -> TabsState:
        return self._commit(tab_track.toggle_pin_tab(self._state, tab_id), "toggle_pin_tab")

    def close_other_tabs(self, tab_id: str) -> TabsState:
        return self._commit(tab_track.close_other_tabs(self._state, tab_id), "close_other_tabs")

    def close_all_tabs(self) -> TabsState:
        return self._commit(tab_track.close_all_tabs(), "close_all_tabs")

    def reset(self) -> TabsState:
        """close_all_tabs that also abandons an in-flight diff session."""
        self._commit_diff(None, "reset")
        return self._commit(tab_track.close_all_tabs(), "reset")

    # Diff mode

    def enter_diff_mode(self) -> DiffSession:
        """Fork the current tabs into two independent tracks."""
        if self._diff_session is not None:
            logger.debug("enter_diff_mode: diff mode already active")
            return self._diff_session
        logger.info(f"Entering diff mode with {len(self._state)} tabs per side")
        return self._commit_diff(fork_diff_session(self._state), "enter_diff_mode")

    def exit_diff_mode(self) -> TabsState:
        """Merge the two tracks (left wins) into the session and leave diff mode."""
        session = self._diff_session
        if session is None:
            return self._state

        merged = merge_diff_tracks(session.left, session.right)
        logger.info(
            f"Exiting diff mode: {len(session.left)} left + {len(session.right)} right tabs merged into {len(merged)}"
        )
        self._commit_diff(None, "exit_diff_mode")
        return self._commit(merged, "exit_diff_mode")

    def _apply_to_side(
        self,
        side: Union[DiffSide, str],
        operation: str,
        change: Callable[[TabsState], TabsState],
    ) -> Optional[DiffSession]:
        session = self._diff_session
        if session is None:
            logger.debug(f"{operation}: diff mode is not active")
            return None
        resolved = self._resolve_side(side, operation)
        if resolved is None:
            return session
        current = session.side(resolved)
        updated = change(current)
        if updated is current:
            return session
        return self._commit_diff(session.with_side(resolved, updated), operation)

    def add_diff_tab(
        self,
        side: Union[DiffSide, str],
        content: str = "",
        file_path: Optional[str] = None,
        file_name: Optional[str] = None,
    ) -> Optional[DiffSession]:
        return self._apply_to_side(
            side,
            "add_diff_tab",
            lambda state: tab_track.add_tab(state, content, file_path, file_name, max_tabs=self.max_tabs),
        )

    def remove_diff_tab(self, side: Union[DiffSide, str], tab_id: str) -> Optional[DiffSession]:
        return self._apply_to_side(side, "remove_diff_tab", lambda state: tab_track.remove_tab(state, tab_id))

    def set_diff_active_tab(self, side: Union[DiffSide, str], tab_id: str) -> Optional[DiffSession]:
        return self._apply_to_side(side, "set_diff_active_tab", lambda state: tab_track.set_active_tab(state, tab_id))

    def update_diff_tab_content(self, side: Union[DiffSide, str], tab_id: str, content: str) -> Optional[DiffSession]:
        return self._apply_to_side(
            side,
            "update_diff_tab_content",
            lambda state: tab_track.update_content(state, tab_id, content),
        )

    def update_diff_tab_stats(self, side: Union[DiffSide, str], tab_id: str, stats: JsonStats) -> Optional[DiffSession]:
        return self._apply_to_side(
            side,
            "update_diff_tab_stats",
            lambda state: tab_track.update_stats(state, tab_id, stats),
        )

    def __repr__(self) -> str:
        return (
            f"TabSessionStore(tabs={self.tab_count}, active={self.active_tab_id}, "
            f"diff_mode={self.is_diff_mode})"
        )

#
# End of tab_session_store.py
#######################################################################################################################
