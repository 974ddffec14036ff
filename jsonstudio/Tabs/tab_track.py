# tab_track.py
# Description: Pure operations over one ordered tab collection
#
# The session store and both sides of a diff session run their tabs through
# these functions, so the rules below hold identically everywhere. Every
# function is total: unknown ids and capacity overflows return the input
# state object unchanged, which callers use to skip notifications.
#
# Imports
from dataclasses import replace
from typing import Any, Optional
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from .tab_models import (
    MAX_TABS,
    JsonStats,
    TabsState,
    create_new_tab,
    move_tab,
    single_tab_state,
)
#
#######################################################################################################################
#
# Functions:

def add_tab(
    state: TabsState,
    content: str = "",
    file_path: Optional[str] = None,
    file_name: Optional[str] = None,
    max_tabs: int = MAX_TABS,
) -> TabsState:
    """Append a fresh tab and make it active, unless the track is full."""
    if len(state.tabs) >= max_tabs:
        logger.warning(f"Maximum {max_tabs} tabs allowed")
        return state

    tab = create_new_tab(content, file_path, file_name)
    return TabsState(tabs=state.tabs + (tab,), active_tab_id=tab.id)


def remove_tab(state: TabsState, tab_id: str) -> TabsState:
    """
    Remove ``tab_id``.

    An emptied track gets a fresh empty tab. When the active tab goes away the
    tab now sitting at ``max(0, removed_index - 1)`` takes over, i.e. the
    previous neighbour, or the new first tab.
    """
    index = state.index_of(tab_id)
    if index == -1:
        logger.debug(f"remove_tab: unknown tab {tab_id}")
        return state

    tabs = state.tabs[:index] + state.tabs[index + 1:]
    if not tabs:
        tabs = (create_new_tab(),)

    active_tab_id = state.active_tab_id
    if active_tab_id == tab_id:
        active_tab_id = tabs[max(0, index - 1)].id

    return TabsState(tabs=tabs, active_tab_id=active_tab_id)


def set_active_tab(state: TabsState, tab_id: str) -> TabsState:
    if state.index_of(tab_id) == -1 or state.active_tab_id == tab_id:
        return state
    return replace(state, active_tab_id=tab_id)


def update_tab(state: TabsState, tab_id: str, **changes: Any) -> TabsState:
    """Replace fields of one tab; a no-op if nothing actually changes."""
    index = state.index_of(tab_id)
    if index == -1:
        logger.debug(f"update_tab: unknown tab {tab_id}")
        return state

    current = state.tabs[index]
    updated = replace(current, **changes)
    if updated == current:
        return state

    tabs = state.tabs[:index] + (updated,) + state.tabs[index + 1:]
    return replace(state, tabs=tabs)


def update_content(state: TabsState, tab_id: str, content: str) -> TabsState:
    """Set content; only tabs backed by a file become modified."""
    tab = state.get_tab(tab_id)
    if tab is None:
        return state
    return update_tab(state, tab_id, content=content, is_modified=True if tab.has_file else tab.is_modified)


def update_file(state: TabsState, tab_id: str, file_path: Optional[str], file_name: Optional[str]) -> TabsState:
    return update_tab(
        state,
        tab_id,
        file_path=file_path,
        file_name=file_name,
        is_modified=False,
        is_default=False,
    )


def update_modified(state: TabsState, tab_id: str, is_modified: bool) -> TabsState:
    return update_tab(state, tab_id, is_modified=is_modified)


def update_stats(state: TabsState, tab_id: str, stats: JsonStats) -> TabsState:
    return update_tab(state, tab_id, stats=stats)


def reorder_tabs(state: TabsState, from_index: int, to_index: int) -> TabsState:
    """
    Move one tab, keeping everybody else's relative order.

    Pinned tabs are not protected here; toggle_pin_tab is the operation that
    keeps them a prefix.
    """
    count = len(state.tabs)
    if from_index == to_index:
        return state
    if not (0 <= from_index < count and 0 <= to_index < count):
        logger.debug(f"reorder_tabs: index out of range ({from_index} -> {to_index}, {count} tabs)")
        return state
    return replace(state, tabs=move_tab(state.tabs, from_index, to_index))


def toggle_pin_tab(state: TabsState, tab_id: str) -> TabsState:
    """
    Flip ``is_pinned`` and move the tab so pinned tabs stay a prefix.

    Pinning places the tab right after the last other pinned tab. Unpinning
    moves it to the index of the first other unpinned tab, or to the end.
    """
    index = state.index_of(tab_id)
    if index == -1:
        return state

    target = state.tabs[index]
    pinning = not target.is_pinned
    tabs = state.tabs[:index] + (replace(target, is_pinned=pinning),) + state.tabs[index + 1:]

    if pinning:
        last_pinned = -1
        for i, tab in enumerate(tabs):
            if tab.is_pinned and i != index:
                last_pinned = i
        insert_at = last_pinned + 1
    else:
        insert_at = next(
            (i for i, tab in enumerate(tabs) if not tab.is_pinned and i != index),
            len(tabs) - 1,
        )

    return replace(state, tabs=move_tab(tabs, index, insert_at))


def close_other_tabs(state: TabsState, tab_id: str) -> TabsState:
    """Keep ``tab_id`` and every pinned tab; ``tab_id`` becomes active."""
    if state.index_of(tab_id) == -1:
        return state

    tabs = tuple(tab for tab in state.tabs if tab.id == tab_id or tab.is_pinned)
    new_state = TabsState(tabs=tabs, active_tab_id=tab_id)
    return state if new_state == state else new_state


def close_all_tabs() -> TabsState:
    return single_tab_state()

#
# End of tab_track.py
#######################################################################################################################
