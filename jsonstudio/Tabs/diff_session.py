# diff_session.py
# Description: Diff mode: fork the session into two tab tracks, merge them back
#
# Imports
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from .tab_models import Tab, TabsState, clone_tabs, create_default_tab
#
#######################################################################################################################
#
# Classes:

class DiffSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def coerce(cls, side: Union["DiffSide", str]) -> "DiffSide":
        """Accept the enum or its string value ("left"/"right")."""
        return side if isinstance(side, cls) else cls(str(side).lower())


@dataclass(frozen=True)
class DiffSession:
    """
    The two comparison tracks shown while diff mode is active.

    Each side is a full TabsState with its own active tab and its own tab
    cap; nothing is shared between the sides.
    """
    left: TabsState
    right: TabsState

    @property
    def left_tabs(self) -> Tuple[Tab, ...]:
        return self.left.tabs

    @property
    def right_tabs(self) -> Tuple[Tab, ...]:
        return self.right.tabs

    @property
    def left_active_tab_id(self) -> Optional[str]:
        return self.left.active_tab_id

    @property
    def right_active_tab_id(self) -> Optional[str]:
        return self.right.active_tab_id

    def side(self, side: Union[DiffSide, str]) -> TabsState:
        return self.left if DiffSide.coerce(side) is DiffSide.LEFT else self.right

    def with_side(self, side: Union[DiffSide, str], state: TabsState) -> "DiffSession":
        """Copy of this session with one side replaced."""
        if DiffSide.coerce(side) is DiffSide.LEFT:
            return replace(self, left=state)
        return replace(self, right=state)

#######################################################################################################################
#
# Functions:

def fork_diff_session(state: TabsState) -> DiffSession:
    """Clone every tab once per side; both sides start on the session's active tab."""
    return DiffSession(
        left=TabsState(tabs=clone_tabs(state.tabs), active_tab_id=state.active_tab_id),
        right=TabsState(tabs=clone_tabs(state.tabs), active_tab_id=state.active_tab_id),
    )


def merge_diff_tracks(left: TabsState, right: TabsState) -> TabsState:
    """
    Fold the two diff tracks back into one collection. Left is authoritative.

    The result is every left tab in order, followed by the right tabs whose id
    is not on the left and whose file path (when set) is not open on the left.
    The left active tab stays active when it survives, otherwise the first tab
    does.
    """
    left_ids = {tab.id for tab in left.tabs}
    left_paths = {tab.file_path for tab in left.tabs if tab.file_path}

    merged = list(left.tabs)
    for tab in right.tabs:
        if tab.id in left_ids:
            continue
        if tab.file_path and tab.file_path in left_paths:
            logger.debug(f"Dropping right-side duplicate of {tab.file_name or tab.file_path}")
            continue
        merged.append(tab)

    if not merged:
        merged.append(create_default_tab())

    active_tab_id = left.active_tab_id
    if not any(tab.id == active_tab_id for tab in merged):
        active_tab_id = merged[0].id

    return TabsState(tabs=tuple(merged), active_tab_id=active_tab_id)

#
# End of diff_session.py
#######################################################################################################################
