# tab_models.py
# Description: Tab value objects and the helpers shared by every tab track
#
# Imports
import copy
import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple
#
#######################################################################################################################
#
# Constants:

MAX_TABS = 10
UNTITLED_LABEL = "Untitled"

_ID_ALPHABET = string.ascii_lowercase + string.digits

#######################################################################################################################
#
# Classes:

@dataclass(frozen=True)
class JsonStats:
    """Result of the external JSON analysis for one buffer."""
    valid: bool = False
    key_count: int = 0
    depth: int = 0
    byte_size: int = 0
    error_info: Optional[Dict[str, Any]] = None

    @classmethod
    def empty(cls) -> "JsonStats":
        """The sentinel used before a buffer has been analysed."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "key_count": self.key_count,
            "depth": self.depth,
            "byte_size": self.byte_size,
            "error_info": copy.deepcopy(self.error_info),
        }


@dataclass(frozen=True)
class Tab:
    """
    One editable JSON buffer.

    Tabs are immutable; store operations build replacements with
    ``dataclasses.replace`` so a tab handed to a subscriber never changes
    underneath it.
    """
    id: str
    content: str = ""
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    is_modified: bool = False
    stats: JsonStats = field(default_factory=JsonStats.empty)
    is_default: bool = False
    is_pinned: bool = False

    @property
    def has_file(self) -> bool:
        return self.file_path is not None

    @property
    def has_unsaved_changes(self) -> bool:
        # is_modified is meaningless for buffers without a backing file
        return self.has_file and self.is_modified


@dataclass(frozen=True)
class TabsState:
    """Ordered tabs plus the id of the tab shown in the editor."""
    tabs: Tuple[Tab, ...]
    active_tab_id: Optional[str]

    def index_of(self, tab_id: Optional[str]) -> int:
        """Position of ``tab_id`` or -1."""
        for index, tab in enumerate(self.tabs):
            if tab.id == tab_id:
                return index
        return -1

    def get_tab(self, tab_id: Optional[str]) -> Optional[Tab]:
        index = self.index_of(tab_id)
        return self.tabs[index] if index != -1 else None

    @property
    def active_tab(self) -> Tab:
        """The active tab, falling back to the first one."""
        return self.get_tab(self.active_tab_id) or self.tabs[0]

    @property
    def tab_ids(self) -> Tuple[str, ...]:
        return tuple(tab.id for tab in self.tabs)

    def __len__(self) -> int:
        return len(self.tabs)

#######################################################################################################################
#
# Functions:

def generate_tab_id() -> str:
    """``tab_<epoch millis>_<7 random base36 chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"tab_{int(time.time() * 1000)}_{suffix}"


def create_new_tab(
    content: str = "",
    file_path: Optional[str] = None,
    file_name: Optional[str] = None,
    is_default: bool = False,
    is_pinned: bool = False,
) -> Tab:
    return Tab(
        id=generate_tab_id(),
        content=content,
        file_path=file_path,
        file_name=file_name,
        is_modified=False,
        stats=JsonStats.empty(),
        is_default=is_default,
        is_pinned=is_pinned,
    )


def create_default_tab() -> Tab:
    return create_new_tab(is_default=True)


def single_tab_state(tab: Optional[Tab] = None) -> TabsState:
    """A state holding exactly one tab, which is active."""
    tab = tab or create_default_tab()
    return TabsState(tabs=(tab,), active_tab_id=tab.id)


def clone_tabs(tabs: Sequence[Tab]) -> Tuple[Tab, ...]:
    """Deep copies, so nothing is shared between the source and the clone."""
    return tuple(copy.deepcopy(tab) for tab in tabs)


def move_tab(tabs: Sequence[Tab], from_index: int, to_index: int) -> Tuple[Tab, ...]:
    """Remove the tab at ``from_index`` and reinsert it at ``to_index``."""
    if from_index == to_index:
        return tuple(tabs)
    moved = list(tabs)
    tab = moved.pop(from_index)
    moved.insert(to_index, tab)
    return tuple(moved)


def tab_display_label(tab: Tab, position: Optional[int] = None) -> str:
    """
    Label shown on the tab strip.

    The file name wins; otherwise the bootstrap tab is plain "Untitled" and
    other unsaved buffers are numbered by their 1-based ``position``.
    """
    if tab.file_name:
        return tab.file_name
    if tab.is_default or position is None:
        return UNTITLED_LABEL
    return f"{UNTITLED_LABEL}-{position}"

#
# End of tab_models.py
#######################################################################################################################
