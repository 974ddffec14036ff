# editor_mirror.py
# Description: Keeps a text editing surface in sync with the active tab
#
# The tab store never touches the editor. This glue sits in the UI layer:
# it pushes the active tab's content into the surface when the active tab
# changes, and feeds user edits (and their analysis) back into the store.
#
# Imports
from typing import Optional, Protocol, Union
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from ..logging_config import truncate_for_log
from ..Tabs.diff_session import DiffSession, DiffSide
from ..Tabs.tab_models import JsonStats, Tab, TabsState
from ..Tabs.tab_session_store import TabSessionStore, Unsubscribe
#
#######################################################################################################################
#
# Collaborator protocols:

class EditorSurface(Protocol):
    """The visible text buffer."""

    def get_value(self) -> str:
        ...

    def set_value(self, text: str) -> None:
        ...


class JsonAnalysisService(Protocol):
    """External JSON toolkit. Only compute_stats is used for tab metadata."""

    def compute_stats(self, content: str) -> JsonStats:
        ...

    def format(self, content: str) -> str:
        ...

    def minify(self, content: str) -> str:
        ...

    def escape(self, content: str) -> str:
        ...

    def unescape(self, content: str) -> str:
        ...

#######################################################################################################################
#
# Classes:

class EditorMirror:
    """
    Mirrors one editor onto the session, or onto one side of diff mode.

    Call ``start()`` once the surface exists and route the surface's change
    notification to ``on_editor_changed()``.
    """

    def __init__(
        self,
        store: TabSessionStore,
        surface: EditorSurface,
        analyzer: Optional[JsonAnalysisService] = None,
        side: Optional[Union[DiffSide, str]] = None,
    ):
        self.store = store
        self.surface = surface
        self.analyzer = analyzer
        self.side = DiffSide.coerce(side) if side is not None else None
        self.shown_tab_id: Optional[str] = None
        self._pushing = False
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def is_running(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        if self.side is None:
            self._unsubscribe = self.store.subscribe(self._on_state)
        else:
            self._unsubscribe = self.store.subscribe_diff_mode(self._on_diff_session)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.shown_tab_id = None

    def _current_track(self) -> Optional[TabsState]:
        if self.side is None:
            return self.store.state
        return self.store.get_diff_side(self.side)

    def _on_state(self, state: TabsState) -> None:
        self._show(state.active_tab)

    def _on_diff_session(self, session: Optional[DiffSession]) -> None:
        if session is None:
            # Diff mode ended; the mirror for this side has nothing to show
            self.shown_tab_id = None
            return
        self._show(session.side(self.side).active_tab)

    def _show(self, tab: Tab) -> None:
        if tab.id == self.shown_tab_id and self.surface.get_value() == tab.content:
            return
        logger.debug(f"Showing tab {tab.id} in {self.side.value if self.side else 'main'} editor")
        self._pushing = True
        try:
            self.surface.set_value(tab.content)
        finally:
            self._pushing = False
        self.shown_tab_id = tab.id

    def on_editor_changed(self) -> None:
        """Copy the surface's text into the shown tab and refresh its stats."""
        if self._pushing or self.shown_tab_id is None:
            return

        track = self._current_track()
        tab = track.get_tab(self.shown_tab_id) if track is not None else None
        if tab is None:
            return

        text = self.surface.get_value()
        if text == tab.content:
            # Echo of our own set_value, or an edit that changed nothing
            return

        logger.debug(f"Editor edit in tab {tab.id} ({len(text)} chars): {truncate_for_log(text)}")
        stats = self.analyzer.compute_stats(text) if self.analyzer is not None else None
        if self.side is None:
            self.store.update_content(tab.id, text)
            if stats is not None:
                self.store.update_stats(tab.id, stats)
        else:
            self.store.update_diff_tab_content(self.side, tab.id, text)
            if stats is not None:
                self.store.update_diff_tab_stats(self.side, tab.id, stats)

#
# End of editor_mirror.py
#######################################################################################################################
