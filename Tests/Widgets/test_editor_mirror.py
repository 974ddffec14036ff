# test_editor_mirror.py
# Description: Tests for EditorMirror, the editor <-> tab session glue
#
# Imports
from unittest.mock import Mock
#
import pytest
#
# Local Imports
from jsonstudio.Tabs.tab_models import TabsState
from jsonstudio.Tabs.tab_session_store import TabSessionStore
from jsonstudio.Widgets.editor_mirror import EditorMirror
from conftest import make_tab
#
########################################################################################################################
#
# Test Fixtures:

class FakeSurface:
    """Records pushes; ``on_set`` simulates a widget that reports changes synchronously."""

    def __init__(self):
        self.value = ""
        self.pushed = []
        self.on_set = None

    def get_value(self):
        return self.value

    def set_value(self, text):
        self.value = text
        self.pushed.append(text)
        if self.on_set is not None:
            self.on_set()


@pytest.fixture
def store():
    return TabSessionStore(TabsState(
        tabs=(
            make_tab("A", content='{"a": 1}', file_path="/tmp/a.json"),
            make_tab("B", content="[2]"),
        ),
        active_tab_id="A",
    ))


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def analyzer(valid_stats):
    service = Mock()
    service.compute_stats.return_value = valid_stats
    return service

########################################################################################################################
#
# Main Editor Tests:

class TestMainEditor:

    def test_start_shows_active_tab(self, store, surface):
        mirror = EditorMirror(store, surface)
        mirror.start()

        assert mirror.is_running is True
        assert mirror.shown_tab_id == "A"
        assert surface.value == '{"a": 1}'

    def test_switching_tabs_pushes_content(self, store, surface):
        EditorMirror(store, surface).start()

        store.set_active_tab("B")

        assert surface.value == "[2]"
        assert surface.pushed == ['{"a": 1}', "[2]"]

    def test_user_edit_updates_store_without_push_back(self, store, surface):
        mirror = EditorMirror(store, surface)
        mirror.start()

        surface.value = '{"a": 2}'
        mirror.on_editor_changed()

        assert store.get_tab("A").content == '{"a": 2}'
        assert store.get_tab("A").is_modified is True
        assert surface.pushed == ['{"a": 1}']

    def test_echo_of_push_is_ignored(self, store, surface):
        mirror = EditorMirror(store, surface)
        mirror.start()
        before = store.state

        mirror.on_editor_changed()

        assert store.state is before
        assert store.get_tab("A").is_modified is False

    def test_synchronous_change_during_push_is_ignored(self, store, surface):
        mirror = EditorMirror(store, surface)
        surface.on_set = mirror.on_editor_changed
        mirror.start()

        store.set_active_tab("B")

        assert store.get_tab("A").content == '{"a": 1}'
        assert store.get_tab("B").content == "[2]"

    def test_analyzer_stats_are_recorded(self, store, surface, analyzer, valid_stats):
        mirror = EditorMirror(store, surface, analyzer=analyzer)
        mirror.start()

        surface.value = "{}"
        mirror.on_editor_changed()

        analyzer.compute_stats.assert_called_once_with("{}")
        assert store.get_tab("A").stats == valid_stats

    def test_edit_log_truncates_content(self, store, surface, loguru_messages):
        mirror = EditorMirror(store, surface)
        mirror.start()

        surface.value = "[" + "7" * 500 + "]"
        mirror.on_editor_changed()

        edit_logs = [r["message"] for r in loguru_messages if "Editor edit in tab A" in r["message"]]
        assert len(edit_logs) == 1
        assert "7" * 500 not in edit_logs[0]
        assert edit_logs[0].endswith("...")

    def test_stop_unsubscribes(self, store, surface):
        mirror = EditorMirror(store, surface)
        mirror.start()
        mirror.stop()

        store.set_active_tab("B")

        assert mirror.is_running is False
        assert surface.value == '{"a": 1}'

    def test_start_twice_subscribes_once(self, store, surface):
        mirror = EditorMirror(store, surface)
        mirror.start()
        mirror.start()

        store.set_active_tab("B")

        assert surface.pushed == ['{"a": 1}', "[2]"]

    def test_removing_shown_tab_shows_successor(self, store, surface):
        mirror = EditorMirror(store, surface)
        mirror.start()
        store.set_active_tab("B")
        store.remove_tab("B")

        # Removal made A active again and pushed it
        assert surface.value == '{"a": 1}'
        assert store.state.tab_ids == ("A",)

########################################################################################################################
#
# Diff Side Tests:

class TestDiffSideEditor:

    def test_idle_until_diff_mode(self, store, surface):
        mirror = EditorMirror(store, surface, side="right")
        mirror.start()

        assert mirror.shown_tab_id is None
        assert surface.pushed == []

    def test_shows_side_and_edits_only_that_side(self, store, surface, analyzer, valid_stats):
        mirror = EditorMirror(store, surface, analyzer=analyzer, side="right")
        mirror.start()
        store.enter_diff_mode()

        assert surface.value == '{"a": 1}'

        surface.value = '{"right": true}'
        mirror.on_editor_changed()

        right = store.get_diff_side("right")
        assert right.get_tab("A").content == '{"right": true}'
        assert right.get_tab("A").stats == valid_stats
        assert store.get_diff_side("left").get_tab("A").content == '{"a": 1}'
        assert store.get_tab("A").content == '{"a": 1}'

    def test_follows_side_active_tab(self, store, surface):
        mirror = EditorMirror(store, surface, side="left")
        mirror.start()
        store.enter_diff_mode()

        store.set_diff_active_tab("left", "B")
        store.set_diff_active_tab("right", "A")

        assert mirror.shown_tab_id == "B"
        assert surface.value == "[2]"

    def test_exit_detaches(self, store, surface):
        mirror = EditorMirror(store, surface, side="left")
        mirror.start()
        store.enter_diff_mode()
        store.exit_diff_mode()

        surface.value = "late edit"
        mirror.on_editor_changed()

        assert mirror.shown_tab_id is None
        assert all(tab.content != "late edit" for tab in store.tabs)

    def test_invalid_side(self, store, surface):
        with pytest.raises(ValueError):
            EditorMirror(store, surface, side="middle")
