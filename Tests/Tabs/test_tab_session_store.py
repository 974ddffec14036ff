# test_tab_session_store.py
# Description: Tests for TabSessionStore operations and notifications
#
# Imports
from unittest.mock import Mock
#
import pytest
#
# Local Imports
from jsonstudio.Tabs.tab_models import TabsState
from jsonstudio.Tabs.tab_session_store import TabSessionStore
from conftest import make_state, make_tab
#
########################################################################################################################
#
# Test Classes:

class TestInitialization:

    def test_default_store_has_one_default_tab(self):
        store = TabSessionStore()

        assert store.tab_count == 1
        assert store.active_tab.is_default is True
        assert store.active_tab_id == store.tabs[0].id

    def test_empty_initial_state_is_replaced(self):
        store = TabSessionStore(TabsState(tabs=(), active_tab_id=None))
        assert store.tab_count == 1

    def test_dangling_active_id_falls_back_to_first(self):
        store = TabSessionStore(make_state("A", "B", active="gone"))
        assert store.active_tab_id == "A"


class TestOperations:

    def test_removal_successor_rule(self, abcd_store):
        state = abcd_store.remove_tab("C")

        assert state.tab_ids == ("A", "B", "D")
        assert state.active_tab_id == "B"
        assert abcd_store.state is state

    def test_add_tab_on_full_session_changes_nothing(self, loguru_messages):
        store = TabSessionStore(make_state(*[f"T{i}" for i in range(10)], active="T4"))
        before = store.state

        result = store.add_tab('{"x": 1}')

        assert result is before
        assert store.state.tab_ids == before.tab_ids
        assert store.active_tab_id == "T4"
        assert store.is_full is True
        assert any(r["level"].name == "WARNING" and "Maximum 10 tabs" in r["message"] for r in loguru_messages)

    def test_max_tabs_is_configurable(self):
        store = TabSessionStore(make_state("A", "B"), max_tabs=2)
        assert store.is_full is True
        assert store.add_tab().tab_ids == ("A", "B")

    def test_active_tab_and_lookup(self, abcd_store):
        assert abcd_store.active_tab.id == "C"
        assert abcd_store.get_tab("B").id == "B"
        assert abcd_store.get_tab("Z") is None

    def test_has_unsaved_changes_only_counts_file_backed_tabs(self):
        store = TabSessionStore(TabsState(
            tabs=(make_tab("A", is_modified=True), make_tab("B", file_path="/tmp/b.json")),
            active_tab_id="A",
        ))
        assert store.has_unsaved_changes() is False

        store.update_content("B", "{}")
        assert store.has_unsaved_changes() is True

    def test_update_file_then_save_flow(self, abcd_store):
        abcd_store.update_file("A", "/tmp/a.json", "a.json")
        abcd_store.update_content("A", "[1]")
        assert abcd_store.get_tab("A").is_modified is True

        abcd_store.update_modified("A", False)
        assert abcd_store.get_tab("A").is_modified is False

    def test_close_other_tabs(self, abcd_store):
        abcd_store.toggle_pin_tab("A")
        state = abcd_store.close_other_tabs("D")

        assert state.tab_ids == ("A", "D")
        assert state.active_tab_id == "D"

    def test_close_all_tabs(self, abcd_store):
        state = abcd_store.close_all_tabs()

        assert len(state) == 1
        assert state.tabs[0].is_default is True
        assert state.active_tab_id == state.tabs[0].id

    def test_reset_also_drops_diff_session(self, abcd_store):
        abcd_store.enter_diff_mode()
        state = abcd_store.reset()

        assert abcd_store.is_diff_mode is False
        assert len(state) == 1
        assert state.tabs[0].id not in {"A", "B", "C", "D"}


class TestSubscriptions:

    def test_subscribe_calls_immediately_with_current_state(self, abcd_store):
        listener = Mock()
        abcd_store.subscribe(listener)
        listener.assert_called_once_with(abcd_store.state)

    def test_listener_called_after_change(self, abcd_store):
        seen = []
        abcd_store.subscribe(seen.append)

        abcd_store.set_active_tab("A")

        assert len(seen) == 2
        assert seen[-1].active_tab_id == "A"
        assert seen[-1] is abcd_store.state

    def test_noop_does_not_notify(self, abcd_store):
        listener = Mock()
        abcd_store.subscribe(listener)
        listener.reset_mock()

        abcd_store.remove_tab("missing")
        abcd_store.set_active_tab("C")
        abcd_store.reorder_tabs(2, 2)

        listener.assert_not_called()

    def test_unsubscribe(self, abcd_store):
        listener = Mock()
        unsubscribe = abcd_store.subscribe(listener)
        listener.reset_mock()

        unsubscribe()
        abcd_store.add_tab()

        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self, abcd_store, loguru_messages):
        def broken(state):
            if state.active_tab_id == "A":
                raise RuntimeError("boom")

        seen = []
        abcd_store.subscribe(broken)
        abcd_store.subscribe(seen.append)

        abcd_store.set_active_tab("A")

        assert seen[-1].active_tab_id == "A"
        assert any(r["level"].name == "ERROR" for r in loguru_messages)

    def test_diff_listener_sees_enter_and_exit(self, abcd_store):
        seen = []
        abcd_store.subscribe_diff_mode(seen.append)

        abcd_store.enter_diff_mode()
        abcd_store.exit_diff_mode()

        assert seen[0] is None
        assert seen[1] is not None
        assert seen[2] is None


@pytest.mark.parametrize("operation", [
    lambda s: s.remove_tab("A"),
    lambda s: s.remove_tab("C"),
    lambda s: s.close_other_tabs("B"),
    lambda s: s.close_all_tabs(),
    lambda s: s.reset(),
    lambda s: s.toggle_pin_tab("D"),
    lambda s: s.reorder_tabs(0, 3),
    lambda s: s.add_tab(),
])
def test_active_id_always_resolves(abcd_store, operation):
    state = operation(abcd_store)
    assert state.index_of(state.active_tab_id) != -1
    assert len(state) >= 1
