"""
Root conftest.py for shared test fixtures and configuration.
This file provides common fixtures used across the test suite.
"""

import shutil
import sys
import tempfile
from pathlib import Path

import pytest
from loguru import logger

# Add project root to Python path for consistent imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jsonstudio import config
from jsonstudio.Tabs.tab_models import JsonStats, Tab, TabsState
from jsonstudio.Tabs.tab_session_store import TabSessionStore
from jsonstudio.Utils.kv_store import InMemoryKeyValueStore


# ========== Path and File System Fixtures ==========

@pytest.fixture
def isolated_temp_dir():
    """Create an isolated temporary directory that's always cleaned up."""
    temp_dir = tempfile.mkdtemp(prefix="jsonstudio_test_")
    temp_path = Path(temp_dir)
    yield temp_path
    if temp_path.exists():
        shutil.rmtree(temp_dir, ignore_errors=True)


# ========== Isolation Fixtures ==========

@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file and data dir into tmp_path and drop the config cache."""
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", config_path)
    monkeypatch.setattr(config, "BASE_DATA_DIR_CLI", tmp_path / "data")
    monkeypatch.setattr(config, "_CONFIG_CACHE", None)
    yield config_path
    config._CONFIG_CACHE = None


@pytest.fixture
def write_config(isolated_config, monkeypatch):
    """Write TOML text as the user config file and drop the config cache."""
    def _write(text):
        isolated_config.parent.mkdir(parents=True, exist_ok=True)
        isolated_config.write_text(text, encoding="utf-8")
        monkeypatch.setattr(config, "_CONFIG_CACHE", None)
        return isolated_config
    return _write


@pytest.fixture
def loguru_messages():
    """Collect loguru records emitted during the test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


# ========== Tab Fixtures ==========

def make_tab(tab_id, content="", file_path=None, **kwargs):
    """Tab with a readable, fixed id."""
    file_name = kwargs.pop("file_name", Path(file_path).name if file_path else None)
    return Tab(id=tab_id, content=content, file_path=file_path, file_name=file_name, **kwargs)


def make_state(*tab_ids, active=None):
    tabs = tuple(make_tab(tab_id) for tab_id in tab_ids)
    return TabsState(tabs=tabs, active_tab_id=active or tab_ids[0])


@pytest.fixture
def memory_store():
    """In-memory durable key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def abcd_store():
    """Session with tabs A, B, C, D and C active."""
    return TabSessionStore(make_state("A", "B", "C", "D", active="C"))


@pytest.fixture
def valid_stats():
    return JsonStats(valid=True, key_count=3, depth=2, byte_size=42)
