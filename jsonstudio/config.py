# jsonstudio/config.py
# Description: Configuration management for the jsonstudio application.
#
# Imports
import copy
import sys
if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib
from pathlib import Path
from typing import Dict, Any, Optional
#
# Third-Party Imports
from loguru import logger
#
#######################################################################################################################
#
# Constants:

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "jsonstudio" / "config.toml"
BASE_DATA_DIR_CLI = Path.home() / ".local" / "share" / "jsonstudio"

# --- Configuration File Content (auto-created on first run) ---
CONFIG_TOML_CONTENT = """
# Configuration for the jsonstudio JSON editor
# Located at: ~/.config/jsonstudio/config.toml
[tabs]
max_tabs = 10  # Maximum number of open tabs (applies to each diff side separately)
max_persisted_content_chars = 100000  # Tabs with longer content are persisted with empty content
storage_key = "jsonstudio_tabs_state"  # Key of the tab session inside the session store

[storage]
# JSON file backing the durable key-value store for session state.
# Defaults to session_store.json in the data directory (~/.local/share/jsonstudio).
# session_store_path = "~/.local/share/jsonstudio/session_store.json"

[logging]
log_level = "INFO"  # Log Level: DEBUG, INFO, WARNING, ERROR, CRITICAL
# Log file will be placed in the same directory as session_store_path above.
log_filename = "jsonstudio.log"
log_to_file = true
log_rotation = "10 MB"
log_retention = "7 days"
"""

try:
    DEFAULT_CONFIG_FROM_TOML: Dict[str, Any] = tomllib.loads(CONFIG_TOML_CONTENT)
except tomllib.TOMLDecodeError as e:
    logger.critical(f"FATAL: Could not parse internal CONFIG_TOML_CONTENT: {e}. Application cannot start correctly.")
    DEFAULT_CONFIG_FROM_TOML = {}  # Should not happen with valid TOML string

#######################################################################################################################
#
# Functions:

def deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges update_dict into base_dict."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Primary Configuration Loading Logic ---
_CONFIG_CACHE: Optional[Dict[str, Any]] = None


def load_cli_config_and_ensure_existence(force_reload: bool = False) -> Dict[str, Any]:
    """
    Loads settings from ~/.config/jsonstudio/config.toml.

    If the file doesn't exist, it's created with default values from CONFIG_TOML_CONTENT.
    Uses programmatic defaults (from CONFIG_TOML_CONTENT) as a base and merges the
    user's file on top of them.
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload:
        return _CONFIG_CACHE

    loaded_config = copy.deepcopy(DEFAULT_CONFIG_FROM_TOML)

    if not DEFAULT_CONFIG_PATH.exists():
        logger.info(f"Config file not found at {DEFAULT_CONFIG_PATH}. Creating with default values.")
        try:
            DEFAULT_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(DEFAULT_CONFIG_PATH, "w", encoding="utf-8") as f:
                f.write(CONFIG_TOML_CONTENT)
            logger.info(f"Created default config file at {DEFAULT_CONFIG_PATH}")
        except OSError as e:
            logger.error(f"Could not create default config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")
            logger.info(f"You may need to manually create the directory: {DEFAULT_CONFIG_PATH.parent}")
    else:
        logger.info(f"Attempting to load config from: {DEFAULT_CONFIG_PATH}")
        try:
            with open(DEFAULT_CONFIG_PATH, "rb") as f:
                user_config_from_file = tomllib.load(f)
            loaded_config = deep_merge_dicts(loaded_config, user_config_from_file)
            logger.info(f"Successfully loaded and merged config from {DEFAULT_CONFIG_PATH}")
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")
        except OSError as e:
            logger.error(f"Could not read config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")

    _CONFIG_CACHE = loaded_config
    logger.debug(f"load_cli_config_and_ensure_existence returning config with top-level keys: {list(loaded_config.keys())}")
    return _CONFIG_CACHE


def get_cli_setting(section: str, key: str, default: Any = None) -> Any:
    """Helper to get a specific setting from the loaded configuration."""
    config = load_cli_config_and_ensure_existence()
    section_data = config.get(section)
    if isinstance(section_data, dict):
        return section_data.get(key, default)
    return default


def get_cli_data_dir() -> Path:
    """Get the data directory for storing application data."""
    BASE_DATA_DIR_CLI.mkdir(parents=True, exist_ok=True)
    return BASE_DATA_DIR_CLI


def get_session_store_path() -> Path:
    """Configured [storage].session_store_path, or session_store.json in the data directory."""
    path_str = get_cli_setting("storage", "session_store_path")
    if not path_str:
        return get_cli_data_dir() / "session_store.json"
    return Path(path_str).expanduser().resolve()


def get_cli_log_file_path() -> Path:
    store_parent_dir = get_session_store_path().parent
    default_log_filename = DEFAULT_CONFIG_FROM_TOML.get("logging", {}).get("log_filename", "jsonstudio.log")
    log_filename = get_cli_setting("logging", "log_filename", default_log_filename)
    log_file_path = store_parent_dir / log_filename
    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create log directory {log_file_path.parent}: {e}")
    return log_file_path

#
# End of config.py
#######################################################################################################################
