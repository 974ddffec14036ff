"""
Logging configuration for jsonstudio.

configure_logging is meant to be called once by the hosting application at
startup. Buffer contents may hold anything the user pasted in, so log sites
that include them go through truncate_for_log.
"""

import os
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .config import get_cli_setting, get_cli_log_file_path


LOG_LEVEL_ENV = "JSONSTUDIO_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

# Snippet length for content included in log messages
CONTENT_TRUNCATE_LENGTH = int(os.environ.get("JSONSTUDIO_LOG_TRUNCATE_LENGTH", "40"))


def truncate_for_log(text: str, max_length: Optional[int] = None) -> str:
    """
    Truncate text for logging.

    Args:
        text: Text to truncate
        max_length: Maximum length (defaults to CONTENT_TRUNCATE_LENGTH)

    Returns:
        Truncated text with ellipsis if needed
    """
    if max_length is None:
        max_length = CONTENT_TRUNCATE_LENGTH

    if len(text) <= max_length:
        return text

    return f"{text[:max_length]}..."


def resolve_log_level(level: Optional[str] = None) -> str:
    """Explicit level, then the environment, then the config file."""
    level_name = level or os.environ.get(LOG_LEVEL_ENV) or get_cli_setting("logging", "log_level", DEFAULT_LOG_LEVEL)
    return str(level_name).upper()


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
) -> None:
    """
    Configure loguru sinks for the application.

    This should be called once at startup.

    Args:
        level: Log level override
        log_file: File sink path; defaults to the configured log file when
            [logging].log_to_file is enabled
        console: Whether to log to stderr
    """
    log_level = resolve_log_level(level)

    logger.remove()  # Remove default handler

    if console:
        logger.add(
            sink=sys.stderr,
            level=log_level,
            colorize=True
        )

    if log_file is None and get_cli_setting("logging", "log_to_file", True):
        log_file = get_cli_log_file_path()

    if log_file is not None:
        logger.add(
            sink=str(log_file),
            level=log_level,
            rotation=get_cli_setting("logging", "log_rotation", "10 MB"),
            retention=get_cli_setting("logging", "log_retention", "7 days"),
        )

    logger.info(f"Logging configured: level={log_level}, file={log_file}")
