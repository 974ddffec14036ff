"""
Atomic file writes for jsonstudio's on-disk state.

The session store file is rewritten on every tab mutation, so a crash in the
middle of a write must leave either the old file or the new one, never a
truncated mix of both.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger


def atomic_write_text(
    file_path: Union[str, Path],
    content: str,
    encoding: str = 'utf-8',
    mode: int = 0o600
) -> None:
    """
    Write text to ``file_path`` through a temp file and ``os.replace``.

    The temp file lives in the target directory so the final rename never
    crosses a filesystem boundary. Session data may contain whatever the user
    pasted, so the default permissions are owner-only.

    Raises:
        OSError: If the temp file cannot be written or renamed
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
        suffix=".tmp",
        text=True
    )
    try:
        with os.fdopen(fd, 'w', encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, mode)
        os.replace(temp_path, file_path)
    except OSError as e:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        logger.error(f"Failed to atomically write to {file_path}: {e}")
        raise

    logger.debug(f"Atomically wrote {len(content)} chars to {file_path}")


def atomic_write_json(
    file_path: Union[str, Path],
    data: Dict[str, Any],
    indent: Optional[int] = None,
    mode: int = 0o600
) -> None:
    """Serialize ``data`` and write it with atomic_write_text."""
    atomic_write_text(file_path, json.dumps(data, indent=indent, ensure_ascii=False), mode=mode)
