"""
File-backed host surface for the editing session.

The session itself never touches the disk. FileSurface keeps the JSON text in
memory like an editor buffer and writes it out only on save/export, using
write-to-temp-then-rename so a failed save never leaves a truncated file.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .config import BACKUP_ON_SAVE
from .session import HostSurface

logger = logging.getLogger(__name__)


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def atomic_write_text(path: str, text: str, backup: bool = BACKUP_ON_SAVE) -> Optional[str]:
    """
    Write text to path atomically.

    Args:
        path: Target file path
        text: Full file contents
        backup: Copy an existing target to "<path>.bak" first

    Returns:
        The backup path if one was written, None otherwise

    Raises:
        RuntimeError: If the backup or the write fails
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    backup_path = None
    if backup and target.exists():
        backup_path = str(target) + ".bak"
        try:
            shutil.copy2(target, backup_path)
        except OSError as e:
            raise RuntimeError(f"Backup creation failed: {e}") from e

    # Same directory as target so the rename stays on one filesystem
    fd, temp_path = tempfile.mkstemp(suffix=".tmp", prefix=f"{target.stem}_", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(temp_path, target)
    except OSError as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise RuntimeError(f"Atomic write failed: {e}") from e

    logger.info("Atomic write completed: %s", target)
    return backup_path


class FileSurface(HostSurface):
    """Editor buffer loaded from a JSON file."""

    def __init__(self, path: str):
        self.path = path
        self.text = read_text(path)
        self.dirty = False

    def get_current_text(self) -> str:
        return self.text

    def set_current_text(self, text: str) -> None:
        if text != self.text:
            self.dirty = True
        self.text = text

    def save(self, backup: bool = BACKUP_ON_SAVE) -> Optional[str]:
        backup_path = atomic_write_text(self.path, self.text, backup=backup)
        self.dirty = False
        return backup_path

    def export(self, path: str) -> None:
        """Write the current text to another file; the buffer stays tied to its own path."""
        atomic_write_text(path, self.text, backup=False)
