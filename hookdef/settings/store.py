"""
Reading and writing settings documents on disk.
"""

import json
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from ..logger import logger


def read_settings_text(path: Path) -> Optional[str]:
    """Return the raw document text, or None if the file does not exist."""
    path = Path(path)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def dump_settings(document: Dict[str, Any]) -> str:
    """Serialize a document the way the host writes its own settings."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def backup_settings(path: Path) -> Path:
    """
    Copy a settings file aside before it is replaced.

    Args:
        path: Settings file to back up

    Returns:
        Path of the backup (``<name>.bak`` next to the original)
    """
    path = Path(path)
    backup = path.with_name(path.name + ".bak")
    shutil.copy2(path, backup)
    logger.warning(f"[settings] Saved a copy of the unreadable settings file to {backup}")
    return backup


def write_settings(path: Path, document: Dict[str, Any]) -> None:
    """
    Write a settings document, creating parent directories as needed.

    The new content is written to a sibling temporary file and moved into
    place, so an interrupted write never leaves a truncated document behind.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(dump_settings(document), encoding="utf-8")
    tmp.replace(path)
    logger.debug(f"[settings] Wrote {path}")
