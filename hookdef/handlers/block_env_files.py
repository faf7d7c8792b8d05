"""
PreToolUse hook that keeps the agent away from environment files.
"""

import re
from typing import Optional

from ..hooks.types import EventPayload, EventType, HookResult, ToolBinding

FILE_TOOLS = "Read|Write|Edit|MultiEdit"

_EXAMPLE_ENV = re.compile(r"\.env(\..*)?\.(example|sample|template|dist)$", re.IGNORECASE)
_ENV_FILE = re.compile(r"\.env(\.[^.]+)?$", re.IGNORECASE)


def is_blocked_env_path(file_path: str) -> bool:
    """
    Check whether a path names a .env file (``.env``, ``.env.local``, ...).

    Example variants such as ``.env.example`` or ``.env.local.sample`` are allowed.
    """
    if _EXAMPLE_ENV.search(file_path):
        return False
    return _ENV_FILE.search(file_path) is not None


def _block_env_files(payload: EventPayload) -> Optional[HookResult]:
    file_path = (payload.tool_input or {}).get("file_path")
    if not isinstance(file_path, str) or not file_path:
        return None

    if is_blocked_env_path(file_path):
        return HookResult.block(
            f"Access to .env files is not allowed. File: {file_path}. "
            "If you need to show an example, use .env.example or .env.sample instead."
        )
    return None


block_env_files = ToolBinding(EventType.PreToolUse, FILE_TOOLS, _block_env_files)
