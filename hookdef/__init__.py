"""
hookdef: declare host lifecycle hooks in Python.

Write a declaration file such as ``.claude/hooks/hooks.py``:

    from hookdef import define_hooks, tool_hook, HookResult

    def no_force_push(payload):
        if "push --force" in (payload.tool_input or {}).get("command", ""):
            return HookResult.block("Force pushes are not allowed")

    hooks = define_hooks({
        "PreToolUse": [tool_hook("Bash", no_force_push)],
    })

then run ``hookdef`` to write the matching entries into the host's settings
files. The host calls ``hookdef-run`` for each event.
"""

from .hooks import (
    DeclarationError,
    EventPayload,
    EventType,
    ExitCode,
    HookRegistry,
    HookResult,
    RegistryDescription,
    SessionBinding,
    ToolBinding,
    define_hooks,
    matches,
    tool_hook,
)
from .dispatch import Dispatcher

__version__ = "0.1.0"

__all__ = [
    'define_hooks', 'tool_hook', 'HookRegistry', 'HookResult', 'EventType',
    'EventPayload', 'ExitCode', 'ToolBinding', 'SessionBinding',
    'RegistryDescription', 'DeclarationError', 'Dispatcher', 'matches',
]
