"""
Hook declaration module.

Hooks are Python callables the host runs at specific lifecycle events. A
declaration file builds a HookRegistry; the dispatcher later runs the
registered handlers once per host event.

Available Hook Events:
- PreToolUse: Before the host executes a tool (needs a matcher)
- PostToolUse: Immediately after a tool finishes (needs a matcher)
- Notification: When the host shows a notification
- Stop: When the agent finishes its turn
- SubagentStop: When a subagent finishes its turn

Example usage:
    from hookdef.hooks import HookRegistry, EventType, HookResult

    hooks = HookRegistry()

    @hooks.on(EventType.PreToolUse, matcher="Bash")
    def block_dangerous_commands(payload):
        cmd = (payload.tool_input or {}).get("command", "")
        if "rm -rf /" in cmd:
            return HookResult.block("Dangerous command blocked")
        return None
"""

from .errors import (
    DeclarationError,
    DescribeError,
    EventMismatchError,
    HandlerExecutionError,
    HookdefError,
    PayloadParseError,
    RegistryLoadError,
    SettingsShapeError,
    UsageError,
)
from .types import (
    EventPayload,
    EventType,
    ExitCode,
    HookBinding,
    HookHandler,
    HookResult,
    SessionBinding,
    ToolBinding,
)
from .matcher import matches
from .description import RegistryDescription, SessionDescriptor, ToolDescriptor
from .registry import HookRegistry, define_hooks, tool_hook

__all__ = [
    'EventType', 'EventPayload', 'ExitCode', 'HookResult', 'HookHandler',
    'HookBinding', 'ToolBinding', 'SessionBinding',
    'HookRegistry', 'define_hooks', 'tool_hook', 'matches',
    'RegistryDescription', 'ToolDescriptor', 'SessionDescriptor',
    'HookdefError', 'DeclarationError', 'UsageError', 'PayloadParseError',
    'EventMismatchError', 'HandlerExecutionError', 'RegistryLoadError',
    'DescribeError', 'SettingsShapeError',
]
