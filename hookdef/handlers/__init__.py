"""
Ready-made hook handlers.

Usage in a declaration file:
    from hookdef import define_hooks
    from hookdef.handlers import block_env_files, log_pre_tool_use_events, log_stop_events

    hooks = define_hooks({
        "PreToolUse": [log_pre_tool_use_events(), block_env_files],
        "Stop": [log_stop_events()],
    })
"""

from .block_env_files import block_env_files, is_blocked_env_path
from .event_log import (
    append_event,
    log_notification_events,
    log_post_tool_use_events,
    log_pre_tool_use_events,
    log_stop_events,
    log_subagent_stop_events,
)

__all__ = [
    'block_env_files', 'is_blocked_env_path', 'append_event',
    'log_pre_tool_use_events', 'log_post_tool_use_events',
    'log_stop_events', 'log_subagent_stop_events', 'log_notification_events',
]
