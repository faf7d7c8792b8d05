"""Log every hook event to JSON files in the project directory."""

from hookdef import define_hooks
from hookdef.handlers import (
    log_notification_events,
    log_post_tool_use_events,
    log_pre_tool_use_events,
    log_stop_events,
    log_subagent_stop_events,
)

hooks = define_hooks({
    "PreToolUse": [log_pre_tool_use_events()],
    "PostToolUse": [log_post_tool_use_events()],
    "Notification": [log_notification_events()],
    "Stop": [log_stop_events()],
    "SubagentStop": [log_subagent_stop_events()],
})
