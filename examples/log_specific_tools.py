"""Log only selected tools, each to its own file."""

from hookdef import define_hooks
from hookdef.handlers import log_post_tool_use_events, log_pre_tool_use_events

hooks = define_hooks({
    "PreToolUse": [
        log_pre_tool_use_events("Write|Edit|MultiEdit", max_events_stored=200, log_file_name="file-writes.json"),
        log_pre_tool_use_events("Bash", max_events_stored=300, log_file_name="bash-commands.json"),
    ],
    "PostToolUse": [
        log_post_tool_use_events(
            "Bash",
            max_events_stored=300,
            log_file_name="bash-results.json",
            include_tool_input=False,
        ),
        log_post_tool_use_events("Grep|Glob|LS", log_file_name="file-searches.json"),
    ],
})
