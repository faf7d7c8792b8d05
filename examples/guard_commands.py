"""Block risky shell commands and .env access, using the decorator API."""

from hookdef import EventType, HookRegistry, HookResult
from hookdef.handlers import block_env_files, log_stop_events

DANGEROUS_PATTERNS = ["rm -rf /", "git push --force", ":(){:|:&};:"]

hooks = HookRegistry()
hooks.add(block_env_files)


@hooks.on(EventType.PreToolUse, matcher="Bash")
def block_dangerous_commands(payload):
    command = (payload.tool_input or {}).get("command", "")
    for pattern in DANGEROUS_PATTERNS:
        if pattern in command:
            return HookResult.block(f"Blocked dangerous command: {pattern}")
    return None


hooks.register(EventType.Stop, log_stop_events())
