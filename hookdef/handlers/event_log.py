"""
Handlers that record hook events in JSON log files.

Each log file holds a JSON list of the most recent events, oldest first.
Files are read, extended and rewritten on every event; two hook processes
writing the same file at the same moment can lose one of the entries.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..hooks.types import EventPayload, EventType, ToolBinding
from ..logger import logger

TOOL_USE_LOG = "hook-log.tool-use.json"
STOP_LOG = "hook-log.stop.json"
NOTIFICATION_LOG = "hook-log.notification.json"
DEFAULT_MAX_EVENTS = 100


def append_event(log_path: Path, entry: Dict[str, Any], max_events: int = DEFAULT_MAX_EVENTS) -> None:
    """
    Append an entry to a JSON list file, keeping at most ``max_events`` entries.

    A missing or unreadable log starts a new list.
    """
    log_path = Path(log_path)
    events: List[Any] = []
    if log_path.exists():
        try:
            loaded = json.loads(log_path.read_text(encoding="utf-8"))
            if isinstance(loaded, list):
                events = loaded
        except ValueError:
            logger.debug(f"[handlers] Starting a new log, {log_path} is not valid JSON")

    events.append(entry)
    # events[-0:] would keep the whole list
    events = events[-max_events:] if max_events > 0 else []

    log_path.write_text(json.dumps(events, indent=2), encoding="utf-8")


def _base_entry(payload: EventPayload) -> Dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": payload.event.value,
        "sessionId": payload.session_id,
        "transcriptPath": payload.transcript_path,
    }


def _logger_handler(
    log_file_name: str,
    max_events_stored: int,
    build_entry: Callable[[EventPayload], Dict[str, Any]],
    name: str,
) -> Callable[[EventPayload], None]:
    def handler(payload: EventPayload) -> None:
        log_path = Path.cwd() / log_file_name
        try:
            append_event(log_path, build_entry(payload), max_events_stored)
        except OSError as e:
            # Logging must never fail the host's tool call
            logger.error(f"[handlers] Failed to log {payload.event.value} event to {log_path}: {e}")

    handler.__name__ = name
    return handler


def _tool_use_logger(
    event: EventType,
    matcher: Optional[str],
    max_events_stored: int,
    log_file_name: str,
    include_tool_input: bool,
    include_tool_response: bool,
) -> ToolBinding:
    def build_entry(payload: EventPayload) -> Dict[str, Any]:
        entry = _base_entry(payload)
        entry["toolName"] = payload.tool_name
        if include_tool_input:
            entry["toolInput"] = payload.tool_input
        if include_tool_response and event is EventType.PostToolUse:
            entry["toolResponse"] = payload.tool_response
        return entry

    name = "log_pre_tool_use_events" if event is EventType.PreToolUse else "log_post_tool_use_events"
    handler = _logger_handler(log_file_name, max_events_stored, build_entry, name)
    return ToolBinding(event, matcher if matcher is not None else ".*", handler)


def log_pre_tool_use_events(
    matcher: Optional[str] = None,
    max_events_stored: int = DEFAULT_MAX_EVENTS,
    log_file_name: str = TOOL_USE_LOG,
    include_tool_input: bool = True,
) -> ToolBinding:
    """
    Log PreToolUse events to a JSON file in the working directory.

    Args:
        matcher: Tool-name pattern; all tools when omitted
        max_events_stored: Oldest events are dropped beyond this many
        log_file_name: Log file, relative to the working directory
        include_tool_input: Record the tool arguments

    Returns:
        ToolBinding for PreToolUse
    """
    return _tool_use_logger(
        EventType.PreToolUse, matcher, max_events_stored, log_file_name,
        include_tool_input, include_tool_response=False,
    )


def log_post_tool_use_events(
    matcher: Optional[str] = None,
    max_events_stored: int = DEFAULT_MAX_EVENTS,
    log_file_name: str = TOOL_USE_LOG,
    include_tool_input: bool = True,
    include_tool_response: bool = True,
) -> ToolBinding:
    """
    Log PostToolUse events to a JSON file in the working directory.

    Args:
        matcher: Tool-name pattern; all tools when omitted
        max_events_stored: Oldest events are dropped beyond this many
        log_file_name: Log file, relative to the working directory
        include_tool_input: Record the tool arguments
        include_tool_response: Record the tool output

    Returns:
        ToolBinding for PostToolUse
    """
    return _tool_use_logger(
        EventType.PostToolUse, matcher, max_events_stored, log_file_name,
        include_tool_input, include_tool_response,
    )


def _stop_entry(payload: EventPayload) -> Dict[str, Any]:
    entry = _base_entry(payload)
    entry["stopHookActive"] = payload.stop_hook_active
    return entry


def log_stop_events(
    max_events_stored: int = DEFAULT_MAX_EVENTS,
    log_file_name: str = STOP_LOG,
) -> Callable[[EventPayload], None]:
    """Return a Stop handler that logs each stop event."""
    return _logger_handler(log_file_name, max_events_stored, _stop_entry, "log_stop_events")


def log_subagent_stop_events(
    max_events_stored: int = DEFAULT_MAX_EVENTS,
    log_file_name: str = STOP_LOG,
) -> Callable[[EventPayload], None]:
    """Return a SubagentStop handler that logs each subagent stop event."""
    return _logger_handler(log_file_name, max_events_stored, _stop_entry, "log_subagent_stop_events")


def log_notification_events(
    max_events_stored: int = DEFAULT_MAX_EVENTS,
    log_file_name: str = NOTIFICATION_LOG,
) -> Callable[[EventPayload], None]:
    """Return a Notification handler that logs each notification message."""
    def build_entry(payload: EventPayload) -> Dict[str, Any]:
        entry = _base_entry(payload)
        entry["message"] = payload.message
        return entry

    return _logger_handler(log_file_name, max_events_stored, build_entry, "log_notification_events")
