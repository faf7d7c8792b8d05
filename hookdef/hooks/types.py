"""
Hook types and data structures for declared lifecycle hooks.
"""

from enum import Enum, IntEnum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from .errors import DeclarationError


class EventType(Enum):
    """
    Lifecycle events the host can run hooks for.

    - PreToolUse: Before the host executes a tool (carries a tool name)
    - PostToolUse: Immediately after a tool finishes (carries a tool name)
    - Notification: When the host shows a notification
    - Stop: When the main agent finishes responding
    - SubagentStop: When a subagent finishes responding
    """
    PreToolUse = "PreToolUse"
    PostToolUse = "PostToolUse"
    Notification = "Notification"
    Stop = "Stop"
    SubagentStop = "SubagentStop"

    @property
    def is_tool_event(self) -> bool:
        """Tool events are selected by a matcher on the tool name."""
        return self in (EventType.PreToolUse, EventType.PostToolUse)

    @classmethod
    def parse(cls, value: Union[str, "EventType"]) -> "EventType":
        """Look up an event by its host name, raising DeclarationError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            names = ", ".join(e.value for e in cls)
            raise DeclarationError(f"Unknown hook event '{value}' (expected one of: {names})")


class ExitCode(IntEnum):
    """Process exit codes understood by the host."""
    SUCCESS = 0
    ERROR = 1
    BLOCKING_ERROR = 2


@dataclass(frozen=True)
class EventPayload:
    """
    Event data the host writes to a hook's stdin.

    Attributes:
        event: The event being delivered
        session_id: Host session identifier
        transcript_path: Path to the session transcript
        tool_name: Tool being run (PreToolUse/PostToolUse)
        tool_input: Tool arguments (PreToolUse/PostToolUse)
        tool_response: Tool output (PostToolUse)
        message: Notification text (Notification)
        stop_hook_active: Whether a stop hook is already running (Stop/SubagentStop)
        raw: The payload exactly as received
    """
    event: EventType
    session_id: Optional[str] = None
    transcript_path: Optional[str] = None
    tool_name: Optional[str] = None
    tool_input: Optional[Dict[str, Any]] = None
    tool_response: Optional[Any] = None
    message: Optional[str] = None
    stop_hook_active: Optional[bool] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventPayload":
        return cls(
            event=EventType.parse(data.get("hook_event_name")),
            session_id=data.get("session_id"),
            transcript_path=data.get("transcript_path"),
            tool_name=data.get("tool_name"),
            tool_input=data.get("tool_input"),
            tool_response=data.get("tool_response"),
            message=data.get("message"),
            stop_hook_active=data.get("stop_hook_active"),
            raw=dict(data),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Read any payload field, including ones without a dedicated attribute."""
        return self.raw.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw)


_RESULT_KEYS = {
    "decision": "decision",
    "reason": "reason",
    "continue": "continue_",
    "stopReason": "stop_reason",
    "suppressOutput": "suppress_output",
}


@dataclass
class HookResult:
    """
    Result returned by a hook handler.

    Attributes:
        decision: "approve" or "block"; None leaves the decision to the host
        reason: Explanation shown for the decision
        continue_: Set to False to stop the host after this hook
        stop_reason: Message shown when continue_ is False
        suppress_output: Hide the hook's stdout from the transcript
        extra: Any further keys to pass through to the host unchanged
    """
    decision: Optional[str] = None
    reason: Optional[str] = None
    continue_: Optional[bool] = None
    stop_reason: Optional[str] = None
    suppress_output: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.decision not in (None, "approve", "block"):
            raise ValueError(f"Invalid decision: {self.decision!r}")

    @property
    def is_block(self) -> bool:
        return self.decision == "block"

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to the host's JSON shape, omitting unset fields."""
        data = {}
        for wire_key, attr in _RESULT_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                data[wire_key] = value
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HookResult":
        known = {attr: data[key] for key, attr in _RESULT_KEYS.items() if key in data}
        extra = {k: v for k, v in data.items() if k not in _RESULT_KEYS}
        return cls(extra=extra, **known)

    @classmethod
    def approve(cls, reason: Optional[str] = None) -> "HookResult":
        """Create a result that lets the tool call proceed without asking."""
        return cls(decision="approve", reason=reason)

    @classmethod
    def block(cls, reason: str) -> "HookResult":
        """Create a result that blocks the action."""
        return cls(decision="block", reason=reason)


# Type alias for hook handlers
HookHandler = Callable[[EventPayload], Optional[Union[HookResult, Dict[str, Any]]]]


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


@dataclass(frozen=True)
class ToolBinding:
    """A handler bound to a tool event, selected by a tool-name matcher."""
    event: EventType
    matcher: str
    handler: HookHandler

    def __post_init__(self):
        object.__setattr__(self, "event", EventType.parse(self.event))
        if not self.event.is_tool_event:
            raise DeclarationError(
                f"{self.event.value} is not a tool event and cannot take a matcher"
            )
        if not isinstance(self.matcher, str):
            raise DeclarationError(f"{self.event.value} matcher must be a string")
        if not callable(self.handler):
            raise DeclarationError(f"{self.event.value} handler is not callable")

    @property
    def name(self) -> str:
        return _handler_name(self.handler)


@dataclass(frozen=True)
class SessionBinding:
    """A handler bound to a session event (no matcher)."""
    event: EventType
    handler: HookHandler

    def __post_init__(self):
        object.__setattr__(self, "event", EventType.parse(self.event))
        if self.event.is_tool_event:
            raise DeclarationError(f"{self.event.value} hooks require a matcher")
        if not callable(self.handler):
            raise DeclarationError(f"{self.event.value} handler is not callable")

    @property
    def name(self) -> str:
        return _handler_name(self.handler)


HookBinding = Union[ToolBinding, SessionBinding]
