"""
Hook registry and declaration API.

A HookRegistry is built by a declaration file and consumed by the dispatcher.
Bindings are appended in registration order and never removed, because the
settings document addresses tool bindings by their position.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..logger import logger
from .description import RegistryDescription, SessionDescriptor, ToolDescriptor
from .errors import DeclarationError
from .types import EventType, HookBinding, HookHandler, SessionBinding, ToolBinding


class HookRegistry:
    """
    Ordered collection of hook bindings per event.

    Example:
        hooks = HookRegistry()

        @hooks.on(EventType.PreToolUse, matcher="Bash")
        def check_command(payload):
            if "rm -rf /" in payload.tool_input.get("command", ""):
                return HookResult.block("Dangerous command blocked")

        # Or register directly
        hooks.register(EventType.Stop, my_handler)
    """

    def __init__(self):
        self._bindings: Dict[EventType, List[HookBinding]] = {
            event: [] for event in EventType
        }

    def on(
        self,
        event: Union[EventType, str],
        matcher: Optional[str] = None,
    ) -> Callable[[HookHandler], HookHandler]:
        """
        Decorator to register a hook handler for a specific event.

        Args:
            event: The hook event to listen for
            matcher: Tool-name pattern (tool events only)

        Returns:
            Decorator function
        """
        def decorator(handler: HookHandler) -> HookHandler:
            self.register(event, handler, matcher=matcher)
            return handler
        return decorator

    def register(
        self,
        event: Union[EventType, str],
        handler: HookHandler,
        matcher: Optional[str] = None,
    ) -> "HookRegistry":
        """
        Register a hook handler for a specific event.

        Args:
            event: The hook event to listen for
            handler: Callable that takes an EventPayload and returns an optional HookResult
            matcher: Tool-name pattern; required for tool events, rejected otherwise

        Returns:
            This registry, so registrations can be chained

        Raises:
            DeclarationError: If the event is unknown or the matcher does not fit the event
        """
        event = EventType.parse(event)
        if event.is_tool_event:
            if matcher is None:
                raise DeclarationError(f"{event.value} hooks require a matcher")
            binding = ToolBinding(event, matcher, handler)
        else:
            if matcher is not None:
                raise DeclarationError(f"{event.value} hooks do not take a matcher")
            binding = SessionBinding(event, handler)
        return self.add(binding)

    def add(self, binding: HookBinding) -> "HookRegistry":
        """Append an already constructed binding."""
        if not isinstance(binding, (ToolBinding, SessionBinding)):
            raise DeclarationError(f"Not a hook binding: {binding!r}")
        self._bindings[binding.event].append(binding)
        logger.debug(f"[hooks] Registered handler for {binding.event.value}: {binding.name}")
        return self

    def bindings(self, event: Union[EventType, str]) -> List[HookBinding]:
        """Return the bindings for an event, in registration order."""
        return list(self._bindings[EventType.parse(event)])

    def has_hooks(self, event: Union[EventType, str]) -> bool:
        """Check if any hooks are registered for an event."""
        return bool(self._bindings[EventType.parse(event)])

    def __len__(self) -> int:
        return sum(len(b) for b in self._bindings.values())

    def list_hooks(self, event: Optional[EventType] = None) -> Dict[str, List[str]]:
        """
        List all registered hooks.

        Args:
            event: Optional event to filter by

        Returns:
            Dictionary of event name -> list of handler names
        """
        result = {}
        events = [event] if event else list(EventType)

        for e in events:
            names = [b.name for b in self._bindings[e]]
            if names:
                result[e.value] = names

        return result

    def describe(self) -> RegistryDescription:
        """
        Build the description printed in describe mode.

        Tool events produce one descriptor per binding, carrying the binding's
        position; session events produce one descriptor with a handler count.
        Events without bindings are left out.
        """
        description = RegistryDescription()
        for event in EventType:
            bindings = self._bindings[event]
            if not bindings:
                continue
            if event.is_tool_event:
                for index, binding in enumerate(bindings):
                    description.add(ToolDescriptor(event, binding.matcher, index))
            else:
                description.add(SessionDescriptor(event, len(bindings)))
        return description


def tool_hook(matcher: str, handler: HookHandler, event: Union[EventType, str] = EventType.PreToolUse) -> ToolBinding:
    """
    Bind a handler to a tool event.

    Args:
        matcher: Tool-name pattern, e.g. "Bash" or "Write|Edit"
        handler: The hook handler
        event: PreToolUse (default) or PostToolUse

    Returns:
        ToolBinding
    """
    return ToolBinding(EventType.parse(event), matcher, handler)


def _coerce_entry(event: EventType, entry: Any) -> HookBinding:
    if isinstance(entry, (ToolBinding, SessionBinding)):
        if entry.event is not event:
            if entry.event.is_tool_event and event.is_tool_event:
                # tool_hook() defaults to PreToolUse; rebind under the key it was listed under
                return ToolBinding(event, entry.matcher, entry.handler)
            raise DeclarationError(
                f"{entry.event.value} binding listed under {event.value}"
            )
        return entry

    if event.is_tool_event:
        if isinstance(entry, dict):
            if "matcher" not in entry or "handler" not in entry:
                raise DeclarationError(f"{event.value} entries need 'matcher' and 'handler'")
            return ToolBinding(event, entry["matcher"], entry["handler"])
        if isinstance(entry, tuple) and len(entry) == 2:
            return ToolBinding(event, entry[0], entry[1])
        raise DeclarationError(
            f"{event.value} entries must be tool_hook(...), (matcher, handler) or "
            f"{{'matcher': ..., 'handler': ...}}, got {entry!r}"
        )

    return SessionBinding(event, entry)


def define_hooks(hooks: Dict[Union[EventType, str], Iterable[Any]]) -> HookRegistry:
    """
    Build a registry from a mapping of event -> handlers.

    Example:
        hooks = define_hooks({
            "PreToolUse": [tool_hook("Bash", check_command), block_env_files],
            "Stop": [log_stop_events()],
        })

    Args:
        hooks: Event (or event name) -> list of entries. Tool events take
            ToolBinding objects, (matcher, handler) tuples or
            {"matcher": ..., "handler": ...} dicts; session events take handlers.

    Returns:
        The assembled HookRegistry

    Raises:
        DeclarationError: On the first malformed entry
    """
    registry = HookRegistry()
    for key, entries in hooks.items():
        event = EventType.parse(key)
        if entries is None:
            continue
        if callable(entries) or isinstance(entries, (ToolBinding, SessionBinding)):
            entries = [entries]
        for entry in entries:
            registry.add(_coerce_entry(event, entry))
    return registry
