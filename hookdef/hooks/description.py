"""
Registry descriptions: the JSON a declaration file prints in describe mode.

A description lists, per event, what the settings document needs to know to
call back into the declaration file:

    {
      "PreToolUse": [{"matcher": "Bash", "index": 0}, {"matcher": "Write|Edit", "index": 1}],
      "Stop": [{"handlerCount": 2}]
    }

Tool events get one descriptor per binding (the index is the binding's
position in the registry); session events get a single descriptor that
covers all of their handlers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .errors import DescribeError, DeclarationError
from .types import EventType


@dataclass(frozen=True)
class ToolDescriptor:
    """One tool binding, addressed by matcher and registry position."""
    event: EventType
    matcher: str
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"matcher": self.matcher, "index": self.index}


@dataclass(frozen=True)
class SessionDescriptor:
    """All handlers of one session event."""
    event: EventType
    handler_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"handlerCount": self.handler_count}


Descriptor = Union[ToolDescriptor, SessionDescriptor]


@dataclass
class RegistryDescription:
    """Ordered mapping of event -> descriptors, in registry order."""
    entries: Dict[EventType, List[Descriptor]] = field(default_factory=dict)

    def add(self, descriptor: Descriptor) -> None:
        self.entries.setdefault(descriptor.event, []).append(descriptor)

    def events(self) -> List[EventType]:
        return list(self.entries)

    def descriptors(self, event: EventType) -> List[Descriptor]:
        return list(self.entries.get(event, []))

    def __contains__(self, event: EventType) -> bool:
        return event in self.entries

    def __len__(self) -> int:
        return sum(len(d) for d in self.entries.values())

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Convert to the wire form printed by describe mode."""
        return {
            event.value: [d.to_dict() for d in descriptors]
            for event, descriptors in self.entries.items()
        }

    @classmethod
    def from_dict(cls, data: Any) -> "RegistryDescription":
        """
        Parse the wire form produced by a declaration file.

        Args:
            data: Decoded JSON from describe mode

        Returns:
            RegistryDescription

        Raises:
            DescribeError: If the data does not have the expected shape
        """
        if not isinstance(data, dict):
            raise DescribeError("Registry description must be a JSON object")

        description = cls()
        for name, items in data.items():
            try:
                event = EventType.parse(name)
            except DeclarationError as e:
                raise DescribeError(str(e))
            if not isinstance(items, list):
                raise DescribeError(f"Descriptors for {name} must be a list")

            for item in items:
                if not isinstance(item, dict):
                    raise DescribeError(f"Invalid descriptor for {name}: {item!r}")
                if event.is_tool_event:
                    matcher = item.get("matcher")
                    index = item.get("index")
                    if not isinstance(matcher, str) or not isinstance(index, int) or isinstance(index, bool):
                        raise DescribeError(f"Tool descriptor for {name} needs a matcher and an index: {item!r}")
                    description.add(ToolDescriptor(event, matcher, index))
                else:
                    count = item.get("handlerCount", 1)
                    if not isinstance(count, int) or isinstance(count, bool):
                        raise DescribeError(f"Invalid handlerCount for {name}: {item!r}")
                    description.add(SessionDescriptor(event, count))

        return description
