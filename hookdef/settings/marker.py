"""
Markers that identify settings entries written by hookdef.

Each generated command ends with a shell comment carrying the marker, e.g.

    ... # __managed_by_hookdef__
    ... # __managed_by_hookdef__[/home/me/project]

The namespaced form is used in the user-wide settings document, which is
shared by every project on the machine.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

MANAGED_BY_MARKER = "__managed_by_hookdef__"


@dataclass(frozen=True)
class ManagedMarker:
    """A marker token, optionally namespaced by the originating project."""
    namespace: Optional[str] = None

    @property
    def token(self) -> str:
        if self.namespace is None:
            return MANAGED_BY_MARKER
        return f"{MANAGED_BY_MARKER}[{self.namespace}]"

    def __str__(self) -> str:
        return self.token

    def _pattern(self) -> "re.Pattern":
        # The bare token must not match the start of a namespaced one
        return re.compile(re.escape(self.token) + r"(?!\[)")

    def in_command(self, command: Any) -> bool:
        """Check whether a command string carries this marker."""
        return isinstance(command, str) and self._pattern().search(command) is not None

    def is_managed(self, entry: Any) -> bool:
        """
        Check whether a matcher entry was generated under this marker.

        An entry is managed only if it holds exactly one command and that
        command carries the marker. Anything else is user content.
        """
        if not isinstance(entry, dict):
            return False
        hooks = entry.get("hooks")
        if not isinstance(hooks, list) or len(hooks) != 1:
            return False
        command_entry = hooks[0]
        if not isinstance(command_entry, dict):
            return False
        return self.in_command(command_entry.get("command"))
