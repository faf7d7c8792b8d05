"""
Settings reconciler.

Merges the entries generated from a registry description into a host
settings document:

    {
      "permissions": {...},                    # untouched
      "hooks": {
        "PreToolUse": [
          {"matcher": "Write", "hooks": [{"type": "command", "command": "echo hi"}]},   # user entry, kept
          {"matcher": "Bash", "hooks": [{"type": "command", "command": "... # __managed_by_hookdef__"}]}
        ]
      }
    }

Entries carrying the scope's marker are regenerated on every run; everything
else is left exactly where it was. Reconciling twice with the same
description gives the same document.
"""

import copy
import json
import shlex
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import DEFAULT_RUNNER
from ..hooks.description import Descriptor, RegistryDescription, ToolDescriptor
from ..hooks.errors import SettingsShapeError
from ..hooks.types import EventType
from ..logger import logger
from .marker import ManagedMarker

HOOKS_KEY = "hooks"
CLI_NAME = "hookdef"


@dataclass
class ReconcileResult:
    """
    Outcome of reconciling one settings document.

    Attributes:
        document: The updated settings document
        added: Number of managed entries generated
        removed: Number of managed entries dropped from the input
        warnings: Recoverable problems (e.g. unparseable input)
        changed: Whether the document differs from the input
    """
    document: Dict[str, Any]
    added: int = 0
    removed: int = 0
    warnings: List[str] = field(default_factory=list)
    changed: bool = False


def parse_document(existing: Any) -> Tuple[Dict[str, Any], List[str]]:
    """
    Normalize an existing settings document.

    Args:
        existing: A decoded document, its JSON text, or None

    Returns:
        Tuple of (a private copy of the document, warnings). Text that cannot
        be parsed, or JSON that is not an object, yields an empty document and
        a warning.
    """
    if existing is None:
        return {}, []

    if isinstance(existing, (str, bytes)):
        if not existing.strip():
            return {}, []
        try:
            existing = json.loads(existing)
        except ValueError as e:
            return {}, [f"Could not parse existing settings, starting from an empty document: {e}"]

    if not isinstance(existing, dict):
        return {}, ["Existing settings are not a JSON object, starting from an empty document"]
    return copy.deepcopy(existing), []


def build_command(
    event: EventType,
    command_path: str,
    marker: ManagedMarker,
    runner: str = DEFAULT_RUNNER,
    matcher: Optional[str] = None,
    index: Optional[int] = None,
) -> str:
    """
    Build the shell command the host runs for one generated entry.

    The command fails with a diagnostic if the declaration file has gone
    missing, and otherwise passes the runner's exit code through unchanged.

    Args:
        event: Hook event
        command_path: Declaration file path as the host should see it
        marker: Marker appended as a trailing shell comment
        runner: Command that runs declaration files
        matcher: Tool matcher (tool events)
        index: Binding position (tool events)

    Returns:
        The command line
    """
    path = shlex.quote(command_path)
    invocation = [runner, path, "invoke", event.value]
    if event.is_tool_event:
        invocation += [shlex.quote(matcher or ""), shlex.quote(str(index))]

    not_found = shlex.quote(f"Error: Hook script not found at {command_path}")
    guard = (
        f"test -f {path} || {{ >&2 echo {not_found}; "
        f">&2 echo 'Please run: {CLI_NAME}'; exit 1; }}"
    )
    return f"{guard}; {' '.join(invocation)} # {marker}"


def managed_entry(
    descriptor: Descriptor,
    command_path: str,
    marker: ManagedMarker,
    runner: str = DEFAULT_RUNNER,
) -> Dict[str, Any]:
    """Build the matcher entry for one descriptor."""
    if isinstance(descriptor, ToolDescriptor):
        command = build_command(
            descriptor.event, command_path, marker, runner,
            matcher=descriptor.matcher, index=descriptor.index,
        )
        return {
            "matcher": descriptor.matcher,
            "hooks": [{"type": "command", "command": command}],
        }

    command = build_command(descriptor.event, command_path, marker, runner)
    return {"hooks": [{"type": "command", "command": command}]}


def _hooks_section(document: Dict[str, Any]) -> Dict[str, Any]:
    hooks = document.get(HOOKS_KEY)
    if hooks is None:
        return {}
    if not isinstance(hooks, dict):
        raise SettingsShapeError(f"'{HOOKS_KEY}' must be a JSON object, got {type(hooks).__name__}")
    return hooks


def _reconcile(
    existing: Any,
    description: RegistryDescription,
    marker: ManagedMarker,
    command_path: Optional[str],
    runner: str,
) -> ReconcileResult:
    document, warnings = parse_document(existing)
    original = copy.deepcopy(document)
    had_hooks = HOOKS_KEY in document
    hooks = _hooks_section(document)
    wanted = {event.value for event in description.events()}

    removed = 0
    for name in list(hooks):
        entries = hooks[name]
        if not isinstance(entries, list):
            if name in wanted:
                raise SettingsShapeError(f"'{HOOKS_KEY}.{name}' must be a list")
            continue

        kept = [entry for entry in entries if not marker.is_managed(entry)]
        dropped = len(entries) - len(kept)
        removed += dropped
        if dropped:
            hooks[name] = kept
            # Keys the description refills keep their position
            if not kept and name not in wanted:
                del hooks[name]

    added = 0
    for event in description.events():
        entries = hooks.setdefault(event.value, [])
        for descriptor in description.descriptors(event):
            entries.append(managed_entry(descriptor, command_path, marker, runner))
            added += 1
        if not entries:
            del hooks[event.value]

    if hooks or had_hooks:
        document[HOOKS_KEY] = hooks

    logger.debug(f"[settings] Reconciled under {marker}: +{added} -{removed}")
    return ReconcileResult(
        document=document,
        added=added,
        removed=removed,
        warnings=warnings,
        changed=bool(warnings) or document != original,
    )


def reconcile(
    existing: Any,
    description: RegistryDescription,
    marker: ManagedMarker,
    command_path: str,
    runner: str = DEFAULT_RUNNER,
) -> ReconcileResult:
    """
    Replace the managed entries of a settings document with freshly generated ones.

    For every event in ``description`` the entry list becomes the existing
    unmanaged entries, in their original order, followed by one managed entry
    per descriptor. Managed entries of other events are removed, and an event
    emptied by that removal is dropped. Everything outside the hooks section
    is passed through. The input is never modified.

    Args:
        existing: Current document (dict, JSON text or None)
        description: What the declaration file registers
        marker: Marker of the scope being reconciled
        command_path: Declaration file path embedded in generated commands
        runner: Command that runs declaration files

    Returns:
        ReconcileResult

    Raises:
        SettingsShapeError: If the hooks section cannot be edited safely
    """
    return _reconcile(existing, description, marker, command_path, runner)


def strip_managed(existing: Any, marker: ManagedMarker) -> ReconcileResult:
    """
    Remove every entry managed under ``marker`` and nothing else.

    Args:
        existing: Current document (dict, JSON text or None)
        marker: Marker of the scope being cleaned up

    Returns:
        ReconcileResult with ``added == 0``
    """
    return _reconcile(existing, RegistryDescription(), marker, None, DEFAULT_RUNNER)
