"""
Execution dispatcher for declared hooks.

A declaration file is run in one of two modes:

    describe                          print the registry description as JSON
    invoke <Event> [<matcher> <index>]  read one event payload from stdin and
                                        run the handler(s) it selects

Only invoke mode reads stdin. Diagnostics go to stderr; stdout carries
nothing but the description or the final hook result.
"""

import asyncio
import inspect
import json
import sys
from typing import Any, List, Optional, Sequence, TextIO

from .hooks.errors import (
    EventMismatchError,
    HandlerExecutionError,
    HookdefError,
    PayloadParseError,
    UsageError,
)
from .hooks.matcher import matches
from .hooks.registry import HookRegistry
from .hooks.types import EventPayload, EventType, ExitCode, HookBinding, HookResult
from .logger import logger

DESCRIBE = "describe"
INVOKE = "invoke"
MODES = (DESCRIBE, INVOKE)


def aggregate_results(results: Sequence[Optional[HookResult]]) -> Optional[HookResult]:
    """
    Pick the result to report to the host.

    A blocking result wins outright; otherwise the first non-empty result is kept.
    """
    final = None
    for result in results:
        if result is None:
            continue
        if result.is_block:
            return result
        if final is None:
            final = result
    return final


class Dispatcher:
    """
    Runs a HookRegistry according to the runner's command-line arguments.

    Example:
        code = Dispatcher(registry).run(["invoke", "PreToolUse", "Bash", "0"])
    """

    def __init__(self, registry: HookRegistry):
        self.registry = registry

    def run(
        self,
        args: Sequence[str],
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> int:
        """
        Execute one describe or invoke request.

        Args:
            args: Arguments after the declaration file path
            stdin: Event payload source (invoke mode)
            stdout: Description / result sink
            stderr: Diagnostic sink

        Returns:
            Process exit code
        """
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        stderr = stderr or sys.stderr

        try:
            mode = args[0] if args else None
            if mode == DESCRIBE:
                return self.describe(stdout)
            if mode == INVOKE:
                return self.invoke(list(args[1:]), stdin, stdout, stderr)
            raise UsageError(f"Unknown mode {mode!r} (expected one of: {', '.join(MODES)})")
        except HandlerExecutionError as e:
            logger.debug(f"[dispatch] {e}")
            print(f"Hook execution error: {e}", file=stderr)
            return ExitCode.ERROR
        except HookdefError as e:
            print(f"Error: {e}", file=stderr)
            return ExitCode.ERROR

    def describe(self, stdout: TextIO) -> int:
        """Print the registry description."""
        description = self.registry.describe()
        stdout.write(json.dumps(description.to_dict()) + "\n")
        logger.debug(f"[dispatch] Described {len(description)} hook entries")
        return ExitCode.SUCCESS

    def invoke(
        self,
        args: List[str],
        stdin: TextIO,
        stdout: TextIO,
        stderr: TextIO,
    ) -> int:
        """Run the handler(s) selected by ``args`` against the payload on stdin."""
        if not args:
            raise UsageError("invoke requires an event name")
        try:
            event = EventType(args[0])
        except ValueError:
            raise UsageError(f"Unknown hook event {args[0]!r}")

        data = self._read_payload(stdin)
        received = data.get("hook_event_name")
        if received != event.value:
            raise EventMismatchError(f"Expected {event.value} hook, got {received}")

        bindings = self.registry.bindings(event)
        if not bindings:
            logger.debug(f"[dispatch] No handlers for {event.value}")
            return ExitCode.SUCCESS

        payload = EventPayload.from_dict(data)
        if event.is_tool_event:
            selected = self._select_tool_binding(bindings, args[1:], payload)
        else:
            selected = bindings

        results = [self._execute(binding, payload) for binding in selected]
        return self._emit(aggregate_results(results), stdout, stderr)

    def _read_payload(self, stdin: TextIO) -> dict:
        raw = stdin.read()
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PayloadParseError(f"Invalid JSON input: {e}")
        if not isinstance(data, dict):
            raise PayloadParseError("Invalid JSON input: expected an object")
        return data

    def _select_tool_binding(
        self,
        bindings: List[HookBinding],
        args: List[str],
        payload: EventPayload,
    ) -> List[HookBinding]:
        if len(args) < 2:
            raise UsageError(f"{payload.event.value} requires a matcher and an index")
        matcher, raw_index = args[0], args[1]
        try:
            index = int(raw_index)
        except ValueError:
            raise UsageError(f"Invalid hook index {raw_index!r}")

        if payload.tool_name is None:
            logger.debug("[dispatch] Payload has no tool_name, nothing to run")
            return []
        if not matches(matcher, payload.tool_name):
            logger.debug(f"[dispatch] Tool {payload.tool_name} does not match {matcher!r}")
            return []
        if not 0 <= index < len(bindings):
            logger.debug(f"[dispatch] No {payload.event.value} handler at index {index}")
            return []
        return [bindings[index]]

    def _execute(self, binding: HookBinding, payload: EventPayload) -> Optional[HookResult]:
        """Execute a single hook handler."""
        try:
            result = binding.handler(payload)
            if inspect.isawaitable(result):
                result = asyncio.run(_await(result))
        except Exception as e:
            raise HandlerExecutionError(f"{binding.name} raised {type(e).__name__}: {e}") from e

        if result is None:
            return None
        # Handle dict return for convenience
        if isinstance(result, dict):
            try:
                result = HookResult.from_dict(result)
            except (TypeError, ValueError) as e:
                raise HandlerExecutionError(f"{binding.name} returned an invalid result: {e}")
        elif not isinstance(result, HookResult):
            raise HandlerExecutionError(
                f"{binding.name} returned {type(result).__name__}, expected HookResult, dict or None"
            )

        try:
            json.dumps(result.to_dict())
        except (TypeError, ValueError) as e:
            raise HandlerExecutionError(
                f"{binding.name} returned a result that is not JSON serializable: {e}"
            )
        return result

    def _emit(self, result: Optional[HookResult], stdout: TextIO, stderr: TextIO) -> int:
        if result is None:
            return ExitCode.SUCCESS

        stdout.write(json.dumps(result.to_dict()) + "\n")
        if result.is_block:
            if result.reason:
                print(result.reason, file=stderr)
            return ExitCode.BLOCKING_ERROR
        return ExitCode.SUCCESS


async def _await(awaitable: Any) -> Any:
    return await awaitable
