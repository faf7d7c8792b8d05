"""
Tests for the execution dispatcher.

Tests cover:
- describe mode
- invoke mode for tool and session events
- Result aggregation (block precedence)
- Error handling and exit codes
"""

import io
import json

import pytest

from hookdef.dispatch import Dispatcher, aggregate_results
from hookdef.hooks import EventType, HookRegistry, HookResult, define_hooks, tool_hook


def run(registry, args, payload=None):
    """Run the dispatcher and return (exit code, stdout, stderr)."""
    if payload is None:
        stdin = io.StringIO("")
    elif isinstance(payload, str):
        stdin = io.StringIO(payload)
    else:
        stdin = io.StringIO(json.dumps(payload))
    stdout = io.StringIO()
    stderr = io.StringIO()
    code = Dispatcher(registry).run(args, stdin=stdin, stdout=stdout, stderr=stderr)
    return code, stdout.getvalue(), stderr.getvalue()


def bash_payload(command="ls", event="PreToolUse"):
    return {
        "hook_event_name": event,
        "session_id": "s1",
        "tool_name": "Bash",
        "tool_input": {"command": command},
    }


class TestAggregateResults:
    """Tests for aggregate_results."""

    def test_empty(self):
        assert aggregate_results([]) is None
        assert aggregate_results([None, None]) is None

    def test_first_result_kept(self):
        first = HookResult(suppress_output=True)
        second = HookResult.approve()
        assert aggregate_results([None, first, second]) is first

    def test_block_takes_precedence(self):
        """Test that a block wins over earlier non-blocking results."""
        block = HookResult.block("x")
        assert aggregate_results([HookResult.approve(), None, block]) is block

    def test_first_block_wins(self):
        first = HookResult.block("first")
        assert aggregate_results([first, HookResult.block("second")]) is first


class TestDescribe:
    """Tests for describe mode."""

    def test_describe(self):
        registry = define_hooks({
            "PreToolUse": [tool_hook("Bash", lambda p: None)],
            "Stop": [lambda p: None],
        })

        code, out, err = run(registry, ["describe"])

        assert code == 0
        assert json.loads(out) == {
            "PreToolUse": [{"matcher": "Bash", "index": 0}],
            "Stop": [{"handlerCount": 1}],
        }

    def test_describe_empty_registry(self):
        code, out, _ = run(HookRegistry(), ["describe"])
        assert code == 0
        assert json.loads(out) == {}

    def test_describe_does_not_read_stdin(self):
        """Test that describe mode ignores whatever is on stdin."""
        code, out, _ = run(HookRegistry(), ["describe"], payload="not json")
        assert code == 0
        assert json.loads(out) == {}


class TestInvokeToolEvents:
    """Tests for invoke mode on PreToolUse/PostToolUse."""

    def test_selected_handler_runs(self):
        calls = []

        def first(payload):
            calls.append("first")

        def second(payload):
            calls.append(("second", payload.tool_input["command"]))

        registry = define_hooks({"PreToolUse": [("Bash", first), ("Bash", second)]})

        code, out, _ = run(registry, ["invoke", "PreToolUse", "Bash", "1"], bash_payload("ls"))

        assert code == 0
        assert out == ""
        assert calls == [("second", "ls")]

    def test_block_exits_with_blocking_code(self):
        """Test that a blocking result prints JSON and the reason, and exits 2."""
        registry = define_hooks({
            "PreToolUse": [tool_hook("Bash", lambda p: HookResult.block("x"))],
        })

        code, out, err = run(registry, ["invoke", "PreToolUse", "Bash", "0"], bash_payload())

        assert code == 2
        assert json.loads(out) == {"decision": "block", "reason": "x"}
        assert "x" in err

    def test_non_blocking_result_printed(self):
        registry = define_hooks({
            "PostToolUse": [tool_hook("Bash", lambda p: HookResult(suppress_output=True))],
        })

        code, out, _ = run(
            registry, ["invoke", "PostToolUse", "Bash", "0"], bash_payload(event="PostToolUse")
        )

        assert code == 0
        assert json.loads(out) == {"suppressOutput": True}

    def test_dict_result(self):
        """Test that handlers may return a plain dict."""
        registry = define_hooks({
            "PreToolUse": [tool_hook("Bash", lambda p: {"decision": "approve", "reason": "ok"})],
        })

        code, out, _ = run(registry, ["invoke", "PreToolUse", "Bash", "0"], bash_payload())

        assert code == 0
        assert json.loads(out) == {"decision": "approve", "reason": "ok"}

    def test_async_handler(self):
        async def check(payload):
            return HookResult.block("async says no")

        registry = define_hooks({"PreToolUse": [tool_hook("Bash", check)]})

        code, out, err = run(registry, ["invoke", "PreToolUse", "Bash", "0"], bash_payload())

        assert code == 2
        assert "async says no" in err

    def test_matcher_mismatch_is_noop(self):
        """Test that a tool not selected by the matcher runs nothing."""
        calls = []
        registry = define_hooks({"PreToolUse": [tool_hook("Write", lambda p: calls.append(p))]})

        code, out, _ = run(registry, ["invoke", "PreToolUse", "Write", "0"], bash_payload())

        assert code == 0
        assert out == ""
        assert calls == []

    def test_missing_tool_name_is_noop(self):
        calls = []
        registry = define_hooks({"PreToolUse": [tool_hook("*", lambda p: calls.append(p))]})

        code, _, _ = run(registry, ["invoke", "PreToolUse", "*", "0"], {"hook_event_name": "PreToolUse"})

        assert code == 0
        assert calls == []

    def test_index_out_of_range_is_noop(self):
        registry = define_hooks({"PreToolUse": [tool_hook("Bash", lambda p: HookResult.block("x"))]})

        code, out, _ = run(registry, ["invoke", "PreToolUse", "Bash", "5"], bash_payload())

        assert code == 0
        assert out == ""

    def test_missing_index(self):
        registry = define_hooks({"PreToolUse": [tool_hook("Bash", lambda p: None)]})

        code, _, err = run(registry, ["invoke", "PreToolUse", "Bash"], bash_payload())

        assert code == 1
        assert "requires a matcher and an index" in err

    def test_invalid_index(self):
        registry = define_hooks({"PreToolUse": [tool_hook("Bash", lambda p: None)]})

        code, _, err = run(registry, ["invoke", "PreToolUse", "Bash", "first"], bash_payload())

        assert code == 1
        assert "Invalid hook index" in err


class TestInvokeSessionEvents:
    """Tests for invoke mode on session events."""

    def test_all_handlers_run_in_order(self):
        calls = []
        registry = define_hooks({
            "Stop": [lambda p: calls.append(1), lambda p: calls.append(2)],
        })

        code, out, _ = run(registry, ["invoke", "Stop"], {"hook_event_name": "Stop"})

        assert code == 0
        assert out == ""
        assert calls == [1, 2]

    def test_block_from_later_handler_wins(self):
        registry = define_hooks({
            "Stop": [
                lambda p: HookResult(stop_reason="first"),
                lambda p: HookResult.block("keep working"),
            ],
        })

        code, out, err = run(registry, ["invoke", "Stop"], {"hook_event_name": "Stop"})

        assert code == 2
        assert json.loads(out)["decision"] == "block"
        assert "keep working" in err

    def test_no_handlers_is_silent(self):
        """Test that an event without handlers exits 0 with no output."""
        code, out, err = run(
            HookRegistry(), ["invoke", "Notification"],
            {"hook_event_name": "Notification", "message": "hi"},
        )

        assert code == 0
        assert out == ""
        assert err == ""


class TestInvokeErrors:
    """Tests for invoke-mode failures."""

    def test_invalid_json(self):
        registry = define_hooks({"Stop": [lambda p: None]})

        code, out, err = run(registry, ["invoke", "Stop"], "{not json")

        assert code == 1
        assert out == ""
        assert "Invalid JSON input" in err

    def test_payload_not_an_object(self):
        code, _, err = run(HookRegistry(), ["invoke", "Stop"], "[1, 2]")
        assert code == 1
        assert "expected an object" in err

    def test_event_mismatch(self):
        registry = define_hooks({"Stop": [lambda p: None]})

        code, _, err = run(registry, ["invoke", "Stop"], {"hook_event_name": "Notification"})

        assert code == 1
        assert "Expected Stop hook, got Notification" in err

    def test_handler_exception(self):
        """Test that a raising handler exits 1 with nothing on stdout."""
        def broken(payload):
            raise RuntimeError("boom")

        registry = define_hooks({"Stop": [broken]})

        code, out, err = run(registry, ["invoke", "Stop"], {"hook_event_name": "Stop"})

        assert code == 1
        assert out == ""
        assert "Hook execution error" in err
        assert "boom" in err

    def test_handler_invalid_return_type(self):
        registry = define_hooks({"Stop": [lambda p: "yes"]})

        code, out, err = run(registry, ["invoke", "Stop"], {"hook_event_name": "Stop"})

        assert code == 1
        assert out == ""
        assert "expected HookResult" in err

    def test_handler_invalid_decision(self):
        registry = define_hooks({"Stop": [lambda p: {"decision": "perhaps"}]})

        code, _, err = run(registry, ["invoke", "Stop"], {"hook_event_name": "Stop"})

        assert code == 1
        assert "invalid result" in err

    def test_unknown_event(self):
        code, _, err = run(HookRegistry(), ["invoke", "OnStart"], {"hook_event_name": "OnStart"})
        assert code == 1
        assert "Unknown hook event" in err

    def test_missing_event(self):
        code, _, err = run(HookRegistry(), ["invoke"])
        assert code == 1
        assert "requires an event name" in err

    def test_result_not_json_serializable(self):
        """Test that a result the host cannot receive is reported as a handler error."""
        registry = define_hooks({"Stop": [lambda p: HookResult(reason={1, 2})]})

        code, out, err = run(registry, ["invoke", "Stop"], {"hook_event_name": "Stop"})

        assert code == 1
        assert out == ""
        assert "Hook execution error" in err
        assert "not JSON serializable" in err

    def test_dict_result_not_json_serializable(self):
        registry = define_hooks({
            "PreToolUse": [tool_hook("Bash", lambda p: {"decision": "approve", "extra": object()})],
        })

        code, out, err = run(registry, ["invoke", "PreToolUse", "Bash", "0"], bash_payload())

        assert code == 1
        assert out == ""
        assert "not JSON serializable" in err

    def test_unknown_mode(self):
        code, _, err = run(HookRegistry(), ["list"])
        assert code == 1
        assert "Unknown mode" in err

    def test_no_mode(self):
        code, _, _ = run(HookRegistry(), [])
        assert code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
