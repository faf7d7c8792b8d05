"""
Tests for the ready-made handlers.

Tests cover:
- block_env_files
- JSON event logging (tool use, stop, notification)
- Log trimming and recovery from unreadable logs
"""

import json

import pytest

from hookdef.hooks import EventPayload, EventType, ToolBinding, matches
from hookdef.handlers import (
    append_event,
    block_env_files,
    is_blocked_env_path,
    log_notification_events,
    log_post_tool_use_events,
    log_pre_tool_use_events,
    log_stop_events,
    log_subagent_stop_events,
)


def tool_payload(event="PreToolUse", tool_name="Read", **tool_input):
    return EventPayload.from_dict({
        "hook_event_name": event,
        "session_id": "s1",
        "transcript_path": "/tmp/t.jsonl",
        "tool_name": tool_name,
        "tool_input": tool_input,
        "tool_response": {"ok": True},
    })


class TestBlockEnvFiles:
    """Tests for block_env_files."""

    def test_binding(self):
        assert isinstance(block_env_files, ToolBinding)
        assert block_env_files.event is EventType.PreToolUse
        for tool in ("Read", "Write", "Edit", "MultiEdit"):
            assert matches(block_env_files.matcher, tool)
        assert not matches(block_env_files.matcher, "Bash")

    @pytest.mark.parametrize("path", [
        ".env",
        "/repo/.env",
        "config/.env.local",
        "/repo/.env.production",
        "C:\\repo\\.ENV",
    ])
    def test_blocked_paths(self, path):
        assert is_blocked_env_path(path)

    @pytest.mark.parametrize("path", [
        ".env.example",
        "/repo/.env.sample",
        ".env.local.template",
        ".env.dist",
        "environment.py",
        "/repo/.envrc.d/notes.txt",
        "README.md",
    ])
    def test_allowed_paths(self, path):
        assert not is_blocked_env_path(path)

    def test_blocks_env_read(self):
        result = block_env_files.handler(tool_payload(file_path="/repo/.env"))

        assert result.is_block
        assert "/repo/.env" in result.reason
        assert ".env.example" in result.reason

    def test_allows_other_files(self):
        assert block_env_files.handler(tool_payload(file_path="/repo/main.py")) is None

    def test_no_file_path(self):
        assert block_env_files.handler(tool_payload(tool_name="Write")) is None


class TestAppendEvent:
    """Tests for append_event."""

    def test_creates_log(self, tmp_path):
        log_path = tmp_path / "log.json"
        append_event(log_path, {"n": 1})
        assert json.loads(log_path.read_text()) == [{"n": 1}]

    def test_keeps_most_recent(self, tmp_path):
        log_path = tmp_path / "log.json"
        for n in range(5):
            append_event(log_path, {"n": n}, max_events=3)

        assert [e["n"] for e in json.loads(log_path.read_text())] == [2, 3, 4]

    def test_zero_max_events_keeps_nothing(self, tmp_path):
        log_path = tmp_path / "log.json"
        log_path.write_text(json.dumps([{"n": 0}, {"n": 1}]))

        append_event(log_path, {"n": 2}, max_events=0)

        assert json.loads(log_path.read_text()) == []

    def test_unreadable_log_restarts(self, tmp_path):
        log_path = tmp_path / "log.json"
        log_path.write_text("not json")

        append_event(log_path, {"n": 1})

        assert json.loads(log_path.read_text()) == [{"n": 1}]


class TestEventLoggers:
    """Tests for the logging handlers, run in a temporary working directory."""

    @pytest.fixture(autouse=True)
    def workdir(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def test_pre_tool_use(self, workdir):
        binding = log_pre_tool_use_events()
        assert binding.event is EventType.PreToolUse
        assert binding.matcher == ".*"
        assert binding.name == "log_pre_tool_use_events"

        assert binding.handler(tool_payload(file_path="a.py")) is None

        entry = json.loads((workdir / "hook-log.tool-use.json").read_text())[0]
        assert entry["event"] == "PreToolUse"
        assert entry["sessionId"] == "s1"
        assert entry["transcriptPath"] == "/tmp/t.jsonl"
        assert entry["toolName"] == "Read"
        assert entry["toolInput"] == {"file_path": "a.py"}
        assert "toolResponse" not in entry
        assert "timestamp" in entry

    def test_pre_tool_use_without_input(self, workdir):
        binding = log_pre_tool_use_events("Bash", log_file_name="bash.json", include_tool_input=False)
        assert binding.matcher == "Bash"

        binding.handler(tool_payload(tool_name="Bash", command="ls"))

        entry = json.loads((workdir / "bash.json").read_text())[0]
        assert "toolInput" not in entry

    def test_post_tool_use(self, workdir):
        binding = log_post_tool_use_events(max_events_stored=1)
        assert binding.event is EventType.PostToolUse

        binding.handler(tool_payload(event="PostToolUse", file_path="a.py"))
        binding.handler(tool_payload(event="PostToolUse", file_path="b.py"))

        entries = json.loads((workdir / "hook-log.tool-use.json").read_text())
        assert len(entries) == 1
        assert entries[0]["toolInput"] == {"file_path": "b.py"}
        assert entries[0]["toolResponse"] == {"ok": True}

    def test_stop_and_subagent_stop_share_a_log(self, workdir):
        log_stop_events()(EventPayload.from_dict({"hook_event_name": "Stop", "stop_hook_active": False}))
        log_subagent_stop_events()(EventPayload.from_dict({"hook_event_name": "SubagentStop"}))

        entries = json.loads((workdir / "hook-log.stop.json").read_text())
        assert [e["event"] for e in entries] == ["Stop", "SubagentStop"]
        assert entries[0]["stopHookActive"] is False

    def test_notification(self, workdir):
        handler = log_notification_events()
        assert handler.__name__ == "log_notification_events"

        handler(EventPayload.from_dict({"hook_event_name": "Notification", "message": "Waiting"}))

        entries = json.loads((workdir / "hook-log.notification.json").read_text())
        assert entries[0]["message"] == "Waiting"

    def test_write_failure_does_not_raise(self, workdir):
        """Test that an unwritable log is reported, not raised to the host."""
        (workdir / "hook-log.stop.json").mkdir()

        assert log_stop_events()(EventPayload.from_dict({"hook_event_name": "Stop"})) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
