"""Tests for claude_pane_monitor.services.status_classifier."""

from datetime import timedelta

import pytest

from claude_pane_monitor.services.status_classifier import (
    RULES,
    classify,
    meaningful_window,
)
from claude_pane_monitor.services.transcript_reader import parse_entry
from claude_pane_monitor.types.sessions import SessionStatus, StatusKind

from helpers import (
    NOW,
    assistant_line,
    interrupt_line,
    progress_line,
    system_line,
    tool_result_line,
    ts,
    user_line,
)


def entries(*lines):
    return [parse_entry(line) for line in lines]


def status_of(*lines, timeout=10.0):
    return classify(entries(*lines), waiting_timeout=timeout, now=NOW)


# ---------------------------------------------------------------------------
# Degenerate windows
# ---------------------------------------------------------------------------

def test_empty_is_unknown():
    assert classify([], now=NOW) == SessionStatus.unknown()


def test_only_bookkeeping_is_ready():
    status = status_of(
        system_line("init"),
        {"type": "file-history-snapshot"},
        {"type": "queue-operation"},
        progress_line("hook_progress"),
    )
    assert status.kind is StatusKind.READY


def test_unrecognized_type_is_unknown():
    assert status_of({"type": "summary"}).kind is StatusKind.UNKNOWN


# ---------------------------------------------------------------------------
# Rules on the last meaningful entry
# ---------------------------------------------------------------------------

class TestLastEntryRules:
    def test_progress_is_processing(self):
        assert status_of(user_line(), progress_line()).kind is StatusKind.PROCESSING

    def test_turn_complete_is_idle(self):
        assert status_of(user_line(), system_line("stop_hook_summary")).kind is StatusKind.IDLE
        assert status_of(user_line(), system_line("turn_duration")).kind is StatusKind.IDLE

    def test_end_turn_is_idle(self):
        assert status_of(user_line(), assistant_line("ok")).kind is StatusKind.IDLE

    def test_text_without_tools_is_idle(self):
        assert status_of(user_line(), assistant_line("thinking", stop_reason=None)).kind is StatusKind.IDLE

    def test_fresh_tool_use_is_processing(self):
        status = status_of(
            user_line(),
            assistant_line(text="", stop_reason="tool_use", tools=["Bash"],
                           timestamp=ts(NOW - timedelta(seconds=2))),
        )
        assert status.kind is StatusKind.PROCESSING

    def test_old_tool_use_is_waiting(self):
        status = status_of(
            user_line(),
            assistant_line(text="", stop_reason="tool_use", tools=["Bash", "Edit"],
                           timestamp=ts(NOW - timedelta(seconds=11))),
        )
        assert status == SessionStatus.waiting(["Bash", "Edit"])
        assert status.describe() == "Waiting (Bash, Edit)"

    def test_tool_use_without_stop_reason(self):
        status = status_of(
            assistant_line(text="", stop_reason=None, tools=["Write"],
                           timestamp=ts(NOW - timedelta(minutes=1))),
        )
        assert status.kind is StatusKind.WAITING_FOR_USER

    def test_waiting_boundary_is_exclusive(self):
        status = status_of(
            assistant_line(text="", stop_reason="tool_use", tools=["Bash"],
                           timestamp=ts(NOW - timedelta(seconds=10))),
        )
        assert status.kind is StatusKind.PROCESSING

    def test_tool_use_without_timestamp_is_processing(self):
        line = assistant_line(text="", stop_reason="tool_use", tools=["Bash"])
        del line["timestamp"]
        assert status_of(line).kind is StatusKind.PROCESSING

    def test_custom_timeout(self):
        status = status_of(
            assistant_line(text="", stop_reason="tool_use", tools=["Bash"],
                           timestamp=ts(NOW - timedelta(seconds=3))),
            timeout=2.0,
        )
        assert status.kind is StatusKind.WAITING_FOR_USER

    def test_interrupt_is_idle(self):
        assert status_of(user_line(), interrupt_line()).kind is StatusKind.IDLE

    def test_tool_result_after_interrupt_is_idle(self):
        status = status_of(
            assistant_line(text="", stop_reason="tool_use", tools=["Bash"]),
            interrupt_line(),
            tool_result_line(),
        )
        assert status.kind is StatusKind.IDLE

    def test_tool_result_is_processing(self):
        status = status_of(
            assistant_line(text="", stop_reason="tool_use", tools=["Bash"]),
            tool_result_line(),
        )
        assert status.kind is StatusKind.PROCESSING

    def test_user_message_is_processing(self):
        assert status_of(assistant_line("hi"), user_line("next")).kind is StatusKind.PROCESSING


# ---------------------------------------------------------------------------
# Transparent entries
# ---------------------------------------------------------------------------

class TestTransparentEntries:
    def test_trailing_system_entries_skipped(self):
        status = status_of(
            user_line(),
            system_line("local_command"),
            {"type": "file-history-snapshot"},
        )
        assert status.kind is StatusKind.PROCESSING

    def test_hook_progress_skipped(self):
        status = status_of(assistant_line("done"), progress_line("hook_progress"))
        assert status.kind is StatusKind.IDLE

    def test_non_hook_progress_not_skipped(self):
        status = status_of(assistant_line("done"), progress_line("agent_progress"))
        assert status.kind is StatusKind.PROCESSING

    def test_meaningful_window(self):
        window = meaningful_window(entries(user_line(), system_line("init"), {"type": "queue-operation"}))
        assert len(window) == 1


# ---------------------------------------------------------------------------
# Scans back to the last user message
# ---------------------------------------------------------------------------

class TestSinceLastUser:
    """The last meaningful entry matches no per-entry rule."""

    def test_completion_since_user_is_idle(self):
        status = status_of(user_line(), assistant_line("ok"), {"type": "summary"})
        assert status.kind is StatusKind.IDLE

    def test_turn_complete_since_user_is_idle(self):
        status = status_of(user_line(), system_line("turn_duration"), {"type": "summary"})
        assert status.kind is StatusKind.IDLE

    def test_progress_since_user_is_processing(self):
        status = status_of(user_line(), progress_line(), {"type": "summary"})
        assert status.kind is StatusKind.PROCESSING

    def test_hook_progress_since_user_is_processing(self):
        status = status_of(user_line(), progress_line("hook_progress"), {"type": "summary"})
        assert status.kind is StatusKind.PROCESSING

    def test_nothing_since_user_is_unknown(self):
        assert status_of(user_line(), {"type": "summary"}).kind is StatusKind.UNKNOWN


def test_rule_order_is_stable():
    names = [rule.name for rule in RULES]
    assert names.index("progress") < names.index("turn_complete")
    assert names.index("tool_use_awaiting_approval") < names.index("tool_use_running")
    assert names.index("tool_result_after_interrupt") < names.index("tool_result")


@pytest.mark.parametrize("lines,expected", [
    ([user_line(), assistant_line("a"), system_line()], StatusKind.IDLE),
    ([user_line(), progress_line(), progress_line()], StatusKind.PROCESSING),
    ([system_line("init"), user_line()], StatusKind.PROCESSING),
])
def test_sequences(lines, expected):
    assert status_of(*lines).kind is expected


def test_labels_and_icons():
    assert SessionStatus.ready().label == "Ready"
    assert SessionStatus.processing().icon == "●"
    assert SessionStatus.idle().describe() == "Idle"
    assert SessionStatus.waiting([]).describe() == "Waiting"
