"""Classify a session's live status from the tail of its transcript.

The classifier is an ordered decision table. Trailing bookkeeping entries
(non-completion system entries, file-history snapshots, queue operations and
hook progress) are transparent: they are skipped and the rules are evaluated
against the last meaningful entry. The first matching rule wins, so explicit
completion and progress markers outrank content inspection.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from claude_pane_monitor.types.sessions import SessionStatus
from claude_pane_monitor.types.transcripts import EntryType, TranscriptEntry

# Seconds a tool call may run before it is presumed blocked on approval
DEFAULT_WAITING_TIMEOUT = 10.0
# Entries checked before a tool result for an interruption marker
INTERRUPT_LOOKBACK = 3


@dataclass(frozen=True)
class ClassifyContext:
    """Inputs visible to every rule."""
    window: list[TranscriptEntry]   # ends at the last meaningful entry
    waiting_timeout: float
    now: datetime

    @property
    def last(self) -> TranscriptEntry:
        return self.window[-1]

    def tool_call_age(self) -> float | None:
        """Seconds since the last entry was written, None if unknown."""
        ts = self.last.parsed_timestamp()
        if ts is None:
            return None
        return (self.now - ts).total_seconds()

    def entries_after_last_user(self) -> list[TranscriptEntry] | None:
        for idx in range(len(self.window) - 1, -1, -1):
            if self.window[idx].type == EntryType.USER.value:
                return self.window[idx + 1:]
        return None


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[ClassifyContext], bool]
    outcome: Callable[[ClassifyContext], SessionStatus]


def _is_assistant(ctx: ClassifyContext) -> bool:
    return ctx.last.type == EntryType.ASSISTANT.value


def _is_user(ctx: ClassifyContext) -> bool:
    return ctx.last.type == EntryType.USER.value


def _tool_call_stale(ctx: ClassifyContext) -> bool:
    if not ctx.last.is_tool_use():
        return False
    age = ctx.tool_call_age()
    return age is not None and age > ctx.waiting_timeout


def _interrupted_before_tool_result(ctx: ClassifyContext) -> bool:
    if not ctx.last.is_tool_result():
        return False
    prior = ctx.window[-1 - INTERRUPT_LOOKBACK:-1]
    return any(e.is_interrupt() for e in prior)


def _completed_after_last_user(ctx: ClassifyContext) -> bool:
    after = ctx.entries_after_last_user()
    return after is not None and any(
        e.is_turn_complete() or e.is_end_turn() for e in after
    )


def _progress_after_last_user(ctx: ClassifyContext) -> bool:
    after = ctx.entries_after_last_user()
    return after is not None and any(e.is_progress() for e in after)


def _streaming_assistant(ctx: ClassifyContext) -> bool:
    return (
        _is_assistant(ctx)
        and ctx.last.message is not None
        and ctx.last.message.stop_reason is None
    )


def _const(status: SessionStatus) -> Callable[[ClassifyContext], SessionStatus]:
    return lambda ctx: status


RULES: tuple[Rule, ...] = (
    Rule("progress",
         lambda ctx: ctx.last.is_progress(),
         _const(SessionStatus.processing())),
    Rule("turn_complete",
         lambda ctx: ctx.last.is_turn_complete(),
         _const(SessionStatus.idle())),
    Rule("assistant_end_turn",
         lambda ctx: ctx.last.is_end_turn(),
         _const(SessionStatus.idle())),
    Rule("assistant_text_only",
         lambda ctx: _is_assistant(ctx) and not ctx.last.is_tool_use(),
         _const(SessionStatus.idle())),
    Rule("tool_use_awaiting_approval",
         _tool_call_stale,
         lambda ctx: SessionStatus.waiting(ctx.last.tool_names())),
    Rule("tool_use_running",
         lambda ctx: ctx.last.is_tool_use(),
         _const(SessionStatus.processing())),
    Rule("user_interrupt",
         lambda ctx: ctx.last.is_interrupt(),
         _const(SessionStatus.idle())),
    Rule("tool_result_after_interrupt",
         _interrupted_before_tool_result,
         _const(SessionStatus.idle())),
    Rule("tool_result",
         lambda ctx: ctx.last.is_tool_result(),
         _const(SessionStatus.processing())),
    Rule("user_message",
         _is_user,
         _const(SessionStatus.processing())),
    Rule("completed_since_last_user",
         _completed_after_last_user,
         _const(SessionStatus.idle())),
    Rule("progress_since_last_user",
         _progress_after_last_user,
         _const(SessionStatus.processing())),
    Rule("assistant_streaming",
         _streaming_assistant,
         _const(SessionStatus.processing())),
)


def meaningful_window(entries: list[TranscriptEntry]) -> list[TranscriptEntry]:
    """Drop trailing transparent entries."""
    end = len(entries)
    while end > 0 and entries[end - 1].is_transparent():
        end -= 1
    return entries[:end]


def match_rule(ctx: ClassifyContext) -> Rule | None:
    """First rule matching the context, or None."""
    for rule in RULES:
        if rule.matches(ctx):
            return rule
    return None


def classify(
    entries: list[TranscriptEntry],
    waiting_timeout: float = DEFAULT_WAITING_TIMEOUT,
    now: datetime | None = None,
) -> SessionStatus:
    """Map a chronological window of transcript entries to a status."""
    if not entries:
        return SessionStatus.unknown()

    window = meaningful_window(entries)
    if not window:
        # Only bookkeeping left, e.g. right after /clear
        return SessionStatus.ready()

    ctx = ClassifyContext(
        window=window,
        waiting_timeout=waiting_timeout,
        now=now or datetime.now(timezone.utc),
    )
    rule = match_rule(ctx)
    if rule is None:
        return SessionStatus.unknown()
    return rule.outcome(ctx)
