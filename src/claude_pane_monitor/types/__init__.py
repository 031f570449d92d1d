"""Type definitions for Claude Pane Monitor."""

from claude_pane_monitor.types.panes import Pane
from claude_pane_monitor.types.processes import (
    DetectionReason,
    DirectMatch,
    ProcessRecord,
    WrapperMatch,
)
from claude_pane_monitor.types.sessions import (
    ClaudeSession,
    MappingLookup,
    MappingState,
    SessionInfo,
    SessionMapping,
    SessionStatus,
    StatusKind,
)
from claude_pane_monitor.types.transcripts import (
    ContentBlock,
    EntryType,
    TranscriptEntry,
    TranscriptMessage,
)

__all__ = [
    "Pane",
    "DetectionReason",
    "DirectMatch",
    "ProcessRecord",
    "WrapperMatch",
    "ClaudeSession",
    "MappingLookup",
    "MappingState",
    "SessionInfo",
    "SessionMapping",
    "SessionStatus",
    "StatusKind",
    "ContentBlock",
    "EntryType",
    "TranscriptEntry",
    "TranscriptMessage",
]
