"""Entry-level types for parsed transcript JSONL data."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from claude_pane_monitor.utils.timestamps import parse_rfc3339


class EntryType(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    PROGRESS = "progress"
    FILE_HISTORY = "file-history-snapshot"
    QUEUE_OP = "queue-operation"


# System subtypes written when a turn has finished
TURN_COMPLETE_SUBTYPES = frozenset({"stop_hook_summary", "turn_duration"})

HOOK_PROGRESS = "hook_progress"
INTERRUPT_MARKER = "[Request interrupted by user"


@dataclass(frozen=True)
class ContentBlock:
    type: str
    name: str | None = None     # tool_use only
    text: str | None = None     # text only


@dataclass(frozen=True)
class TranscriptMessage:
    role: str = ""
    stop_reason: str | None = None
    content: tuple[ContentBlock, ...] = ()
    # User messages may carry a bare string instead of blocks
    text_content: str | None = None


@dataclass(frozen=True)
class TranscriptEntry:
    """One parsed line of a transcript file."""
    type: str
    subtype: str | None = None
    timestamp: str | None = None
    message: TranscriptMessage | None = None
    data_type: str | None = None     # progress payload kind
    is_meta: bool = False

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_progress(self) -> bool:
        return self.type == EntryType.PROGRESS.value

    def is_hook_progress(self) -> bool:
        """Session hook progress, not assistant work."""
        return self.is_progress() and self.data_type == HOOK_PROGRESS

    def is_turn_complete(self) -> bool:
        return (
            self.type == EntryType.SYSTEM.value
            and self.subtype in TURN_COMPLETE_SUBTYPES
        )

    def is_end_turn(self) -> bool:
        return (
            self.type == EntryType.ASSISTANT.value
            and self.message is not None
            and self.message.stop_reason == "end_turn"
        )

    def is_tool_use(self) -> bool:
        """Assistant entry that invokes a tool.

        stop_reason may still be null while a tool waits for approval,
        so content blocks are checked as well.
        """
        if self.type != EntryType.ASSISTANT.value or self.message is None:
            return False
        if self.message.stop_reason == "tool_use":
            return True
        return any(b.type == "tool_use" for b in self.message.content)

    def is_tool_result(self) -> bool:
        if self.type != EntryType.USER.value or self.message is None:
            return False
        return any(b.type == "tool_result" for b in self.message.content)

    def is_interrupt(self) -> bool:
        """User entry recording that the run was interrupted."""
        if self.type != EntryType.USER.value or self.message is None:
            return False
        if self.message.text_content and INTERRUPT_MARKER in self.message.text_content:
            return True
        return any(
            b.type == "text" and b.text and INTERRUPT_MARKER in b.text
            for b in self.message.content
        )

    def is_transparent(self) -> bool:
        """Internal bookkeeping entry that carries no activity signal."""
        if self.type == EntryType.SYSTEM.value:
            return not self.is_turn_complete()
        return (
            self.type in (EntryType.FILE_HISTORY.value, EntryType.QUEUE_OP.value)
            or self.is_hook_progress()
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def tool_names(self) -> list[str]:
        """Names of invoked tools, in content order."""
        if self.message is None:
            return []
        return [
            b.name for b in self.message.content
            if b.type == "tool_use" and b.name
        ]

    def text(self) -> str:
        """Text blocks joined by newlines (or the bare string content)."""
        if self.message is None:
            return ""
        if self.message.text_content is not None:
            return self.message.text_content
        return "\n".join(
            b.text for b in self.message.content
            if b.type == "text" and b.text
        )

    def parsed_timestamp(self) -> datetime | None:
        """RFC3339 timestamp as an aware datetime, None if absent or invalid."""
        return parse_rfc3339(self.timestamp)
