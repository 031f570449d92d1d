"""Session status, mapping and assembled info types."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from claude_pane_monitor.types.panes import Pane
    from claude_pane_monitor.types.processes import DetectionReason


class StatusKind(str, Enum):
    READY = "ready"
    PROCESSING = "processing"
    IDLE = "idle"
    WAITING_FOR_USER = "waiting"
    UNKNOWN = "unknown"


_LABELS = {
    StatusKind.READY: "Ready",
    StatusKind.PROCESSING: "Processing",
    StatusKind.IDLE: "Idle",
    StatusKind.WAITING_FOR_USER: "Waiting",
    StatusKind.UNKNOWN: "Unknown",
}

_ICONS = {
    StatusKind.READY: "◇",
    StatusKind.PROCESSING: "●",
    StatusKind.IDLE: "○",
    StatusKind.WAITING_FOR_USER: "◐",
    StatusKind.UNKNOWN: "?",
}


@dataclass(frozen=True)
class SessionStatus:
    """Live activity state of one session.

    `tools` is only populated for WAITING_FOR_USER.
    """
    kind: StatusKind
    tools: tuple[str, ...] = ()

    @classmethod
    def ready(cls) -> "SessionStatus":
        return cls(StatusKind.READY)

    @classmethod
    def processing(cls) -> "SessionStatus":
        return cls(StatusKind.PROCESSING)

    @classmethod
    def idle(cls) -> "SessionStatus":
        return cls(StatusKind.IDLE)

    @classmethod
    def waiting(cls, tools) -> "SessionStatus":
        return cls(StatusKind.WAITING_FOR_USER, tuple(tools))

    @classmethod
    def unknown(cls) -> "SessionStatus":
        return cls(StatusKind.UNKNOWN)

    @property
    def label(self) -> str:
        return _LABELS[self.kind]

    @property
    def icon(self) -> str:
        return _ICONS[self.kind]

    def describe(self) -> str:
        """Label including the blocked tools, e.g. 'Waiting (Bash, Edit)'."""
        if self.kind is StatusKind.WAITING_FOR_USER and self.tools:
            return f"{self.label} ({', '.join(self.tools)})"
        return self.label


STALE_MAPPING_AFTER = timedelta(minutes=5)


@dataclass(frozen=True)
class SessionMapping:
    """Per-TTY record written by the statusLine bridge hook."""
    session_id: str
    transcript_path: Path
    cwd: str
    tty: str
    updated_at: datetime

    def age(self, now: datetime | None = None) -> timedelta:
        now = now or datetime.now(timezone.utc)
        return now - self.updated_at

    def is_stale(self, now: datetime | None = None,
                 stale_after: timedelta = STALE_MAPPING_AFTER) -> bool:
        # Exactly at the threshold still counts as fresh
        return self.age(now) > stale_after


class MappingState(str, Enum):
    VALID = "valid"
    STALE = "stale"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class MappingLookup:
    state: MappingState
    mapping: SessionMapping | None = None


@dataclass
class SessionInfo:
    status: SessionStatus
    last_prompt: str | None = None
    last_output: str | None = None
    session_id: str | None = None
    transcript_path: Path | None = None
    updated_at: datetime | None = None
    warning: str | None = None

    @property
    def is_ambiguous(self) -> bool:
        """Resolved through the cwd fallback, so not bound to one session."""
        return self.session_id is None and self.warning is None


@dataclass
class ClaudeSession:
    """A correlated pane with its resolved session info."""
    pane: "Pane"
    reason: "DetectionReason"
    info: SessionInfo
    git_branch: str = ""
