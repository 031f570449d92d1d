"""Tail reader for Claude Code transcript JSONL files.

Transcripts are append-only and can grow to hundreds of megabytes, so only
the end of the file is read. Nothing is cached between calls: every call
re-reads the file so the result always reflects the latest writes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import orjson

from claude_pane_monitor.services.status_classifier import (
    DEFAULT_WAITING_TIMEOUT,
    classify,
)
from claude_pane_monitor.types.sessions import SessionStatus
from claude_pane_monitor.types.transcripts import (
    ContentBlock,
    EntryType,
    TranscriptEntry,
    TranscriptMessage,
)
from claude_pane_monitor.utils.content_sanitizer import (
    sanitize_content,
    truncate_preview,
)

logger = logging.getLogger(__name__)

# Files below this size are parsed in full
SMALL_FILE_BYTES = 1024 * 1024
# Tail size estimate per entry; tool outputs make single lines large
ESTIMATED_ENTRY_BYTES = 100 * 1024
# Extra entries read past the requested count to absorb the estimate's error
TAIL_ENTRY_MARGIN = 10
# Tail read once for status + previews
INFO_TAIL_BYTES = 30 * ESTIMATED_ENTRY_BYTES
# Max size for a single JSONL line (10MB)
MAX_LINE_SIZE = 10 * 1024 * 1024

STATUS_WINDOW = 10
PROMPT_SCAN_ENTRIES = 200
OUTPUT_SCAN_ENTRIES = 20
MAX_PROMPT_CHARS = 200
MAX_OUTPUT_CHARS = 1000


def read_tail_lines(file_path: str | Path, tail_bytes: int) -> list[bytes]:
    """Return the non-empty lines at the end of a file.

    Small files are read whole. For large files reading starts tail_bytes
    before the end and the first, possibly truncated, line is discarded.
    Raises OSError if the file cannot be read.
    """
    path = Path(file_path)
    size = path.stat().st_size
    if size == 0:
        return []

    lines = []
    with open(path, "rb") as f:
        if size >= SMALL_FILE_BYTES:
            seek_pos = max(0, size - tail_bytes)
            if seek_pos > 0:
                f.seek(seek_pos)
                f.readline()
        for line in f:
            line = line.strip()
            if line:
                lines.append(line)
    return lines


def parse_line(line: bytes) -> TranscriptEntry | None:
    """Parse one JSONL line; malformed lines yield None."""
    if len(line) > MAX_LINE_SIZE:
        logger.warning("Transcript line exceeds %dMB, skipping",
                       MAX_LINE_SIZE // (1024 * 1024))
        return None
    try:
        raw = orjson.loads(line)
    except orjson.JSONDecodeError as e:
        # Partial writes are expected at the tail of a live transcript
        logger.debug("Malformed transcript line: %s", e)
        return None
    if not isinstance(raw, dict):
        return None
    return parse_entry(raw)


def parse_entry(raw: dict) -> TranscriptEntry | None:
    """Build a TranscriptEntry from a decoded JSON object."""
    entry_type = raw.get("type")
    if not isinstance(entry_type, str) or not entry_type:
        return None

    data = raw.get("data")
    data_type = data.get("type") if isinstance(data, dict) else None

    return TranscriptEntry(
        type=entry_type,
        subtype=_opt_str(raw.get("subtype")),
        timestamp=_opt_str(raw.get("timestamp")),
        message=_parse_message(raw.get("message")),
        data_type=_opt_str(data_type),
        is_meta=raw.get("isMeta") is True,
    )


def tail_entries(file_path: str | Path, count: int) -> list[TranscriptEntry]:
    """Read the last `count` valid entries of a transcript, oldest first."""
    if count <= 0:
        return []
    tail_bytes = (count + TAIL_ENTRY_MARGIN) * ESTIMATED_ENTRY_BYTES
    entries = []
    for line in reversed(read_tail_lines(file_path, tail_bytes)):
        entry = parse_line(line)
        if entry is None:
            continue
        entries.append(entry)
        if len(entries) == count:
            break
    entries.reverse()
    return entries


class TranscriptSnapshot:
    """Parsed tail of one transcript, read once and queried several ways."""

    def __init__(self, entries: list[TranscriptEntry]):
        self._entries = entries

    @classmethod
    def from_path(cls, file_path: str | Path,
                  tail_bytes: int = INFO_TAIL_BYTES) -> "TranscriptSnapshot":
        entries = []
        for line in read_tail_lines(file_path, tail_bytes):
            entry = parse_line(line)
            if entry is not None:
                entries.append(entry)
        return cls(entries)

    @property
    def entries(self) -> list[TranscriptEntry]:
        return self._entries

    def last_entries(self, count: int) -> list[TranscriptEntry]:
        return self._entries[-count:] if count > 0 else []

    def last_user_prompt(self, max_chars: int = MAX_PROMPT_CHARS) -> str | None:
        """Most recent text the user actually typed.

        Meta entries, tool results and interruption markers are skipped.
        """
        for entry in reversed(self.last_entries(PROMPT_SCAN_ENTRIES)):
            if entry.type != EntryType.USER.value or entry.is_meta:
                continue
            if entry.is_tool_result() or entry.is_interrupt():
                continue
            text = sanitize_content(entry.text())
            if text:
                return truncate_preview(text, max_chars)
        return None

    def last_assistant_text(self, max_chars: int = MAX_OUTPUT_CHARS) -> str | None:
        """Text of the most recent assistant message that has any."""
        for entry in reversed(self.last_entries(OUTPUT_SCAN_ENTRIES)):
            if entry.type != EntryType.ASSISTANT.value:
                continue
            text = entry.text()
            if text:
                return truncate_preview(text, max_chars)
        return None


@dataclass
class TranscriptInfo:
    status: SessionStatus
    last_prompt: str | None = None
    last_output: str | None = None


def read_transcript_info(
    file_path: str | Path,
    waiting_timeout: float = DEFAULT_WAITING_TIMEOUT,
    now: datetime | None = None,
) -> TranscriptInfo:
    """Read a transcript once and extract status, last prompt and last output.

    Raises OSError if the file cannot be read.
    """
    snapshot = TranscriptSnapshot.from_path(file_path)
    status = classify(snapshot.last_entries(STATUS_WINDOW), waiting_timeout, now)
    return TranscriptInfo(
        status=status,
        last_prompt=snapshot.last_user_prompt(),
        last_output=snapshot.last_assistant_text(),
    )


def _parse_message(message) -> TranscriptMessage | None:
    if not isinstance(message, dict):
        return None

    content = message.get("content")
    blocks = []
    text_content = None
    if isinstance(content, str):
        text_content = content
    elif isinstance(content, list):
        for block in content:
            if not isinstance(block, dict):
                continue
            block_type = block.get("type")
            if not isinstance(block_type, str):
                continue
            blocks.append(ContentBlock(
                type=block_type,
                name=_opt_str(block.get("name")),
                text=_opt_str(block.get("text")),
            ))

    return TranscriptMessage(
        role=message.get("role") or "",
        stop_reason=_opt_str(message.get("stop_reason")),
        content=tuple(blocks),
        text_content=text_content,
    )


def _opt_str(value) -> str | None:
    return value if isinstance(value, str) else None
