"""Resolve which transcript belongs to a pane and read its session info.

Resolution order:

1. A fresh TTY mapping names the transcript directly.
2. A stale mapping is trusted for status only. Previews are withheld and a
   warning is attached; there is no fallback to the working directory, which
   could pick up a sibling session's transcript.
3. Without a mapping the newest transcript in the pane's cwd-derived
   directory is used. Sessions sharing a directory cannot be told apart on
   this path, so its results carry no session id.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from claude_pane_monitor.services.session_mapping import SessionMappingStore
from claude_pane_monitor.services.status_classifier import DEFAULT_WAITING_TIMEOUT
from claude_pane_monitor.services.transcript_reader import (
    TranscriptInfo,
    read_transcript_info,
)
from claude_pane_monitor.types.panes import Pane
from claude_pane_monitor.types.sessions import (
    MappingState,
    SessionInfo,
    SessionMapping,
    SessionStatus,
)
from claude_pane_monitor.utils.path_codec import latest_transcript, transcript_dir_for

logger = logging.getLogger(__name__)

STALE_MAPPING_WARNING = (
    "Session info stale (statusLine not updating). "
    "Try interacting with the session."
)


class SessionIdentityResolver:
    """Maps a pane to its SessionInfo."""

    def __init__(
        self,
        mappings: SessionMappingStore | None = None,
        projects_root: str | Path | None = None,
        waiting_timeout: float = DEFAULT_WAITING_TIMEOUT,
        clock: Callable[[], datetime] | None = None,
    ):
        self._mappings = mappings or SessionMappingStore()
        self._projects_root = projects_root
        self._waiting_timeout = waiting_timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def transcript_dir(self, pane: Pane) -> Path | None:
        """cwd-derived transcript directory of a pane, if it has a cwd."""
        cwd = pane.cwd_path()
        if cwd is None:
            return None
        return transcript_dir_for(cwd, self._projects_root)

    def resolve(self, pane: Pane) -> SessionInfo:
        now = self._clock()
        tty = pane.tty_short()
        if tty is not None:
            lookup = self._mappings.lookup(tty, now)
            if lookup.state is MappingState.VALID:
                return self._from_valid_mapping(lookup.mapping, now)
            if lookup.state is MappingState.STALE:
                return self._from_stale_mapping(lookup.mapping, now)
        return self._from_cwd(pane, now)

    def _from_valid_mapping(self, mapping: SessionMapping, now: datetime) -> SessionInfo:
        path = mapping.transcript_path
        if not path.exists():
            # Hook wrote the mapping before the transcript, or it was cleaned up
            return SessionInfo(
                status=SessionStatus.ready(),
                session_id=mapping.session_id,
                transcript_path=path,
            )

        info = self._read(path, now)
        return SessionInfo(
            status=info.status,
            last_prompt=info.last_prompt,
            last_output=info.last_output,
            session_id=mapping.session_id,
            transcript_path=path,
            updated_at=_file_mtime(path),
        )

    def _from_stale_mapping(self, mapping: SessionMapping, now: datetime) -> SessionInfo:
        path = mapping.transcript_path
        if path.exists():
            status = self._read(path, now).status
            updated_at = _file_mtime(path)
        else:
            status = SessionStatus.unknown()
            updated_at = None

        return SessionInfo(
            status=status,
            session_id=mapping.session_id,
            transcript_path=path,
            updated_at=updated_at,
            warning=STALE_MAPPING_WARNING,
        )

    def _from_cwd(self, pane: Pane, now: datetime) -> SessionInfo:
        directory = self.transcript_dir(pane)
        if directory is None:
            return SessionInfo(status=SessionStatus.unknown())

        path = latest_transcript(directory)
        if path is None:
            # Claude Code is running but no session has started yet
            return SessionInfo(status=SessionStatus.ready())

        info = self._read(path, now)
        return SessionInfo(
            status=info.status,
            last_prompt=info.last_prompt,
            last_output=info.last_output,
            updated_at=_file_mtime(path),
        )

    def _read(self, path: Path, now: datetime) -> TranscriptInfo:
        try:
            return read_transcript_info(path, self._waiting_timeout, now)
        except OSError as e:
            logger.warning("Failed to read transcript %s: %s", path, e)
            return TranscriptInfo(status=SessionStatus.unknown())


def _file_mtime(path: Path) -> datetime | None:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    except OSError:
        return None
