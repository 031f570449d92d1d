"""Read per-TTY session mappings written by the statusLine bridge hook.

The hook rewrites <sessions_dir>/<tty>.json every few hundred milliseconds
while a session is active. Keying by TTY keeps sessions that share a working
directory apart. Mapping files are only ever read here, never written.
"""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import orjson

from claude_pane_monitor.types.sessions import (
    STALE_MAPPING_AFTER,
    MappingLookup,
    MappingState,
    SessionMapping,
)
from claude_pane_monitor.utils.timestamps import parse_rfc3339
from claude_pane_monitor.utils.tty import mapping_file_stem, normalize_tty

logger = logging.getLogger(__name__)

# Default bridge-hook output directory; overridden by paths/sessionsDir
SESSIONS_DIR = Path.home() / ".claude" / "pane-monitor" / "sessions"

_NOT_FOUND = MappingLookup(MappingState.NOT_FOUND)


class SessionMappingStore:
    """Read-only view over the mapping directory."""

    def __init__(
        self,
        sessions_dir: str | Path | None = None,
        stale_after: timedelta = STALE_MAPPING_AFTER,
    ):
        self._sessions_dir = Path(sessions_dir) if sessions_dir else SESSIONS_DIR
        self._stale_after = stale_after

    @property
    def sessions_dir(self) -> Path:
        return self._sessions_dir

    def mapping_file_path(self, tty: str) -> Path:
        """ttys003 → <dir>/ttys003.json, pts/0 → <dir>/pts-0.json"""
        return self._sessions_dir / f"{mapping_file_stem(tty)}.json"

    def lookup(self, tty: str, now: datetime | None = None) -> MappingLookup:
        """Find the mapping for a TTY and classify its freshness."""
        tty_short = normalize_tty(tty)
        if tty_short is None:
            return _NOT_FOUND

        mapping = self._read(self.mapping_file_path(tty_short))
        if mapping is None:
            return _NOT_FOUND

        now = now or datetime.now(timezone.utc)
        if mapping.is_stale(now, self._stale_after):
            logger.debug("Mapping for %s is stale (age %s)", tty_short, mapping.age(now))
            return MappingLookup(MappingState.STALE, mapping)
        return MappingLookup(MappingState.VALID, mapping)

    def all_mappings(self, now: datetime | None = None) -> list[SessionMapping]:
        """Every fresh mapping in the directory."""
        if not self._sessions_dir.is_dir():
            return []
        now = now or datetime.now(timezone.utc)
        mappings = []
        for path in sorted(self._sessions_dir.glob("*.json")):
            mapping = self._read(path)
            if mapping is not None and not mapping.is_stale(now, self._stale_after):
                mappings.append(mapping)
        return mappings

    def _read(self, path: Path) -> SessionMapping | None:
        """Parse a mapping file; unreadable or malformed files count as absent."""
        try:
            raw = orjson.loads(path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, orjson.JSONDecodeError) as e:
            logger.debug("Unreadable mapping file %s: %s", path, e)
            return None
        return parse_mapping(raw)


def parse_mapping(raw) -> SessionMapping | None:
    """Validate a decoded mapping object."""
    if not isinstance(raw, dict):
        return None
    session_id = raw.get("session_id")
    transcript_path = raw.get("transcript_path")
    updated_at = parse_rfc3339(raw.get("updated_at"))
    if not isinstance(session_id, str) or not isinstance(transcript_path, str):
        return None
    if updated_at is None:
        return None
    return SessionMapping(
        session_id=session_id,
        transcript_path=Path(transcript_path).expanduser(),
        cwd=raw.get("cwd") if isinstance(raw.get("cwd"), str) else "",
        tty=raw.get("tty") if isinstance(raw.get("tty"), str) else "",
        updated_at=updated_at,
    )
