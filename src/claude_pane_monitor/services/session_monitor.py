"""Poll engine: runs the discovery pipeline on a timer and on transcript writes."""

import logging
from typing import Callable

from PySide6.QtCore import QObject, Signal, Slot, QTimer

from claude_pane_monitor.services.file_watcher import TranscriptWatcher
from claude_pane_monitor.services.git_resolver import GitBranchCache
from claude_pane_monitor.services.process_correlator import ProcessCorrelator
from claude_pane_monitor.services.process_snapshot import (
    ProcessListingError,
    ProcessTree,
    capture_tree,
)
from claude_pane_monitor.services.session_assembler import assemble_sessions
from claude_pane_monitor.services.session_resolver import SessionIdentityResolver
from claude_pane_monitor.services.wezterm import PaneSourceError
from claude_pane_monitor.types.sessions import ClaudeSession, StatusKind
from claude_pane_monitor.utils.path_codec import latest_transcript

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 3000
WATCH_COALESCE_MS = 50


class SessionMonitor(QObject):
    """Keeps the list of assistant sessions current.

    `pane_source` is any object with `list_panes()` and
    `current_workspace(panes)`. A failed poll keeps the previous sessions.
    """

    sessions_updated = Signal(list)  # list[ClaudeSession]
    status_changed = Signal(int, str, str)  # pane_id, old label, new label
    poll_failed = Signal(str)  # error message

    def __init__(
        self,
        pane_source,
        correlator: ProcessCorrelator,
        resolver: SessionIdentityResolver,
        tree_factory: Callable[[], ProcessTree] = capture_tree,
        branch_cache: GitBranchCache | None = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        parent=None,
    ):
        super().__init__(parent)
        self._pane_source = pane_source
        self._correlator = correlator
        self._resolver = resolver
        self._tree_factory = tree_factory
        self._branch_cache = branch_cache
        self._sessions: list[ClaudeSession] = []
        self._statuses: dict[int, StatusKind] = {}
        self._refreshing = False

        self._watcher = TranscriptWatcher(self)
        self._watcher.transcript_changed.connect(self._on_transcript_changed)

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(poll_interval_ms)
        self._poll_timer.timeout.connect(self.refresh)

        # Bursts of watcher events collapse into one refresh
        self._pending_timer = QTimer(self)
        self._pending_timer.setSingleShot(True)
        self._pending_timer.setInterval(WATCH_COALESCE_MS)
        self._pending_timer.timeout.connect(self.refresh)

    @property
    def watcher(self) -> TranscriptWatcher:
        return self._watcher

    def sessions(self) -> list[ClaudeSession]:
        return list(self._sessions)

    def poll_interval(self) -> int:
        return self._poll_timer.interval()

    def set_poll_interval(self, interval_ms: int):
        self._poll_timer.setInterval(interval_ms)

    def start(self):
        """Refresh immediately, then keep polling."""
        self.refresh()
        self._poll_timer.start()

    def stop(self):
        self._poll_timer.stop()
        self._pending_timer.stop()
        self._watcher.stop()

    @Slot()
    def refresh(self):
        """Run one poll. Re-entrant calls are dropped."""
        if self._refreshing:
            logger.debug("Refresh already running, skipped")
            return
        self._refreshing = True
        try:
            self._poll()
        finally:
            self._refreshing = False

    def _poll(self):
        try:
            panes = self._pane_source.list_panes()
            tree = self._tree_factory()
        except (PaneSourceError, ProcessListingError) as e:
            logger.warning("Poll failed: %s", e)
            self.poll_failed.emit(str(e))
            return

        workspace = self._pane_source.current_workspace(panes)
        branch_lookup = self._branch_cache.get if self._branch_cache else None
        sessions = assemble_sessions(
            panes,
            tree,
            self._correlator,
            self._resolver,
            workspace=workspace,
            branch_lookup=branch_lookup,
        )

        self._sessions = sessions
        self._emit_transitions(sessions)
        self._sync_watches(sessions)
        self.sessions_updated.emit(list(sessions))

    def _emit_transitions(self, sessions: list[ClaudeSession]):
        previous = self._statuses
        current = {s.pane.pane_id: s.info.status.kind for s in sessions}
        for pane_id, kind in current.items():
            old = previous.get(pane_id)
            if old is not None and old is not kind:
                self.status_changed.emit(pane_id, old.value, kind.value)
        self._statuses = current

    def _sync_watches(self, sessions: list[ClaudeSession]):
        directories: set[str] = set()
        files: set[str] = set()
        for session in sessions:
            path = session.info.transcript_path
            if path is not None:
                directories.add(str(path.parent))
                files.add(str(path))
                continue
            directory = self._resolver.transcript_dir(session.pane)
            if directory is None or not directory.is_dir():
                continue
            directories.add(str(directory))
            latest = latest_transcript(directory)
            if latest is not None:
                files.add(str(latest))
        self._watcher.sync_directories(directories, files)

    def _on_transcript_changed(self, path: str):
        logger.debug("Transcript activity at %s", path)
        if not self._pending_timer.isActive():
            self._pending_timer.start()
