"""File system watcher for transcript directories with debounced change signals."""

import logging
import os

from PySide6.QtCore import QObject, Signal, QFileSystemWatcher, QTimer

logger = logging.getLogger(__name__)

DEBOUNCE_MS = 100


class TranscriptWatcher(QObject):
    """Watches transcript directories and the transcript files inside them.

    Directory events cover new or removed transcripts; file events cover
    appends, which Qt does not report at the directory level.
    """

    transcript_changed = Signal(str)    # file or directory path

    def __init__(self, parent=None):
        super().__init__(parent)
        self._watcher = QFileSystemWatcher(self)
        self._debounce_timers: dict[str, QTimer] = {}
        self._watched_dirs: set[str] = set()
        self._watched_files: set[str] = set()

        self._watcher.fileChanged.connect(self._on_path_changed)
        self._watcher.directoryChanged.connect(self._on_path_changed)

    def watched_directories(self) -> set[str]:
        return set(self._watched_dirs)

    def watched_files(self) -> set[str]:
        return set(self._watched_files)

    def sync_directories(self, directories: set[str], files: set[str] = frozenset()):
        """Replace the watch set: unwatch removed paths, watch added ones."""
        self._watched_dirs = self._apply_diff(self._watched_dirs, set(directories))
        self._watched_files = self._apply_diff(self._watched_files, set(files))

    def stop(self):
        """Stop all file watching."""
        if self._watcher.files():
            self._watcher.removePaths(self._watcher.files())
        if self._watcher.directories():
            self._watcher.removePaths(self._watcher.directories())
        self._watched_dirs.clear()
        self._watched_files.clear()
        for timer in self._debounce_timers.values():
            timer.stop()
        self._debounce_timers.clear()

    def _apply_diff(self, current: set[str], wanted: set[str]) -> set[str]:
        for path in current - wanted:
            self._watcher.removePath(path)
            self._drop_timer(path)

        kept = current & wanted
        for path in wanted - current:
            if not os.path.exists(path):
                continue
            if self._watcher.addPath(path):
                kept.add(path)
            else:
                logger.debug("Could not watch %s", path)
        return kept

    def _on_path_changed(self, path: str):
        """Handle a change with a per-path debounce."""
        if path in self._watched_files and os.path.exists(path):
            # Editors and atomic rewrites can drop the file from the watcher
            if path not in self._watcher.files():
                self._watcher.addPath(path)
        self._debounce(path, lambda: self.transcript_changed.emit(path))

    def _debounce(self, key: str, callback):
        """Debounce a callback by DEBOUNCE_MS using the given key."""
        if key in self._debounce_timers:
            self._debounce_timers[key].stop()
        else:
            timer = QTimer(self)
            timer.setSingleShot(True)
            self._debounce_timers[key] = timer

        timer = self._debounce_timers[key]
        try:
            timer.timeout.disconnect()
        except (RuntimeError, TypeError):
            pass
        timer.timeout.connect(callback)
        timer.start(DEBOUNCE_MS)

    def _drop_timer(self, key: str):
        timer = self._debounce_timers.pop(key, None)
        if timer is not None:
            timer.stop()
