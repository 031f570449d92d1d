"""Application configuration manager wrapping QSettings."""

import logging
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot, QSettings

logger = logging.getLogger(__name__)

# Default values
DEFAULTS = {
    "detection/processNames": "claude,anthropic",
    "detection/waitingTimeoutSecs": 10,
    "detection/staleMappingSecs": 300,
    "monitor/pollInterval": 3000,
    "monitor/gitBranchTtl": 5,
    "paths/projectsRoot": "~/.claude/projects",
    # Directory the statusLine bridge hook writes <tty>.json into (pts/N as pts-N.json).
    # Must match the hook: for the wzcc hook use ~/.claude/wzcc/sessions.
    "paths/sessionsDir": "~/.claude/pane-monitor/sessions",
    "advanced/debugLogging": False,
}


class ConfigManager(QObject):
    """Centralized monitor settings."""

    settings_changed = Signal(str)  # key

    def __init__(self, settings: QSettings | None = None, parent=None):
        super().__init__(parent)
        self._settings = settings if settings is not None else QSettings()

    @Slot(str, result=str)
    def get_string(self, key: str) -> str:
        return str(self._settings.value(key, DEFAULTS.get(key, "")))

    @Slot(str, result=int)
    def get_int(self, key: str) -> int:
        val = self._settings.value(key, DEFAULTS.get(key, 0))
        try:
            return int(val)
        except (ValueError, TypeError):
            logger.warning("Invalid integer for %s: %r", key, val)
            return DEFAULTS.get(key, 0)

    @Slot(str, result=bool)
    def get_bool(self, key: str) -> bool:
        val = self._settings.value(key, DEFAULTS.get(key, False))
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.lower() in ("true", "1", "yes")
        return bool(val)

    def get_list(self, key: str) -> list[str]:
        """Comma-separated setting as a list of trimmed, non-empty items."""
        val = self._settings.value(key, DEFAULTS.get(key, ""))
        if isinstance(val, (list, tuple)):
            items = [str(v) for v in val]
        else:
            items = str(val).split(",")
        return [item.strip() for item in items if item.strip()]

    def get_path(self, key: str) -> Path:
        return Path(self.get_string(key)).expanduser()

    @Slot(str, str)
    def set_string(self, key: str, value: str):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, int)
    def set_int(self, key: str, value: int):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, bool)
    def set_bool(self, key: str, value: bool):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)
