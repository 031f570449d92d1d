"""Terminal pane snapshot as reported by the host multiplexer."""

from dataclasses import dataclass
from urllib.parse import unquote, urlparse

from claude_pane_monitor.utils.tty import normalize_tty


@dataclass(frozen=True)
class Pane:
    pane_id: int
    tab_id: int = 0
    window_id: int = 0
    workspace: str = "default"
    title: str = ""
    cwd: str | None = None          # file:// URI
    tty_name: str | None = None     # e.g. /dev/ttys003
    is_active: bool = False
    tab_title: str | None = None
    window_title: str | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> "Pane":
        """Build a Pane from one entry of `wezterm cli list --format json`."""
        return cls(
            pane_id=int(raw.get("pane_id", 0)),
            tab_id=int(raw.get("tab_id", 0)),
            window_id=int(raw.get("window_id", 0)),
            workspace=raw.get("workspace") or "default",
            title=raw.get("title") or "",
            cwd=raw.get("cwd") or None,
            tty_name=raw.get("tty_name") or None,
            is_active=bool(raw.get("is_active", False)),
            tab_title=raw.get("tab_title") or None,
            window_title=raw.get("window_title") or None,
        )

    def cwd_path(self) -> str | None:
        """Return the working directory as a plain filesystem path.

        file:///Users/a/proj → /Users/a/proj
        file://host/Users/a/proj → /Users/a/proj
        """
        if not self.cwd:
            return None
        if self.cwd.startswith("file://"):
            path = unquote(urlparse(self.cwd).path)
            return path or None
        if self.cwd.startswith("/"):
            return self.cwd
        return None

    def tty_short(self) -> str | None:
        """TTY name without the /dev/ prefix, comparable with ps output."""
        if self.tty_name is None:
            return None
        return normalize_tty(self.tty_name)
