"""WezTerm pane source.

Uses the wezterm CLI to list panes and find the workspace the monitor runs in.
"""

import logging
import subprocess

import orjson

from claude_pane_monitor.types.panes import Pane

logger = logging.getLogger(__name__)

WEZTERM_TIMEOUT_S = 10


class PaneSourceError(RuntimeError):
    """The pane list could not be obtained from the multiplexer."""


def _run_wezterm(*args: str, timeout: int = WEZTERM_TIMEOUT_S) -> str:
    """Run a wezterm CLI command and return its stdout.

    Raises PaneSourceError on launch failure, timeout or non-zero exit.
    """
    cmd = ["wezterm", "cli", *args]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise PaneSourceError(f"wezterm cli {args[0]} timed out") from e
    except OSError as e:
        raise PaneSourceError(f"Failed to execute wezterm: {e}") from e

    if result.returncode != 0:
        raise PaneSourceError(
            f"wezterm cli {args[0]} failed: {(result.stderr or '').strip()}"
        )
    return result.stdout or ""


def parse_pane_list(output: str) -> list[Pane]:
    """Parse `wezterm cli list --format json` output."""
    try:
        raw = orjson.loads(output)
    except orjson.JSONDecodeError as e:
        raise PaneSourceError(f"Invalid pane list JSON: {e}") from e
    if not isinstance(raw, list):
        raise PaneSourceError("Pane list is not a JSON array")
    try:
        return [Pane.from_dict(item) for item in raw if isinstance(item, dict)]
    except (TypeError, ValueError) as e:
        raise PaneSourceError(f"Malformed pane entry: {e}") from e


class WeztermPaneSource:
    """Pane list provider backed by the wezterm CLI."""

    def __init__(self, self_pane_id: int | None = None):
        self._self_pane_id = self_pane_id

    def list_panes(self) -> list[Pane]:
        return parse_pane_list(_run_wezterm("list", "--format", "json"))

    def current_workspace(self, panes: list[Pane]) -> str | None:
        """Workspace of the monitor's own pane, None when unknown."""
        if self._self_pane_id is None:
            return None
        for pane in panes:
            if pane.pane_id == self._self_pane_id:
                return pane.workspace
        logger.debug("Own pane %s not in pane list", self._self_pane_id)
        return None
