"""Application entry point: component wiring and the headless session table."""

import argparse
import logging
import os
import signal
import sys
from datetime import timedelta

from PySide6.QtCore import QCoreApplication

from claude_pane_monitor.services.config_manager import ConfigManager
from claude_pane_monitor.services.git_resolver import GitBranchCache
from claude_pane_monitor.services.process_correlator import ProcessCorrelator
from claude_pane_monitor.services.session_mapping import SessionMappingStore
from claude_pane_monitor.services.session_monitor import SessionMonitor
from claude_pane_monitor.services.session_resolver import SessionIdentityResolver
from claude_pane_monitor.services.wezterm import WeztermPaneSource
from claude_pane_monitor.types.sessions import ClaudeSession, SessionMapping

logger = logging.getLogger(__name__)

SELF_PANE_ENV = "WEZTERM_PANE"


def self_pane_id(environ=os.environ) -> int | None:
    """Pane id the monitor runs in, from the terminal's environment."""
    raw = environ.get(SELF_PANE_ENV, "").strip()
    try:
        return int(raw) if raw else None
    except ValueError:
        logger.debug("Ignoring non-numeric %s=%r", SELF_PANE_ENV, raw)
        return None


def build_mapping_store(config: ConfigManager) -> SessionMappingStore:
    return SessionMappingStore(
        sessions_dir=config.get_path("paths/sessionsDir"),
        stale_after=timedelta(seconds=config.get_int("detection/staleMappingSecs")),
    )


def build_monitor(config: ConfigManager, pane_id: int | None, parent=None,
                  mappings: SessionMappingStore | None = None) -> SessionMonitor:
    """Create the discovery pipeline from settings."""
    mappings = mappings or build_mapping_store(config)
    resolver = SessionIdentityResolver(
        mappings=mappings,
        projects_root=config.get_path("paths/projectsRoot"),
        waiting_timeout=float(config.get_int("detection/waitingTimeoutSecs")),
    )
    correlator = ProcessCorrelator(
        process_names=config.get_list("detection/processNames"),
        self_pane_id=pane_id,
    )
    return SessionMonitor(
        pane_source=WeztermPaneSource(self_pane_id=pane_id),
        correlator=correlator,
        resolver=resolver,
        branch_cache=GitBranchCache(ttl_s=float(config.get_int("monitor/gitBranchTtl"))),
        poll_interval_ms=config.get_int("monitor/pollInterval"),
        parent=parent,
    )


def format_sessions(sessions: list[ClaudeSession]) -> str:
    if not sessions:
        return "No Claude Code sessions found."

    lines = []
    for s in sessions:
        status = s.info.status
        head = f"{s.pane.pane_id:>4}  {status.icon} {status.describe():<24} {s.pane.cwd_path() or '-'}"
        if s.git_branch:
            head += f" [{s.git_branch}]"
        lines.append(head)
        if s.info.session_id:
            lines.append(f"      session {s.info.session_id} ({s.reason.display()})")
        else:
            lines.append(f"      {s.reason.display()}")
        if s.info.warning:
            lines.append(f"      ! {s.info.warning}")
        if s.info.last_prompt:
            lines.append(f"      > {s.info.last_prompt}")
        if s.info.last_output and s.info.last_output.strip():
            lines.append(f"      < {s.info.last_output.strip().splitlines()[0]}")
    return "\n".join(lines)


def format_mappings(mappings: list[SessionMapping]) -> str:
    """One line per live bridge-hook mapping."""
    if not mappings:
        return "no live session mappings"
    lines = [f"{len(mappings)} live session mapping(s):"]
    for m in mappings:
        lines.append(f"  {m.tty or '?'} -> {m.session_id} ({m.transcript_path})")
    return "\n".join(lines)


def log_live_mappings(store: SessionMappingStore):
    logger.debug("Mappings in %s: %s", store.sessions_dir, format_mappings(store.all_mappings()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="claude-pane-monitor",
        description="Show Claude Code sessions running in WezTerm panes",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true", help="print one snapshot (default)")
    mode.add_argument("--watch", action="store_true", help="keep polling and log status changes")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    """Launch the monitor."""
    args = parse_args(argv)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Claude Pane Monitor")
    app.setOrganizationName("claude-pane-monitor")
    app.setOrganizationDomain("claude.local")

    config = ConfigManager()
    debug = args.debug or config.get_bool("advanced/debugLogging")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mappings = build_mapping_store(config)
    monitor = build_monitor(config, self_pane_id(), mappings=mappings)
    failures: list[str] = []
    monitor.poll_failed.connect(lambda message: failures.append(message))

    if debug:
        log_live_mappings(mappings)

    if not args.watch:
        monitor.refresh()
        if failures:
            print(f"Error: {failures[-1]}", file=sys.stderr)
            return 1
        print(format_sessions(monitor.sessions()))
        return 0

    monitor.status_changed.connect(
        lambda pane_id, old, new: logger.info("Pane %s: %s -> %s", pane_id, old, new)
    )
    monitor.sessions_updated.connect(
        lambda sessions: logger.debug("%d session(s)", len(sessions))
    )

    # Allow Ctrl+C to stop the event loop
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    monitor.start()
    print(format_sessions(monitor.sessions()))
    ret = app.exec()
    monitor.stop()
    return ret
