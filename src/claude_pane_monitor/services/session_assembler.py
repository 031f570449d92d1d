"""Compose correlation and identity resolution into per-pane sessions."""

import logging
from collections import Counter
from typing import Callable, Iterable

from claude_pane_monitor.services.process_correlator import ProcessCorrelator
from claude_pane_monitor.services.process_snapshot import ProcessTree
from claude_pane_monitor.services.session_resolver import SessionIdentityResolver
from claude_pane_monitor.types.panes import Pane
from claude_pane_monitor.types.sessions import ClaudeSession

logger = logging.getLogger(__name__)

AMBIGUOUS_CWD_MESSAGE = (
    "Multiple sessions share this directory. "
    "Install the statusLine bridge to track each session by TTY."
)


def assemble_sessions(
    panes: Iterable[Pane],
    tree: ProcessTree,
    correlator: ProcessCorrelator,
    resolver: SessionIdentityResolver,
    workspace: str | None = None,
    branch_lookup: Callable[[str], str] | None = None,
) -> list[ClaudeSession]:
    """Build the session list for one poll, sorted by cwd then pane id."""
    sessions = []
    for pane in panes:
        if workspace is not None and pane.workspace != workspace:
            continue
        reason = correlator.detect(pane, tree)
        if reason is None:
            continue

        info = resolver.resolve(pane)
        cwd = pane.cwd_path()
        branch = branch_lookup(cwd) if branch_lookup and cwd else ""
        sessions.append(ClaudeSession(
            pane=pane,
            reason=reason,
            info=info,
            git_branch=branch,
        ))

    clear_ambiguous_previews(sessions)
    sessions.sort(key=lambda s: (s.pane.cwd_path() or "", s.pane.pane_id))
    return sessions


def clear_ambiguous_previews(sessions: list[ClaudeSession]):
    """Withhold previews when fallback-resolved sessions share a directory.

    Such sessions all read the same newest transcript, so the preview may
    belong to a sibling. No attempt is made to guess which one is which.
    """
    counts = Counter(
        s.pane.cwd_path() for s in sessions
        if s.info.is_ambiguous and s.pane.cwd_path()
    )
    for session in sessions:
        cwd = session.pane.cwd_path()
        if session.info.is_ambiguous and cwd and counts[cwd] > 1:
            logger.debug("Pane %s shares %s with another session",
                         session.pane.pane_id, cwd)
            session.info.last_prompt = None
            session.info.last_output = AMBIGUOUS_CWD_MESSAGE
