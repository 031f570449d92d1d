"""Git branch lookup for pane working directories."""

import logging
import time
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_TTL_S = 5.0


def resolve_git_branch(project_path: str) -> str:
    """Read the current git branch from a project path.

    Handles both regular repos and worktrees (.git as file with gitdir pointer).
    Only the given directory is checked, not its parents.
    """
    git_path = Path(project_path) / ".git"
    if not git_path.exists():
        return ""

    try:
        if git_path.is_file():
            # Worktree: .git is a file containing "gitdir: <path>"
            content = git_path.read_text().strip()
            if content.startswith("gitdir:"):
                gitdir = Path(content[len("gitdir:"):].strip())
                if not gitdir.is_absolute():
                    gitdir = Path(project_path) / gitdir
                head_path = gitdir / "HEAD"
            else:
                return ""
        else:
            head_path = git_path / "HEAD"

        if not head_path.exists():
            return ""

        head = head_path.read_text().strip()
        if head.startswith("ref: refs/heads/"):
            return head[len("ref: refs/heads/"):]
        # Detached HEAD: return short hash
        return head[:8] if len(head) >= 8 else head

    except (OSError, ValueError):
        logger.debug("Failed to resolve git branch for %s", project_path, exc_info=True)
        return ""


class GitBranchCache:
    """Branch lookups memoized per directory for a short TTL."""

    def __init__(self, ttl_s: float = DEFAULT_BRANCH_TTL_S,
                 clock: Callable[[], float] = time.monotonic):
        self._ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def get(self, cwd: str) -> str:
        cached = self._entries.get(cwd)
        now = self._clock()
        if cached is not None and now - cached[1] < self._ttl_s:
            return cached[0]
        branch = resolve_git_branch(cwd)
        self._entries[cwd] = (branch, now)
        return branch

    def clear(self):
        self._entries.clear()
