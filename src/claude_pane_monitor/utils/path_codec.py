"""Map a working directory to its Claude Code transcript directory."""

from pathlib import Path

CLAUDE_PROJECTS_DIR = Path.home() / ".claude" / "projects"

_ENCODED_CHARS = "/._"


def encode_cwd(cwd: str) -> str:
    """Encode a working directory to a Claude project directory name.

    /Users/a/hobby/wzcc → -Users-a-hobby-wzcc
    /Users/a/develop/rcmr_stadium → -Users-a-develop-rcmr-stadium
    """
    if not cwd:
        return ""
    return "".join("-" if c in _ENCODED_CHARS else c for c in cwd)


def transcript_dir_for(cwd: str, projects_root: str | Path | None = None) -> Path:
    """Return <projects_root>/<encoded cwd>."""
    root = Path(projects_root) if projects_root else CLAUDE_PROJECTS_DIR
    return root / encode_cwd(cwd)


def latest_transcript(directory: str | Path) -> Path | None:
    """Most recently modified .jsonl file in a directory, or None."""
    directory = Path(directory)
    if not directory.is_dir():
        return None

    latest: Path | None = None
    latest_mtime = 0.0
    for candidate in directory.glob("*.jsonl"):
        try:
            mtime = candidate.stat().st_mtime
        except OSError:
            # Removed between listing and stat
            continue
        if latest is None or mtime > latest_mtime:
            latest, latest_mtime = candidate, mtime
    return latest
