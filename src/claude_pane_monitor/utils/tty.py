"""TTY name normalization shared by the pane, process and mapping layers."""

DEVICE_PREFIX = "/dev/"


def normalize_tty(tty: str) -> str | None:
    """Normalize a TTY name so pane-reported and ps-reported names compare equal.

    /dev/ttys003 → ttys003
    pts/0 → pts/0
    ? → None
    """
    tty = tty.strip()
    # ps prints "?" (Linux) or "??" (macOS) for processes without a terminal
    if not tty or tty.strip("?") == "":
        return None
    if tty.startswith(DEVICE_PREFIX):
        tty = tty[len(DEVICE_PREFIX):]
    return tty or None


def mapping_file_stem(tty: str) -> str:
    """Sanitize a TTY name for use as a mapping filename (pts/0 → pts-0)."""
    return tty.replace("/", "-")
