"""OS process list capture and parent/child tree."""

import logging
import subprocess
from typing import Iterable

from claude_pane_monitor.types.processes import ProcessRecord
from claude_pane_monitor.utils.tty import normalize_tty

logger = logging.getLogger(__name__)

PS_COMMAND = ["ps", "-eo", "pid,ppid,tty,comm,args"]
PS_TIMEOUT_S = 10


class ProcessListingError(RuntimeError):
    """The process list could not be captured; the poll must be aborted."""


class ProcessTree:
    """Snapshot of all processes, indexed by pid.

    Built once per poll and shared read-only by every correlation query.
    """

    def __init__(self, records: Iterable[ProcessRecord]):
        self._processes: dict[int, ProcessRecord] = {}
        for record in records:
            self._processes[record.pid] = record

    def __len__(self) -> int:
        return len(self._processes)

    def __iter__(self):
        return iter(self._processes.values())

    def get(self, pid: int) -> ProcessRecord | None:
        return self._processes.get(pid)

    def on_tty(self, tty: str) -> list[ProcessRecord]:
        """Processes attached to a normalized TTY, in snapshot order."""
        return [p for p in self._processes.values() if p.tty == tty]

    def has_ancestor(self, pid: int, name: str) -> bool:
        """Whether pid or any of its ancestors mentions name.

        Stops at the root (ppid 0), a missing parent, or a cycle.
        """
        visited: set[int] = set()
        current = pid
        while current not in visited:
            visited.add(current)
            record = self._processes.get(current)
            if record is None:
                return False
            if record.mentions(name):
                return True
            if record.ppid == 0:
                return False
            current = record.ppid
        return False


def parse_ps_output(output: str) -> list[ProcessRecord]:
    """Parse `ps -eo pid,ppid,tty,comm,args` output, skipping the header."""
    records = []
    for idx, line in enumerate(output.splitlines()):
        if idx == 0:
            continue
        parts = line.split(None, 4)
        if len(parts) < 4:
            continue
        try:
            pid = int(parts[0])
            ppid = int(parts[1])
        except ValueError:
            continue
        records.append(ProcessRecord(
            pid=pid,
            ppid=ppid,
            tty=normalize_tty(parts[2]),
            command=parts[3],
            args=parts[4] if len(parts) > 4 else None,
        ))
    return records


def list_processes() -> list[ProcessRecord]:
    """Run ps and return every process. Raises ProcessListingError."""
    try:
        result = subprocess.run(
            PS_COMMAND,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=PS_TIMEOUT_S,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise ProcessListingError(f"Failed to execute ps: {e}") from e

    if result.returncode != 0:
        raise ProcessListingError(f"ps command failed: {result.stderr.strip()}")

    records = parse_ps_output(result.stdout)
    logger.debug("Captured %d processes", len(records))
    return records


def capture_tree() -> ProcessTree:
    """Capture the process list and index it. Raises ProcessListingError."""
    return ProcessTree(list_processes())
