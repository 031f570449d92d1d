"""Decide whether a pane's TTY hosts a Claude Code process."""

import logging
from typing import Iterable

from claude_pane_monitor.services.process_snapshot import ProcessTree
from claude_pane_monitor.types.panes import Pane
from claude_pane_monitor.types.processes import (
    DetectionReason,
    DirectMatch,
    ProcessRecord,
    WrapperMatch,
)

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_NAMES = ("claude", "anthropic")


class ProcessCorrelator:
    """Matches panes to assistant processes through their shared TTY."""

    def __init__(
        self,
        process_names: Iterable[str] = DEFAULT_PROCESS_NAMES,
        self_pane_id: int | None = None,
    ):
        self._process_names = [n for n in process_names if n]
        self._self_pane_id = self_pane_id

    @property
    def process_names(self) -> list[str]:
        return list(self._process_names)

    def is_assistant_process(self, record: ProcessRecord) -> bool:
        return any(record.mentions(name) for name in self._process_names)

    def detect(self, pane: Pane, tree: ProcessTree) -> DetectionReason | None:
        """Return why the pane hosts an assistant session, or None."""
        # Never report the pane the monitor itself runs in
        if self._self_pane_id is not None and pane.pane_id == self._self_pane_id:
            return None

        tty = pane.tty_short()
        if tty is None:
            return None

        for record in tree.on_tty(tty):
            if self.is_assistant_process(record):
                return DirectMatch(process_name=record.command)
            for name in self._process_names:
                if tree.has_ancestor(record.pid, name):
                    logger.debug("Pane %s: %s runs under %s",
                                 pane.pane_id, record.command, name)
                    return WrapperMatch(wrapper_process=record.command)
        return None
