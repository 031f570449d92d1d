"""Tests for claude_pane_monitor.services.process_correlator."""

import pytest

from claude_pane_monitor.services.process_correlator import ProcessCorrelator
from claude_pane_monitor.services.process_snapshot import ProcessTree
from claude_pane_monitor.types.panes import Pane
from claude_pane_monitor.types.processes import DirectMatch, ProcessRecord, WrapperMatch


@pytest.fixture
def tree():
    return ProcessTree([
        ProcessRecord(pid=1, ppid=0, tty=None, command="launchd"),
        ProcessRecord(pid=400, ppid=1, tty="ttys003", command="-zsh"),
        ProcessRecord(pid=500, ppid=400, tty="ttys003", command="claude"),
        ProcessRecord(pid=700, ppid=1, tty=None, command="claude"),
        ProcessRecord(pid=701, ppid=700, tty="ttys005", command="node"),
        ProcessRecord(pid=800, ppid=1, tty="ttys006", command="vim"),
        ProcessRecord(pid=900, ppid=1, tty="ttys007", command="node",
                      args="node /opt/Anthropic/cli.js"),
    ])


@pytest.fixture
def correlator():
    return ProcessCorrelator()


def test_direct_match(correlator, tree):
    pane = Pane(pane_id=1, tty_name="/dev/ttys003")
    assert correlator.detect(pane, tree) == DirectMatch(process_name="claude")


def test_wrapper_match(correlator, tree):
    pane = Pane(pane_id=2, tty_name="/dev/ttys005")
    reason = correlator.detect(pane, tree)
    assert isinstance(reason, WrapperMatch)
    assert reason.wrapper_process == "node"


def test_args_match_case_insensitive(correlator, tree):
    pane = Pane(pane_id=3, tty_name="/dev/ttys007")
    assert isinstance(correlator.detect(pane, tree), DirectMatch)


def test_no_match(correlator, tree):
    assert correlator.detect(Pane(pane_id=4, tty_name="/dev/ttys006"), tree) is None


def test_no_tty(correlator, tree):
    assert correlator.detect(Pane(pane_id=5), tree) is None


def test_unknown_tty(correlator, tree):
    assert correlator.detect(Pane(pane_id=6, tty_name="/dev/ttys999"), tree) is None


def test_self_pane_excluded(tree):
    correlator = ProcessCorrelator(self_pane_id=1)
    assert correlator.detect(Pane(pane_id=1, tty_name="/dev/ttys003"), tree) is None


def test_custom_allow_list(tree):
    correlator = ProcessCorrelator(process_names=["vim"])
    assert correlator.detect(Pane(pane_id=7, tty_name="/dev/ttys006"), tree) == DirectMatch("vim")
    assert correlator.detect(Pane(pane_id=1, tty_name="/dev/ttys003"), tree) is None


def test_display():
    assert DirectMatch("claude").display() == "Direct: TTY match (claude)"
    assert WrapperMatch("node").display() == "Wrapper: parent process found (node)"
