"""Shared test fixtures for Claude Pane Monitor."""

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

from helpers import NOW


@pytest.fixture(scope="session")
def qapp():
    """Create a QGuiApplication for tests that need Qt."""
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv or ["test"])
    yield app


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used by classifier and mapping tests."""
    return NOW


@pytest.fixture
def projects_root(tmp_path) -> Path:
    """Temporary Claude projects directory."""
    root = tmp_path / ".claude" / "projects"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def sessions_dir(tmp_path) -> Path:
    """Temporary per-TTY mapping directory."""
    d = tmp_path / ".claude" / "pane-monitor" / "sessions"
    d.mkdir(parents=True)
    return d
