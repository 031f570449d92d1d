"""Tests for claude_pane_monitor.services.file_watcher."""

import time

import pytest

from claude_pane_monitor.services.file_watcher import TranscriptWatcher


@pytest.fixture
def watcher(qapp):
    w = TranscriptWatcher()
    yield w
    w.stop()


def pump(qapp, rounds=20):
    for _ in range(rounds):
        qapp.processEvents()
        time.sleep(0.05)


class TestSyncDirectories:
    def test_adds_directories(self, watcher, tmp_path):
        watcher.sync_directories({str(tmp_path)})
        assert watcher.watched_directories() == {str(tmp_path)}
        assert str(tmp_path) in watcher._watcher.directories()

    def test_removes_dropped_directories(self, watcher, tmp_path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()
        watcher.sync_directories({str(a), str(b)})
        watcher.sync_directories({str(b)})
        assert watcher.watched_directories() == {str(b)}
        assert str(a) not in watcher._watcher.directories()

    def test_missing_paths_skipped(self, watcher, tmp_path):
        watcher.sync_directories({str(tmp_path / "missing")})
        assert watcher.watched_directories() == set()

    def test_files(self, watcher, tmp_path):
        f = tmp_path / "s.jsonl"
        f.write_text("{}\n")
        watcher.sync_directories({str(tmp_path)}, {str(f)})
        assert watcher.watched_files() == {str(f)}
        watcher.sync_directories({str(tmp_path)})
        assert watcher.watched_files() == set()

    def test_stop_clears_everything(self, watcher, tmp_path):
        f = tmp_path / "s.jsonl"
        f.write_text("{}\n")
        watcher.sync_directories({str(tmp_path)}, {str(f)})
        watcher.stop()
        assert len(watcher._watcher.directories()) == 0
        assert len(watcher._watcher.files()) == 0
        assert watcher.watched_directories() == set()


class TestSignals:
    def test_append_emits_transcript_changed(self, watcher, qapp, tmp_path):
        f = tmp_path / "s.jsonl"
        f.write_text("{}\n")
        watcher.sync_directories({str(tmp_path)}, {str(f)})

        received = []
        watcher.transcript_changed.connect(lambda value: received.append(value))

        time.sleep(0.05)
        with open(f, "a") as fh:
            fh.write('{"type": "user"}\n')
        pump(qapp)

        assert str(f) in received

    def test_new_file_emits_for_directory(self, watcher, qapp, tmp_path):
        watcher.sync_directories({str(tmp_path)})

        received = []
        watcher.transcript_changed.connect(lambda value: received.append(value))

        (tmp_path / "new.jsonl").write_text("{}\n")
        pump(qapp)

        assert str(tmp_path) in received

    def test_burst_is_debounced(self, watcher, qapp, tmp_path):
        f = tmp_path / "s.jsonl"
        f.write_text("")
        watcher.sync_directories(set(), {str(f)})

        received = []
        watcher.transcript_changed.connect(lambda value: received.append(value))

        for i in range(5):
            with open(f, "a") as fh:
                fh.write(f'{{"n": {i}}}\n')
            qapp.processEvents()
        pump(qapp)

        assert received.count(str(f)) == 1
