"""Services for Claude Pane Monitor."""

from claude_pane_monitor.services.config_manager import ConfigManager
from claude_pane_monitor.services.file_watcher import TranscriptWatcher
from claude_pane_monitor.services.git_resolver import GitBranchCache
from claude_pane_monitor.services.process_correlator import ProcessCorrelator
from claude_pane_monitor.services.process_snapshot import ProcessTree, capture_tree
from claude_pane_monitor.services.session_assembler import assemble_sessions
from claude_pane_monitor.services.session_mapping import SessionMappingStore
from claude_pane_monitor.services.session_monitor import SessionMonitor
from claude_pane_monitor.services.session_resolver import SessionIdentityResolver
from claude_pane_monitor.services.status_classifier import classify
from claude_pane_monitor.services.wezterm import WeztermPaneSource
