"""Sanitize transcript text for preview display, stripping internal markup."""

import re

# Patterns to strip from preview content
_SYSTEM_REMINDER_RE = re.compile(
    r'<system-reminder>.*?</system-reminder>',
    re.DOTALL,
)
_LOCAL_COMMAND_RE = re.compile(
    r'<local-command-caveat>.*?</local-command-caveat>',
    re.DOTALL,
)
_LOCAL_STDOUT_RE = re.compile(
    r'<local-command-stdout>.*?</local-command-stdout>',
    re.DOTALL,
)

_ALL_PATTERNS = [
    _SYSTEM_REMINDER_RE,
    _LOCAL_COMMAND_RE,
    _LOCAL_STDOUT_RE,
]


def sanitize_content(text: str) -> str:
    """Remove internal markup tags from content for clean display."""
    if not text:
        return ""
    result = text
    for pattern in _ALL_PATTERNS:
        result = pattern.sub("", result)
    # Clean up excessive whitespace left by removals
    result = re.sub(r'\n{3,}', '\n\n', result)
    return result.strip()


def truncate_preview(text: str, max_chars: int) -> str:
    """Cut text to max_chars characters, marking the cut with '...'."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
