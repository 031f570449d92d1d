"""RFC3339 timestamp parsing."""

import re
from datetime import datetime, timezone

# Fractional seconds beyond microseconds (e.g. nanoseconds from chrono)
_FRACTION_RE = re.compile(r'(\.\d{6})\d+')


def parse_rfc3339(value) -> datetime | None:
    """Parse an RFC3339 string into an aware datetime.

    "2026-01-23T16:29:06.719Z" → 2026-01-23 16:29:06.719000+00:00
    Naive values are taken as UTC. Anything unparseable yields None.
    """
    if not isinstance(value, str) or not value:
        return None
    text = _FRACTION_RE.sub(r'\1', value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
