"""Shared test helpers: transcript and mapping file builders."""

from datetime import datetime, timezone
from pathlib import Path

import orjson

NOW = datetime(2026, 1, 23, 16, 30, 0, tzinfo=timezone.utc)


def ts(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def user_line(text="hello", timestamp=None, **extra) -> dict:
    line = {
        "type": "user",
        "timestamp": timestamp or ts(NOW),
        "message": {"role": "user", "content": text},
    }
    line.update(extra)
    return line


def tool_result_line(timestamp=None) -> dict:
    return {
        "type": "user",
        "timestamp": timestamp or ts(NOW),
        "message": {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "ok"}],
        },
    }


def interrupt_line(timestamp=None) -> dict:
    return {
        "type": "user",
        "timestamp": timestamp or ts(NOW),
        "message": {
            "role": "user",
            "content": [{"type": "text", "text": "[Request interrupted by user]"}],
        },
    }


def assistant_line(text="done", stop_reason="end_turn", tools=(), timestamp=None) -> dict:
    content = []
    if text:
        content.append({"type": "text", "text": text})
    for name in tools:
        content.append({"type": "tool_use", "id": f"toolu_{name}", "name": name, "input": {}})
    return {
        "type": "assistant",
        "timestamp": timestamp or ts(NOW),
        "message": {"role": "assistant", "stop_reason": stop_reason, "content": content},
    }


def system_line(subtype="stop_hook_summary", timestamp=None) -> dict:
    return {"type": "system", "subtype": subtype, "timestamp": timestamp or ts(NOW)}


def progress_line(data_type="bash_progress", timestamp=None) -> dict:
    return {"type": "progress", "data": {"type": data_type}, "timestamp": timestamp or ts(NOW)}


def write_jsonl(path: Path, lines: list) -> Path:
    """Write dicts (or raw strings) as JSONL."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        for line in lines:
            data = line.encode() if isinstance(line, str) else orjson.dumps(line)
            f.write(data + b"\n")
    return path


def write_mapping(sessions_dir: Path, tty: str, transcript_path, updated_at: datetime,
                  session_id="sess-1", cwd="/Users/a/proj") -> Path:
    path = sessions_dir / f"{tty.replace('/', '-')}.json"
    path.write_bytes(orjson.dumps({
        "session_id": session_id,
        "transcript_path": str(transcript_path),
        "cwd": cwd,
        "tty": f"/dev/{tty}",
        "updated_at": ts(updated_at),
    }))
    return path
