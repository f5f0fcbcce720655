"""Transcript builders shared by the test modules."""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any


def system_line(session_id: str, cwd: str) -> dict[str, Any]:
    return {'type': 'system', 'sessionId': session_id, 'cwd': cwd}


def user_line(
    content: Any,
    uuid: str | None = None,
    session_id: str | None = None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    record: dict[str, Any] = {'type': 'user', 'message': {'role': 'user', 'content': content}}
    if uuid is not None:
        record['uuid'] = uuid
    if session_id is not None:
        record['sessionId'] = session_id
    if timestamp is not None:
        record['timestamp'] = timestamp
    return record


def assistant_line(content: Any) -> dict[str, Any]:
    return {'type': 'assistant', 'message': {'role': 'assistant', 'content': content}}


def write_jsonl(path: Path, lines: list[dict[str, Any] | str]) -> Path:
    """Write records as JSONL; str items are written verbatim (for malformed lines)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        for line in lines:
            f.write((line if isinstance(line, str) else json.dumps(line)) + '\n')
    return path


def write_transcript(
    path: Path,
    session_id: str,
    cwd: str | Path,
    turns: Sequence[tuple[str, str]] = (),
) -> Path:
    """System identity line followed by ('user' | 'assistant', text) turns."""
    lines: list[dict[str, Any] | str] = [system_line(session_id, str(cwd))]
    for role, text in turns:
        lines.append(user_line(text, session_id=session_id) if role == 'user' else assistant_line(text))
    return write_jsonl(path, lines)


def set_mtime(path: Path, mtime_ms: int) -> None:
    """Pin a file's access and modification time (epoch milliseconds)."""
    ns = mtime_ms * 1_000_000
    os.utime(path, ns=(ns, ns))
