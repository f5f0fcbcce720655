"""
Transcript file scanner.

Walks the projects root (~/.claude/projects/ by default) and collects session
transcripts. Layout:

    projects/
        -Users-chris-project/
            <session-id>.jsonl          <- collected
            agent-<id>.jsonl            <- skipped (legacy agent transcripts)
            <session-id>/subagents/     <- pruned (agent transcripts)
"""

from __future__ import annotations

import asyncio
import os

from session_index.protocols import LoggerProtocol

__all__ = [
    'AGENT_FILE_PREFIX',
    'SUBAGENTS_DIR_NAME',
    'TRANSCRIPT_SUFFIX',
    'collect_transcript_files',
    'exists',
]

TRANSCRIPT_SUFFIX = '.jsonl'
AGENT_FILE_PREFIX = 'agent-'
SUBAGENTS_DIR_NAME = 'subagents'


def _list_dir(directory: str) -> list[tuple[str, bool, bool]]:
    """(name, is_dir, is_file) per entry; symlinks are not followed."""
    with os.scandir(directory) as it:
        return [
            (entry.name, entry.is_dir(follow_symlinks=False), entry.is_file(follow_symlinks=False)) for entry in it
        ]


def _is_transcript_name(name: str) -> bool:
    return name.endswith(TRANSCRIPT_SUFFIX) and not name.startswith(AGENT_FILE_PREFIX)


async def collect_transcript_files(root_dir: str, logger: LoggerProtocol) -> list[str]:
    """
    Collect transcript paths under root_dir.

    Iterative depth-first walk with an explicit stack (no recursion limit on
    deep trees). Order of the result is unspecified. A directory that cannot be
    listed is logged and skipped; the walk continues elsewhere.

    Args:
        root_dir: Directory to scan
        logger: Logger instance

    Returns:
        Paths (joined onto root_dir) of every `*.jsonl` file not named
        `agent-*`, outside any `subagents` directory
    """
    collected: list[str] = []
    stack = [root_dir]

    while stack:
        current_dir = stack.pop()

        try:
            entries = await asyncio.to_thread(_list_dir, current_dir)
        except OSError as e:
            await logger.warning(f'[discovery] readdir failed for {current_dir}: {e}')
            continue

        for name, is_dir, is_file in entries:
            full_path = os.path.join(current_dir, name)

            if is_dir:
                if name != SUBAGENTS_DIR_NAME:
                    stack.append(full_path)
                continue

            if is_file and _is_transcript_name(name):
                collected.append(full_path)

    return collected


def exists(target_path: str) -> bool:
    """Check that target_path exists and is readable."""
    return os.access(target_path, os.R_OK)
