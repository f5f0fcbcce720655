"""
Path containment utilities for matching sessions to workspace folders.

A session belongs to the most specific open workspace folder that contains
its recorded working directory. Containment is structural (separator-bounded),
never a raw string prefix: `/tmp/repo-extra` is NOT inside `/tmp/repo`.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass

from session_index.schemas.operations import WorkspaceFolder

__all__ = [
    'PrecomputedWorkspace',
    'is_path_within',
    'match_workspace',
    'match_workspace_precomputed',
    'normalize_fs_path',
    'precompute_workspace_paths',
]


def normalize_fs_path(fs_path: str) -> str:
    """
    Resolve to an absolute, normalized path; case-fold on case-insensitive platforms.

    Symlinks are not followed.

    Examples:
        >>> normalize_fs_path('/tmp/repo/../repo/src/')
        '/tmp/repo/src'
    """
    return os.path.normcase(os.path.abspath(fs_path))


def _is_within_normalized(candidate: str, root: str) -> bool:
    if candidate == root:
        return True
    # A filesystem root ('/', 'C:\\') already ends with the separator
    prefix = root if root.endswith(os.sep) else root + os.sep
    return candidate.startswith(prefix)


def is_path_within(candidate_path: str, root_path: str) -> bool:
    """
    Check whether candidate_path equals root_path or lies underneath it.

    Examples:
        >>> is_path_within('/tmp/repo', '/tmp/repo')
        True
        >>> is_path_within('/tmp/repo/src/app.py', '/tmp/repo')
        True
        >>> is_path_within('/tmp/repo-extra', '/tmp/repo')
        False
    """
    return _is_within_normalized(normalize_fs_path(candidate_path), normalize_fs_path(root_path))


@dataclass(frozen=True)
class PrecomputedWorkspace:
    """A workspace folder with its path normalized once per discovery pass."""

    folder: WorkspaceFolder
    normalized_path: str


def precompute_workspace_paths(workspace_folders: Sequence[WorkspaceFolder]) -> list[PrecomputedWorkspace]:
    """
    Normalize folder paths once, deepest first.

    Sorting by descending normalized length guarantees the first containing
    entry found by match_workspace_precomputed is the most specific one.
    """
    entries = [PrecomputedWorkspace(folder, normalize_fs_path(folder.path)) for folder in workspace_folders]
    entries.sort(key=lambda entry: len(entry.normalized_path), reverse=True)
    return entries


def match_workspace_precomputed(
    session_cwd: str,
    precomputed: Sequence[PrecomputedWorkspace],
) -> WorkspaceFolder | None:
    """Return the most specific folder containing session_cwd, or None."""
    normalized_cwd = normalize_fs_path(session_cwd)
    for entry in precomputed:
        if _is_within_normalized(normalized_cwd, entry.normalized_path):
            return entry.folder
    return None


def match_workspace(session_cwd: str, workspace_folders: Sequence[WorkspaceFolder]) -> WorkspaceFolder | None:
    """One-off variant of match_workspace_precomputed."""
    return match_workspace_precomputed(session_cwd, precompute_workspace_paths(workspace_folders))
