"""Tests for workspace path containment and matching."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from session_index.paths import (
    is_path_within,
    match_workspace,
    match_workspace_precomputed,
    normalize_fs_path,
    precompute_workspace_paths,
)
from session_index.schemas.operations import WorkspaceFolder


@pytest.fixture
def repo(tmp_path: Path) -> str:
    return str(tmp_path / 'repo')


def test_path_is_within_itself(repo: str) -> None:
    assert is_path_within(repo, repo)


@pytest.mark.parametrize('suffix', ['src', 'src/app.py', 'a/b/c/d', '.hidden', 'repo-extra'])
def test_descendants_are_within(repo: str, suffix: str) -> None:
    assert is_path_within(repo + os.sep + suffix, repo)


def test_sibling_sharing_text_prefix_is_not_within(repo: str) -> None:
    assert not is_path_within(repo + '-extra', repo)
    assert not is_path_within(repo + 'x/file.py', repo)


def test_parent_is_not_within_child(repo: str) -> None:
    assert not is_path_within(str(Path(repo).parent), repo)


def test_normalization_of_dot_segments_and_trailing_separator(repo: str) -> None:
    assert is_path_within(f'{repo}/src/../src/main.py', repo + os.sep)
    assert normalize_fs_path(f'{repo}/./src/') == normalize_fs_path(f'{repo}/src')


def test_filesystem_root_contains_everything(repo: str) -> None:
    assert is_path_within(repo, os.path.abspath(os.sep))


def test_precompute_orders_deepest_first(tmp_path: Path) -> None:
    shallow = WorkspaceFolder.from_path(tmp_path / 'a')
    deep = WorkspaceFolder.from_path(tmp_path / 'a' / 'b' / 'c')
    middle = WorkspaceFolder.from_path(tmp_path / 'a' / 'b')

    precomputed = precompute_workspace_paths([shallow, deep, middle])

    assert [entry.folder for entry in precomputed] == [deep, middle, shallow]


def test_match_prefers_most_specific_folder(tmp_path: Path) -> None:
    outer = WorkspaceFolder.from_path(tmp_path / 'mono')
    inner = WorkspaceFolder.from_path(tmp_path / 'mono' / 'packages' / 'api')
    precomputed = precompute_workspace_paths([outer, inner])

    assert match_workspace_precomputed(str(tmp_path / 'mono' / 'packages' / 'api' / 'src'), precomputed) == inner
    assert match_workspace_precomputed(str(tmp_path / 'mono' / 'packages' / 'web'), precomputed) == outer
    assert match_workspace_precomputed(str(tmp_path / 'elsewhere'), precomputed) is None


def test_match_workspace_without_precomputation(tmp_path: Path) -> None:
    folder = WorkspaceFolder.from_path(tmp_path / 'repo')

    assert match_workspace(str(tmp_path / 'repo' / 'lib'), [folder]) == folder
    assert match_workspace(str(tmp_path / 'repo-extra'), [folder]) is None
    assert match_workspace(str(tmp_path / 'repo'), []) is None
