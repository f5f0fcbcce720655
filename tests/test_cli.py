"""Tests for the claude-sessions command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from support import assistant_line, set_mtime, system_line, user_line, write_jsonl, write_transcript
from typer.testing import CliRunner

from session_index.cli.main import app, resolve_session
from session_index.exceptions import AmbiguousSessionError, SessionNotFoundError
from session_index.schemas.operations import DiscoveryResult, SessionNode

runner = CliRunner()


@pytest.fixture
def history(projects_root: Path, workspace: Path) -> Path:
    """Two sessions in the workspace: a renamed one and a plain one."""
    renamed = write_jsonl(
        projects_root / 'proj' / 'abc12345-0000.jsonl',
        [
            system_line('abc12345-0000', str(workspace)),
            user_line('Set up the build', uuid='p1', timestamp='2024-01-02T03:04:05Z'),
            assistant_line('Added a Makefile'),
            user_line('<command-name>/rename</command-name><command-args>Build setup</command-args>'),
            user_line('Now add CI', uuid='p2'),
            assistant_line('Added a workflow for webpack builds'),
        ],
    )
    plain = write_transcript(
        projects_root / 'proj' / 'abd99999-1111.jsonl',
        'abd99999-1111',
        workspace,
        [('user', 'Investigate flaky tests'), ('assistant', 'The retry decorator hides failures')],
    )
    set_mtime(renamed, 2_000_000_000_000)
    set_mtime(plain, 1_000_000_000_000)
    return projects_root


def _invoke(*args: str) -> tuple[int, str]:
    result = runner.invoke(app, list(args))
    return result.exit_code, result.output


# ==============================================================================
# list
# ==============================================================================


def test_list_text(history: Path, workspace: Path) -> None:
    exit_code, output = _invoke('list', str(workspace), '--root', str(history))

    assert exit_code == 0
    assert f'ws ({workspace})' in output
    lines = [line for line in output.splitlines() if line.startswith('  ')]
    assert 'abc12345' in lines[0] and 'Build setup' in lines[0]
    assert 'abd99999' in lines[1] and 'Investigate flaky tests' in lines[1]


def test_list_json(history: Path, workspace: Path) -> None:
    result = runner.invoke(app, ['list', str(workspace), '--root', str(history), '--format', 'json'])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload['global_info_message'] is None
    assert [node['session_id'] for node in payload['sessions_by_workspace'][str(workspace)]] == [
        'abc12345-0000',
        'abd99999-1111',
    ]


def test_list_verbose_reports_the_scan(history: Path, workspace: Path) -> None:
    write_jsonl(history / 'proj' / 'torn.jsonl', ['{"type": "sys'])

    quiet_code, quiet = _invoke('list', str(workspace), '--root', str(history))
    verbose_code, verbose = _invoke('list', str(workspace), '--root', str(history), '--verbose')

    assert quiet_code == verbose_code == 0
    assert '[INFO]' not in quiet
    assert '[WARNING] [discovery] malformed JSON in' in quiet
    assert '[INFO] [discovery] scanned 3 transcripts' in verbose


def test_list_without_history(tmp_path: Path, workspace: Path) -> None:
    exit_code, output = _invoke('list', str(workspace), '--root', str(tmp_path / 'missing'))

    assert exit_code == 0
    assert 'No Claude project history found at' in output


def test_list_empty_folder(history: Path, tmp_path: Path) -> None:
    other = tmp_path / 'other'
    other.mkdir()

    exit_code, output = _invoke('list', str(other), '--root', str(history))

    assert exit_code == 0
    assert 'No sessions found.' in output


# ==============================================================================
# prompts
# ==============================================================================


def test_prompts_json_by_prefix(history: Path, workspace: Path) -> None:
    result = runner.invoke(app, ['prompts', 'abc', '-w', str(workspace), '--root', str(history), '-f', 'json'])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [(p['prompt_id'], p['prompt_raw']) for p in payload] == [('p1', 'Set up the build'), ('p2', 'Now add CI')]
    assert payload[0]['response_raw'] == 'Added a Makefile'
    assert payload[0]['timestamp_ms'] == 1_704_164_645_000


def test_prompts_full_text(history: Path, workspace: Path) -> None:
    exit_code, output = _invoke('prompts', 'abd99999-1111', '-w', str(workspace), '--root', str(history), '--full')

    assert exit_code == 0
    assert 'Session: abd99999-1111' in output
    assert '1. [-] Investigate flaky tests' in output
    assert 'The retry decorator hides failures' in output


def test_prompts_ambiguous_prefix(history: Path, workspace: Path) -> None:
    exit_code, output = _invoke('prompts', 'ab', '-w', str(workspace), '--root', str(history))

    assert exit_code == 1
    assert 'abc12345-0000' in output and 'abd99999-1111' in output


def test_prompts_unknown_session(history: Path, workspace: Path) -> None:
    exit_code, output = _invoke('prompts', 'zzz', '-w', str(workspace), '--root', str(history))

    assert exit_code == 1
    assert 'zzz' in output


# ==============================================================================
# search
# ==============================================================================


def test_search_text(history: Path, workspace: Path) -> None:
    exit_code, output = _invoke('search', 'WEBPACK', '-w', str(workspace), '--root', str(history))

    assert exit_code == 0
    assert 'Build setup' in output
    assert 'ws · ' in output
    assert 'webpack builds' in output
    assert 'Investigate flaky tests' not in output


def test_search_json_respects_limit(history: Path, workspace: Path) -> None:
    result = runner.invoke(app, ['search', 'the', '-w', str(workspace), '--root', str(history), '-f', 'json'])
    limited = runner.invoke(
        app, ['search', 'the', '-w', str(workspace), '--root', str(history), '-f', 'json', '-n', '1']
    )

    assert [hit['entry']['session_id'] for hit in json.loads(result.stdout)] == ['abc12345-0000', 'abd99999-1111']
    assert len(json.loads(limited.stdout)) == 1


def test_search_without_matches(history: Path, workspace: Path) -> None:
    exit_code, output = _invoke('search', 'kubernetes', '-w', str(workspace), '--root', str(history))

    assert exit_code == 0
    assert "No matches for 'kubernetes' in 2 sessions." in output


def test_search_rejects_short_queries(history: Path, workspace: Path) -> None:
    exit_code, _ = _invoke('search', 'x', '-w', str(workspace), '--root', str(history))

    assert exit_code == 2


@pytest.mark.parametrize('limit', ['0', '-1'])
def test_search_rejects_non_positive_limits(history: Path, workspace: Path, limit: str) -> None:
    exit_code, output = _invoke('search', 'the', '-w', str(workspace), '--root', str(history), '--limit', limit)

    assert exit_code == 2
    assert '--limit' in output


def test_version() -> None:
    exit_code, output = _invoke('--version')

    assert exit_code == 0
    assert output.strip() == 'claude-session-index 0.1.0'


# ==============================================================================
# resolve_session
# ==============================================================================


def _node(session_id: str) -> SessionNode:
    return SessionNode(
        session_id=session_id,
        cwd='/ws',
        transcript_path=f'/history/{session_id}.jsonl',
        title=session_id,
        updated_at=0,
    )


def test_exact_id_beats_longer_prefix_matches() -> None:
    result = DiscoveryResult(sessions_by_workspace={'/ws': [_node('abc'), _node('abcd')]})

    assert resolve_session(result, 'abc').session_id == 'abc'


def test_prefix_spanning_folders_is_ambiguous() -> None:
    result = DiscoveryResult(sessions_by_workspace={'/a': [_node('abc1')], '/b': [_node('abc2')]})

    with pytest.raises(AmbiguousSessionError) as exc_info:
        resolve_session(result, 'abc')

    assert exc_info.value.matches == ['abc1', 'abc2']


def test_unknown_prefix() -> None:
    with pytest.raises(SessionNotFoundError):
        resolve_session(DiscoveryResult(sessions_by_workspace={'/ws': [_node('abc')]}), 'x')
