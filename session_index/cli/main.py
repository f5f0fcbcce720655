#!/usr/bin/env python3
"""
Command-line interface for claude-session-index.

Provides commands to list, inspect and search the Claude Code sessions that
belong to your project folders.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Literal

import pydantic
import typer

from session_index.cli.formatting import format_age_token, format_local_time, truncate_label
from session_index.cli.logger import CLILogger
from session_index.config.cli import CliSettings, settings
from session_index.exceptions import AmbiguousSessionError, SessionIndexError, SessionNotFoundError
from session_index.schemas.operations import DiscoveryResult, SessionNode, SessionPrompt, WorkspaceFolder
from session_index.services.discovery import SessionDiscoveryService
from session_index.services.search import MIN_QUERY_LENGTH, SearchHit, search_entries

app = typer.Typer(
    name='claude-sessions',
    help='Browse and search the Claude Code sessions of your project folders',
    add_completion=False,
)

OutputFormat = Literal['text', 'json']

_prompt_list_adapter = pydantic.TypeAdapter(list[SessionPrompt])
_search_hits_adapter = pydantic.TypeAdapter(list[SearchHit])

# Shared options
_ROOT_OPTION = typer.Option(None, '--root', help='Transcript history root (default: ~/.claude/projects)')
_FORMAT_OPTION = typer.Option('text', '--format', '-f', help='Output format: text or json')
_VERBOSE_OPTION = typer.Option(False, '--verbose', '-v', help='Verbose output')
_FOLDER_OPTION = typer.Option(None, '--folder', '-w', help='Workspace folder (repeatable, default: current directory)')


# ==============================================================================
# Helpers
# ==============================================================================


def _load_settings() -> CliSettings:
    """Instantiate the lazy settings, turning configuration errors into a CLI error."""
    try:
        return settings.__wrapped__
    except (pydantic.ValidationError, FileNotFoundError) as e:
        typer.secho(f'Error: invalid configuration: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _make_service(root: Path | None, verbose: bool) -> SessionDiscoveryService:
    config = _load_settings()
    return SessionDiscoveryService(
        projects_root=root or config.PROJECTS_ROOT,
        logger=CLILogger(verbose=verbose),
        batch_concurrency=config.BATCH_CONCURRENCY,
    )


def _workspace_folders(folders: Sequence[Path] | None) -> list[WorkspaceFolder]:
    return [WorkspaceFolder.from_path(folder.resolve()) for folder in (folders or [Path.cwd()])]


def resolve_session(result: DiscoveryResult, session_id: str) -> SessionNode:
    """
    Find a discovered session by full ID or unique prefix.

    Args:
        result: Output of SessionDiscoveryService.discover()
        session_id: Full session ID or prefix

    Returns:
        The matching SessionNode

    Raises:
        SessionNotFoundError: If no session matches
        AmbiguousSessionError: If the prefix matches several sessions
    """
    nodes = [node for sessions in result.sessions_by_workspace.values() for node in sessions]

    for node in nodes:
        if node.session_id == session_id:
            return node

    matches = [node for node in nodes if node.session_id.startswith(session_id)]
    if not matches:
        raise SessionNotFoundError(session_id, list(result.sessions_by_workspace))

    matching_ids = sorted({node.session_id for node in matches})
    if len(matching_ids) > 1:
        raise AmbiguousSessionError(session_id, matching_ids)

    return matches[0]


def _print_version(value: bool) -> None:
    if value:
        config = _load_settings()
        typer.echo(f'{config.APP_NAME} {config.VERSION}')
        raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False, '--version', callback=_print_version, is_eager=True, help='Show the version and exit'
    ),
) -> None:
    """Browse and search the Claude Code sessions of your project folders."""


# ==============================================================================
# Commands
# ==============================================================================


@app.command('list')
def list_sessions(
    folders: list[Path] | None = typer.Argument(None, help='Workspace folders (default: current directory)'),
    root: Path | None = _ROOT_OPTION,
    format: OutputFormat = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """List the sessions of each workspace folder, newest first.

    Examples:
        claude-sessions list
        claude-sessions list ~/src/api ~/src/web --format json
    """
    asyncio.run(_list_async(folders, root, format, verbose))


async def _list_async(
    folders: Sequence[Path] | None,
    root: Path | None,
    format: OutputFormat,
    verbose: bool,
) -> None:
    """Async implementation of list command."""
    service = _make_service(root, verbose)
    workspace_folders = _workspace_folders(folders)
    result = await service.discover(workspace_folders)

    if format == 'json':
        typer.echo(result.model_dump_json(indent=2))
        return

    if result.global_info_message:
        typer.secho(result.global_info_message, fg=typer.colors.YELLOW)
        return

    for folder in workspace_folders:
        typer.secho(f'{folder.name} ({folder.path})', bold=True)
        sessions = result.sessions_by_workspace.get(folder.key, [])
        if not sessions:
            typer.echo('  No sessions found.')
            continue
        for session in sessions:
            age = format_age_token(session.updated_at)
            typer.echo(f'  {age:>8}  {session.session_id[:8]}  {truncate_label(session.title, 64)}')


@app.command()
def prompts(
    session_id: str = typer.Argument(..., help='Session ID (full or prefix)'),
    folders: list[Path] | None = _FOLDER_OPTION,
    full: bool = typer.Option(False, '--full', help='Show full prompt text and the paired response'),
    root: Path | None = _ROOT_OPTION,
    format: OutputFormat = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Show the prompts of a session in the order they were sent.

    Examples:
        claude-sessions prompts 019b53ff
        claude-sessions prompts 019b53ff --full
    """
    asyncio.run(_prompts_async(session_id, folders, full, root, format, verbose))


async def _prompts_async(
    session_id: str,
    folders: Sequence[Path] | None,
    full: bool,
    root: Path | None,
    format: OutputFormat,
    verbose: bool,
) -> None:
    """Async implementation of prompts command."""
    service = _make_service(root, verbose)
    result = await service.discover(_workspace_folders(folders))

    if result.global_info_message:
        typer.secho(result.global_info_message, fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)

    try:
        session = resolve_session(result, session_id)
    except SessionIndexError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    session_prompts = await service.get_user_prompts(session)

    if format == 'json':
        typer.echo(_prompt_list_adapter.dump_json(session_prompts, indent=2).decode())
        return

    typer.echo(f'Session: {session.session_id}')
    typer.echo(f'Title: {session.title}')
    typer.echo(f'Transcript: {session.transcript_path}')
    typer.echo()

    if not session_prompts:
        typer.echo('No prompts found.')
        return

    for index, prompt in enumerate(session_prompts, 1):
        when = format_local_time(prompt.timestamp_ms) if prompt.timestamp_ms is not None else '-'
        typer.secho(f'{index:>3}. [{when}] {prompt.prompt_title}', bold=full)
        if full:
            typer.echo(prompt.prompt_raw)
            if prompt.response_raw:
                typer.secho('--- response ---', fg=typer.colors.CYAN)
                typer.echo(prompt.response_raw)
            typer.echo()


@app.command()
def search(
    query: str = typer.Argument(..., help='Text to look for (case-insensitive)'),
    folders: list[Path] | None = _FOLDER_OPTION,
    limit: int | None = typer.Option(None, '--limit', '-n', min=1, help='Maximum number of results'),
    root: Path | None = _ROOT_OPTION,
    format: OutputFormat = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Search the prompts and responses of all sessions in the workspace folders.

    Examples:
        claude-sessions search "dependency injection"
        claude-sessions search webpack -w ~/src/web --limit 5
    """
    if len(query) < MIN_QUERY_LENGTH:
        raise typer.BadParameter(f'Query must be at least {MIN_QUERY_LENGTH} characters')
    asyncio.run(_search_async(query, folders, limit, root, format, verbose))


async def _search_async(
    query: str,
    folders: Sequence[Path] | None,
    limit: int | None,
    root: Path | None,
    format: OutputFormat,
    verbose: bool,
) -> None:
    """Async implementation of search command."""
    service = _make_service(root, verbose)
    entries = await service.get_searchable_entries(_workspace_folders(folders))
    if limit is None:
        limit = _load_settings().SEARCH_RESULT_LIMIT
    hits = search_entries(entries, query, limit)

    if format == 'json':
        typer.echo(_search_hits_adapter.dump_json(hits, indent=2).decode())
        return

    if not hits:
        typer.echo(f'No matches for {query!r} in {len(entries)} sessions.')
        return

    for hit in hits:
        entry = hit.entry
        typer.secho(truncate_label(entry.title, 80), bold=True)
        typer.echo(f'  {Path(entry.cwd).name} · {format_age_token(entry.updated_at)} · {entry.session_id[:8]}')
        typer.echo(f'  {hit.snippet}')


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
