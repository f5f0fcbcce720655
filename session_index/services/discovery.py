"""
Session discovery service - finds sessions for the open workspace folders.

Scans ~/.claude/projects/ for transcripts, parses each one (reusing cached
results while the file's mtime is unchanged), matches sessions to the most
specific containing workspace folder, and deduplicates by session ID.

Three mtime-gated caches live on the service instance, keyed by transcript path:
- session metadata (ParsedSession)       - filled by discover()
- prompt lists (list[SessionPrompt])     - filled by get_user_prompts()
- searchable content text                - filled by get_searchable_entries()

An entry is used only while its stored mtime equals the file's current mtime.
Entries for transcripts that disappeared are purged at the end of every scan.

Nothing here raises for I/O or parse errors: the affected item is logged and
skipped, and callers see empty or partial results.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from session_index.paths import match_workspace_precomputed, precompute_workspace_paths
from session_index.protocols import LoggerProtocol, NullLogger
from session_index.schemas.operations import (
    CachedContentText,
    CachedPromptList,
    CachedSessionMeta,
    DiscoveryResult,
    SearchableEntry,
    SessionNode,
    SessionPrompt,
    TranscriptCandidate,
    WorkspaceFolder,
)
from session_index.services.content import parse_session_content
from session_index.services.prompt_parser import parse_all_user_prompts
from session_index.services.scanner import collect_transcript_files, exists
from session_index.services.session_parser import parse_transcript_file
from session_index.services.title import build_title

T = TypeVar('T')
R = TypeVar('R')

__all__ = [
    'DEFAULT_BATCH_CONCURRENCY',
    'NO_WORKSPACE_MESSAGE',
    'SessionDiscoveryService',
]

DEFAULT_BATCH_CONCURRENCY = 8

NO_WORKSPACE_MESSAGE = 'Open a folder to view Claude sessions.'


async def _mtime_ms(path: str) -> float:
    """File modification time in epoch milliseconds."""
    stat_result = await asyncio.to_thread(os.stat, path)
    return stat_result.st_mtime_ns / 1_000_000


@dataclass
class _ScanStats:
    files: int = 0
    cache_hits: int = 0
    parsed: int = 0


class SessionDiscoveryService:
    """
    Service for discovering Claude Code sessions of the open workspace folders.

    Each instance owns its caches, so independent instances never interfere.
    """

    def __init__(
        self,
        projects_root: str | Path | None = None,
        logger: LoggerProtocol | None = None,
        batch_concurrency: int = DEFAULT_BATCH_CONCURRENCY,
    ) -> None:
        """
        Initialize discovery service.

        Args:
            projects_root: Transcript history root (default: ~/.claude/projects)
            logger: Logger instance (default: NullLogger)
            batch_concurrency: Transcript files processed concurrently per batch
        """
        if batch_concurrency < 1:
            raise ValueError('batch_concurrency must be at least 1')

        self.projects_root = str(projects_root or Path.home() / '.claude' / 'projects')
        self.logger: LoggerProtocol = logger or NullLogger()
        self.batch_concurrency = batch_concurrency

        self._session_cache: dict[str, CachedSessionMeta] = {}
        self._prompt_cache: dict[str, CachedPromptList] = {}
        self._content_cache: dict[str, CachedContentText] = {}

    # ==========================================================================
    # Public API
    # ==========================================================================

    async def discover(self, workspace_folders: Sequence[WorkspaceFolder]) -> DiscoveryResult:
        """
        Discover sessions for each workspace folder.

        Args:
            workspace_folders: Currently open folders

        Returns:
            DiscoveryResult with a (possibly empty) newest-first list per folder key,
            plus an informational message when there are no folders or no history
        """
        empty = {folder.key: [] for folder in workspace_folders}

        if not workspace_folders:
            return DiscoveryResult(sessions_by_workspace=empty, global_info_message=NO_WORKSPACE_MESSAGE)

        if not exists(self.projects_root):
            return DiscoveryResult(
                sessions_by_workspace=empty,
                global_info_message=f'No Claude project history found at {self.projects_root}.',
            )

        candidates = await self._collect_candidates()
        return DiscoveryResult(sessions_by_workspace=self._group_by_workspace(candidates, workspace_folders))

    async def get_user_prompts(self, session: SessionNode) -> list[SessionPrompt]:
        """
        Get the prompts of a session, in file order.

        Args:
            session: A session returned by discover()

        Returns:
            Prompt list (empty if the transcript cannot be read)
        """
        path = session.transcript_path

        try:
            mtime_ms = await _mtime_ms(path)
        except OSError as e:
            await self.logger.warning(f'[discovery] stat failed while reading prompts for {path}: {e}')
            return []

        cached = self._prompt_cache.get(path)
        if cached is not None and cached.mtime_ms == mtime_ms:
            return list(cached.prompts)

        try:
            prompts = await parse_all_user_prompts(path, session.session_id, self.logger)
        except OSError as e:
            await self.logger.warning(f'[discovery] read failed while reading prompts for {path}: {e}')
            return []

        self._prompt_cache[path] = CachedPromptList(mtime_ms=mtime_ms, prompts=prompts)
        return list(prompts)

    async def get_searchable_entries(self, workspace_folders: Sequence[WorkspaceFolder]) -> list[SearchableEntry]:
        """
        Build the full-text search corpus for the workspace folders.

        Runs the same scan and matching as discover(), then attaches each
        session's extracted text.

        Args:
            workspace_folders: Currently open folders

        Returns:
            One entry per matched session, grouped by folder, newest first within a folder
        """
        if not workspace_folders or not exists(self.projects_root):
            return []

        candidates = await self._collect_candidates()
        grouped = self._group_by_workspace(candidates, workspace_folders)
        nodes = [node for sessions in grouped.values() for node in sessions]

        return await self._gather_batched(nodes, self._build_searchable_entry)

    # ==========================================================================
    # Scanning
    # ==========================================================================

    async def _collect_candidates(self) -> list[TranscriptCandidate]:
        """Scan the projects root and parse (or reuse) every transcript."""
        files = await collect_transcript_files(self.projects_root, self.logger)
        stats = _ScanStats(files=len(files))

        candidates = await self._gather_batched(files, lambda file: self._process_one_file(file, stats))

        self._purge_missing(files)

        await self.logger.info(
            f'[discovery] scanned {stats.files} transcripts ({stats.cache_hits} cached, {stats.parsed} parsed)'
        )
        return candidates

    async def _gather_batched(
        self,
        items: Sequence[T],
        worker: Callable[[T], Awaitable[R | None]],
    ) -> list[R]:
        """
        Run worker over items, batch_concurrency at a time.

        Each batch completes (success or failure) before the next starts.
        A failing item is logged; its siblings are unaffected. None results are dropped.
        """
        results: list[R] = []

        for start in range(0, len(items), self.batch_concurrency):
            batch = items[start : start + self.batch_concurrency]
            outcomes = await asyncio.gather(*(worker(item) for item in batch), return_exceptions=True)

            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    await self.logger.error(f'[discovery] unexpected batch error: {outcome!r}')
                elif outcome is not None:
                    results.append(outcome)

        return results

    async def _process_one_file(self, file: str, stats: _ScanStats) -> TranscriptCandidate | None:
        try:
            mtime_ms = await _mtime_ms(file)
        except OSError as e:
            await self.logger.warning(f'[discovery] stat failed for {file}: {e}')
            return None

        cached = self._session_cache.get(file)
        if cached is not None and cached.mtime_ms == mtime_ms:
            stats.cache_hits += 1
            return TranscriptCandidate(transcript_path=file, updated_at=mtime_ms, parsed=cached.parsed)

        parsed = await parse_transcript_file(file, self.logger)
        stats.parsed += 1
        if parsed is None:
            return None  # Incomplete transcript (no session ID or cwd)

        self._session_cache[file] = CachedSessionMeta(mtime_ms=mtime_ms, parsed=parsed)
        return TranscriptCandidate(transcript_path=file, updated_at=mtime_ms, parsed=parsed)

    def _purge_missing(self, files: Sequence[str]) -> None:
        """Drop cache entries of transcripts no longer on disk."""
        present = set(files)
        for cache in (self._session_cache, self._prompt_cache, self._content_cache):
            for path in [path for path in cache if path not in present]:
                del cache[path]

    # ==========================================================================
    # Matching
    # ==========================================================================

    def _group_by_workspace(
        self,
        candidates: Sequence[TranscriptCandidate],
        workspace_folders: Sequence[WorkspaceFolder],
    ) -> dict[str, list[SessionNode]]:
        """
        Assign candidates to their most specific folder, one node per session ID.

        When several transcripts share a session ID, the most recently modified
        one wins. Candidates outside every folder are dropped.
        """
        precomputed = precompute_workspace_paths(workspace_folders)
        by_workspace: dict[str, dict[str, SessionNode]] = {folder.key: {} for folder in workspace_folders}

        for candidate in candidates:
            folder = match_workspace_precomputed(candidate.parsed.cwd, precomputed)
            if folder is None:
                continue

            node = SessionNode(
                session_id=candidate.parsed.session_id,
                cwd=candidate.parsed.cwd,
                transcript_path=candidate.transcript_path,
                title=build_title(candidate.parsed.title_source_raw, candidate.parsed.session_id),
                updated_at=candidate.updated_at,
            )

            sessions = by_workspace[folder.key]
            existing = sessions.get(node.session_id)
            if existing is None or existing.updated_at < node.updated_at:
                sessions[node.session_id] = node

        return {
            key: sorted(sessions.values(), key=lambda node: node.updated_at, reverse=True)
            for key, sessions in by_workspace.items()
        }

    # ==========================================================================
    # Search Content
    # ==========================================================================

    async def _build_searchable_entry(self, node: SessionNode) -> SearchableEntry:
        return SearchableEntry(
            session_id=node.session_id,
            transcript_path=node.transcript_path,
            title=node.title,
            cwd=node.cwd,
            updated_at=node.updated_at,
            content_text=await self._get_content_text(node.transcript_path),
        )

    async def _get_content_text(self, path: str) -> str:
        try:
            mtime_ms = await _mtime_ms(path)
        except OSError as e:
            await self.logger.warning(f'[search] stat failed for {path}: {e}')
            return ''

        cached = self._content_cache.get(path)
        if cached is not None and cached.mtime_ms == mtime_ms:
            return cached.content_text

        try:
            content_text = await parse_session_content(path, self.logger)
        except OSError as e:
            await self.logger.warning(f'[search] read failed for {path}: {e}')
            return ''

        self._content_cache[path] = CachedContentText(mtime_ms=mtime_ms, content_text=content_text)
        return content_text
