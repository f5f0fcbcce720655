"""Pydantic schemas for transcript records and discovery results."""

from __future__ import annotations

from session_index.schemas.operations import (
    CachedContentText,
    CachedPromptList,
    CachedSessionMeta,
    DiscoveryResult,
    ParsedSession,
    SearchableEntry,
    SessionNode,
    SessionPrompt,
    TranscriptCandidate,
    WorkspaceFolder,
)
from session_index.schemas.transcript import (
    MessageContent,
    TextBlock,
    TranscriptMessage,
    TranscriptRecord,
)

__all__ = [
    # operations
    'CachedContentText',
    'CachedPromptList',
    'CachedSessionMeta',
    'DiscoveryResult',
    'ParsedSession',
    'SearchableEntry',
    'SessionNode',
    'SessionPrompt',
    'TranscriptCandidate',
    'WorkspaceFolder',
    # transcript
    'MessageContent',
    'TextBlock',
    'TranscriptMessage',
    'TranscriptRecord',
]
