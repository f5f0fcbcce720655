"""
Discovery operation schemas.

Derived, immutable results produced by the discovery engine and consumed by
presentation layers (CLI, tree views, search pickers).
"""

from __future__ import annotations

from pathlib import Path

from session_index.schemas.types import BaseStrictModel

__all__ = [
    'CachedContentText',
    'CachedPromptList',
    'CachedSessionMeta',
    'DiscoveryResult',
    'ParsedSession',
    'SearchableEntry',
    'SessionNode',
    'SessionPrompt',
    'StrictModel',
    'TranscriptCandidate',
    'WorkspaceFolder',
]


class StrictModel(BaseStrictModel):
    """Operations-layer strict model.

    Inherits from BaseStrictModel (extra='forbid', strict=True, frozen=True).
    """

    pass


# ==============================================================================
# Inputs
# ==============================================================================


class WorkspaceFolder(StrictModel):
    """A project directory the user currently has open."""

    path: str
    name: str

    @classmethod
    def from_path(cls, path: str | Path) -> WorkspaceFolder:
        folder = Path(path)
        return cls(path=str(folder), name=folder.name or str(folder))

    @property
    def key(self) -> str:
        """Key of this folder in DiscoveryResult.sessions_by_workspace."""
        return self.path


# ==============================================================================
# Parsed Transcript Data
# ==============================================================================


class ParsedSession(StrictModel):
    """Identity and title source of one transcript file.

    Only produced when both session_id and cwd were found in the file.
    """

    session_id: str
    cwd: str
    title_source_raw: str  # May be empty when no title-quality text exists


class SessionPrompt(StrictModel):
    """One displayable user prompt, in file order, with its paired response."""

    prompt_id: str  # Record uuid, else '<fallback session id>:<index>'
    session_id: str
    prompt_raw: str
    prompt_title: str
    response_raw: str | None = None  # Following assistant text, capped at 50,000 chars
    timestamp_iso: str | None = None
    timestamp_ms: int | None = None


class TranscriptCandidate(StrictModel):
    """A parsed transcript file waiting to be matched to a workspace folder."""

    transcript_path: str
    updated_at: float  # File mtime, epoch milliseconds
    parsed: ParsedSession


# ==============================================================================
# Results
# ==============================================================================


class SessionNode(StrictModel):
    """A discovered session as shown to the user."""

    session_id: str
    cwd: str
    transcript_path: str
    title: str
    updated_at: float  # File mtime, epoch milliseconds


class DiscoveryResult(StrictModel):
    """Sessions grouped by workspace folder key, newest first."""

    sessions_by_workspace: dict[str, list[SessionNode]]
    global_info_message: str | None = None


class SearchableEntry(StrictModel):
    """A matched session plus its concatenated user/assistant text."""

    session_id: str
    transcript_path: str
    title: str
    cwd: str
    updated_at: float
    content_text: str  # At most ~200 KB of extracted text


# ==============================================================================
# Cache Entries (valid only while mtime_ms matches the file on disk)
# ==============================================================================


class CachedSessionMeta(StrictModel):
    mtime_ms: float
    parsed: ParsedSession


class CachedPromptList(StrictModel):
    mtime_ms: float
    prompts: list[SessionPrompt]


class CachedContentText(StrictModel):
    mtime_ms: float
    content_text: str
