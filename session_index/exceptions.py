"""
Shared exceptions for claude-session-index.

The discovery engine itself never raises for I/O or parse problems; it logs
and degrades to empty results. These exceptions cover caller-side lookups.

Exception Hierarchy:
    SessionIndexError (base)
    └── SessionResolutionError (lookup/resolution failures)
        ├── SessionNotFoundError (no discovered session matches)
        └── AmbiguousSessionError (prefix matches multiple sessions)
"""

from __future__ import annotations


class SessionIndexError(Exception):
    """Base exception for all claude-session-index errors."""


class SessionResolutionError(SessionIndexError):
    """Base exception for session lookup and resolution failures."""


class SessionNotFoundError(SessionResolutionError):
    """Raised when no discovered session matches an ID or prefix."""

    def __init__(self, session_id: str, searched: list[str]) -> None:
        self.session_id = session_id
        self.searched = searched
        folders = ', '.join(searched) if searched else '(no folders)'
        super().__init__(f'Session not found: {session_id}\nSearched workspace folders: {folders}')


class AmbiguousSessionError(SessionResolutionError):
    """Raised when a session ID prefix matches multiple sessions."""

    def __init__(self, prefix: str, matches: list[str]) -> None:
        self.prefix = prefix
        self.matches = matches
        matches_str = '\n  '.join(matches[:10])
        if len(matches) > 10:
            matches_str += f'\n  ... and {len(matches) - 10} more'
        super().__init__(
            f"Session ID prefix '{prefix}' is ambiguous. Matches {len(matches)} sessions:\n  {matches_str}\n\n"
            f'Please provide a more specific session ID prefix.'
        )
