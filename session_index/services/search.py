"""
Full-text search over searchable session entries.

A plain case-insensitive substring scan of each entry's content text. The
corpus is small (at most ~200 KB of text per session) and rebuilt on demand
from the discovery caches, so no inverted index is kept.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from session_index.schemas.operations import SearchableEntry, StrictModel

__all__ = [
    'MAX_RESULTS',
    'MIN_QUERY_LENGTH',
    'SNIPPET_CONTEXT_CHARS',
    'SearchHit',
    'extract_snippet',
    'search_entries',
]

MAX_RESULTS = 50
MIN_QUERY_LENGTH = 2
SNIPPET_CONTEXT_CHARS = 40

_LINE_BREAKS = re.compile(r'[\r\n\t]+')
_MULTI_SPACE = re.compile(r'\s{2,}')


class SearchHit(StrictModel):
    """A matching entry with the first match position and a context snippet."""

    entry: SearchableEntry
    match_index: int
    snippet: str


def extract_snippet(text: str, match_index: int, match_length: int) -> str:
    """
    Cut a single-line snippet around a match.

    Keeps SNIPPET_CONTEXT_CHARS on either side and marks clipped ends with '...'.
    """
    start = max(0, match_index - SNIPPET_CONTEXT_CHARS)
    end = min(len(text), match_index + match_length + SNIPPET_CONTEXT_CHARS)

    snippet = _MULTI_SPACE.sub(' ', _LINE_BREAKS.sub(' ', text[start:end]))

    if start > 0:
        snippet = '...' + snippet
    if end < len(text):
        snippet = snippet + '...'
    return snippet


def search_entries(entries: Sequence[SearchableEntry], query: str, limit: int = MAX_RESULTS) -> list[SearchHit]:
    """
    Find entries whose content contains query, ignoring case.

    Args:
        entries: Corpus from SessionDiscoveryService.get_searchable_entries()
        query: Search text; shorter than MIN_QUERY_LENGTH matches nothing
        limit: Maximum number of hits

    Returns:
        Hits sorted newest first
    """
    if len(query) < MIN_QUERY_LENGTH:
        return []

    lower_query = query.lower()
    hits: list[SearchHit] = []

    for entry in entries:
        # Index into the lowered text; exact for ASCII content
        match_index = entry.content_text.lower().find(lower_query)
        if match_index == -1:
            continue
        hits.append(
            SearchHit(
                entry=entry,
                match_index=match_index,
                snippet=extract_snippet(entry.content_text, match_index, len(query)),
            )
        )

    hits.sort(key=lambda hit: hit.entry.updated_at, reverse=True)
    return hits[:limit]
