"""
Searchable content extraction.

One streaming pass collects the user and assistant text of a transcript for
full-text search, independent of prompt/response pairing. Reading stops as
soon as the collected text reaches CONTENT_CAP_CHARS.
"""

from __future__ import annotations

from contextlib import aclosing

from session_index.protocols import LoggerProtocol
from session_index.schemas.transcript import TranscriptRecord
from session_index.services.records import extract_text, is_displayable_user_prompt, iter_transcript_records

__all__ = [
    'CONTENT_CAP_CHARS',
    'content_cap_reached',
    'parse_session_content',
]

CONTENT_CAP_CHARS = 200 * 1024


def content_cap_reached(total_length: int) -> bool:
    """Stop predicate of the content pass."""
    return total_length >= CONTENT_CAP_CHARS


def _searchable_text(record: TranscriptRecord) -> str | None:
    """Text a record contributes to the search corpus, if any."""
    if record.is_user_message:
        assert record.message is not None
        text = extract_text(record.message.content)
        return text if text.strip() and is_displayable_user_prompt(text) else None

    if record.is_assistant_message:
        assert record.message is not None
        text = extract_text(record.message.content)
        return text if text.strip() else None

    # System records and anything without a recognized role
    return None


async def parse_session_content(transcript_path: str, logger: LoggerProtocol) -> str:
    """
    Extract newline-joined user and assistant text from one transcript.

    Args:
        transcript_path: Path to the JSONL transcript
        logger: Logger instance

    Returns:
        Collected text; may exceed the cap by at most the last record's text

    Raises:
        OSError: If the file cannot be opened or read
    """
    parts: list[str] = []
    total_length = 0
    capped = False

    async with aclosing(iter_transcript_records(transcript_path, logger, log_tag='search')) as records:
        async for record in records:
            text = _searchable_text(record)
            if text is None:
                continue

            parts.append(text)
            total_length += len(text)

            if content_cap_reached(total_length):
                capped = True
                break

    if capped:
        await logger.info(f'[search] content cap reached for {transcript_path}')

    return '\n'.join(parts)
