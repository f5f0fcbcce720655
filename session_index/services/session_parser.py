"""
Session metadata parser.

One streaming pass over a transcript file extracts the session identity
(session ID and working directory) and the raw text the session title is
built from.

The whole file is always read: a `/rename` (or custom-title record) near the
end must override anything seen earlier, so the latest explicit title in file
order wins.
"""

from __future__ import annotations

from contextlib import aclosing
from dataclasses import dataclass

from session_index.protocols import LoggerProtocol
from session_index.schemas.operations import ParsedSession
from session_index.schemas.transcript import TranscriptRecord
from session_index.services.records import extract_text, is_displayable_user_prompt, iter_transcript_records
from session_index.services.title import (
    choose_session_title_raw,
    parse_rename_command_args,
    parse_rename_stdout_title,
    to_non_empty_single_line,
)

__all__ = [
    'SessionScanState',
    'parse_transcript_file',
]


def _non_blank(value: str | None) -> str | None:
    return value if value and value.strip() else None


@dataclass
class SessionScanState:
    """Accumulated identity and title signals, folded over records in file order."""

    session_id: str | None = None
    cwd: str | None = None
    first_prompt_raw: str | None = None
    first_user_raw: str | None = None
    latest_explicit_title: str | None = None

    def observe(self, record: TranscriptRecord) -> None:
        # First occurrence wins for identity
        self.session_id = self.session_id or _non_blank(record.sessionId)
        self.cwd = self.cwd or _non_blank(record.cwd)

        # Last occurrence wins for explicit titles
        if record.type == 'custom-title':
            self._set_explicit_title(to_non_empty_single_line(record.customTitle))
        elif record.type == 'agent-name':
            self._set_explicit_title(to_non_empty_single_line(record.agentName))
        elif record.is_user_message:
            assert record.message is not None
            self._observe_user_text(extract_text(record.message.content))

    def _observe_user_text(self, text: str) -> None:
        if not text.strip():
            return

        if self.first_user_raw is None:
            self.first_user_raw = text
        if self.first_prompt_raw is None and is_displayable_user_prompt(text):
            self.first_prompt_raw = text

        self._set_explicit_title(parse_rename_command_args(text))
        self._set_explicit_title(parse_rename_stdout_title(text))

    def _set_explicit_title(self, title: str | None) -> None:
        if title:
            self.latest_explicit_title = title

    def to_parsed_session(self) -> ParsedSession | None:
        """ParsedSession, or None when the file never revealed both session ID and cwd."""
        if self.session_id is None or self.cwd is None:
            return None

        title_source = choose_session_title_raw(
            latest_explicit_title=self.latest_explicit_title,
            first_prompt_raw=self.first_prompt_raw,
            first_user_raw=self.first_user_raw,
        )
        return ParsedSession(session_id=self.session_id, cwd=self.cwd, title_source_raw=title_source or '')


async def parse_transcript_file(transcript_path: str, logger: LoggerProtocol) -> ParsedSession | None:
    """
    Parse session identity and title source from one transcript file.

    Args:
        transcript_path: Path to the JSONL transcript
        logger: Logger instance (malformed lines are reported as warnings)

    Returns:
        ParsedSession, or None for incomplete transcripts (no session ID or no cwd)

    Raises:
        OSError: If the file cannot be opened or read
    """
    state = SessionScanState()

    async with aclosing(iter_transcript_records(transcript_path, logger)) as records:
        async for record in records:
            state.observe(record)

    return state.to_parsed_session()
