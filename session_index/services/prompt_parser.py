"""
Prompt list parser.

One streaming pass over a transcript file extracts every displayable user
prompt in file order and pairs it with the assistant text that follows it,
up to the next prompt.
"""

from __future__ import annotations

from contextlib import aclosing
from datetime import UTC, datetime, timedelta

from session_index.protocols import LoggerProtocol
from session_index.schemas.operations import SessionPrompt
from session_index.services.records import extract_text, is_displayable_user_prompt, iter_transcript_records
from session_index.services.title import build_title

__all__ = [
    'MAX_RESPONSE_LENGTH',
    'parse_all_user_prompts',
    'parse_timestamp_ms',
]

MAX_RESPONSE_LENGTH = 50_000

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def parse_timestamp_ms(timestamp_iso: str | None) -> int | None:
    """
    Convert an ISO-8601 timestamp to epoch milliseconds.

    A timestamp without an offset is taken as UTC. Returns None for missing
    or unparseable input.
    """
    if not timestamp_iso:
        return None
    try:
        parsed = datetime.fromisoformat(timestamp_iso)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return (parsed - _EPOCH) // timedelta(milliseconds=1)


def _append_response(existing: str | None, response_text: str) -> str | None:
    """Append assistant text to a prompt's response; None means the cap was already reached."""
    if existing is not None and len(existing) >= MAX_RESPONSE_LENGTH:
        return None
    combined = f'{existing}\n{response_text}' if existing else response_text
    return combined[:MAX_RESPONSE_LENGTH]


async def parse_all_user_prompts(
    transcript_path: str,
    fallback_session_id: str,
    logger: LoggerProtocol,
) -> list[SessionPrompt]:
    """
    Parse the ordered prompt list of one transcript file.

    Prompt IDs come from the record uuid when present, else
    '<fallback_session_id>:<index among emitted prompts>', so they are only
    stable within one parse of one file.

    Args:
        transcript_path: Path to the JSONL transcript
        fallback_session_id: Session ID used when a record has none
        logger: Logger instance

    Returns:
        Prompts in file order, each with its capped response text

    Raises:
        OSError: If the file cannot be opened or read
    """
    prompts: list[SessionPrompt] = []

    async with aclosing(iter_transcript_records(transcript_path, logger)) as records:
        async for record in records:
            if record.is_assistant_message:
                assert record.message is not None
                response_text = extract_text(record.message.content)
                if not response_text.strip() or not prompts:
                    continue

                combined = _append_response(prompts[-1].response_raw, response_text)
                if combined is not None:
                    prompts[-1] = prompts[-1].model_copy(update={'response_raw': combined})
                continue

            if not record.is_user_message:
                continue

            assert record.message is not None
            prompt_raw = extract_text(record.message.content)
            if not prompt_raw.strip() or not is_displayable_user_prompt(prompt_raw):
                continue

            timestamp_ms = parse_timestamp_ms(record.timestamp)
            session_id = record.sessionId if record.sessionId and record.sessionId.strip() else fallback_session_id
            prompt_id = record.uuid if record.uuid and record.uuid.strip() else f'{fallback_session_id}:{len(prompts)}'

            prompts.append(
                SessionPrompt(
                    prompt_id=prompt_id,
                    session_id=session_id,
                    prompt_raw=prompt_raw,
                    prompt_title=build_title(prompt_raw, fallback_session_id),
                    timestamp_iso=record.timestamp if timestamp_ms is not None else None,
                    timestamp_ms=timestamp_ms,
                )
            )

    return prompts
