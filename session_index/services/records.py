"""
Transcript record reading and classification.

Shared substrate of every parsing pass:
- iter_transcript_records: streams one JSONL file as TranscriptRecord objects
- extract_text: flattens the MessageContent union into display text
- is_displayable_user_prompt: separates real prompts from command-wrapper noise
"""

from __future__ import annotations

import asyncio
import json
import re
from collections.abc import AsyncIterator

from session_index.protocols import LoggerProtocol
from session_index.schemas.transcript import ContentPart, TextBlock, TranscriptRecord, coerce_message_content

__all__ = [
    'HIDDEN_PROMPT_PREFIXES',
    'extract_text',
    'is_displayable_user_prompt',
    'iter_transcript_records',
]

# Text blocks Claude Code injects into user turns around slash commands and agents.
# A user message starting with one of these is not something the user typed.
HIDDEN_PROMPT_PREFIXES = (
    '<local-command-caveat>',
    '<command-name>',
    '<command-message>',
    '<command-args>',
    '<local-command-stdout>',
    '<local-command-stderr>',
    '<local-command-exit-code>',
    '<usage>',
    'agentId:',
)

# Size hint (characters) for each batch of lines read on the worker thread
READ_BATCH_CHARS = 64 * 1024

_WHITESPACE = re.compile(r'\s+')


def _part_text(part: ContentPart, include_thinking: bool) -> str:
    match part:
        case str():
            return part
        case TextBlock(text=str() as text) if text:
            return text
        case TextBlock(thinking=str() as thinking) if include_thinking and thinking:
            return thinking
        case _:
            return ''


def extract_text(content: object, *, include_thinking: bool = False) -> str:
    """
    Extract display text from a message content payload.

    - string: returned as-is
    - list: non-empty texts of its elements, joined with newlines
      (strings pass through, blocks contribute `text`, or `thinking` when
      include_thinking is set and the block has no text)
    - single object: its `text` field
    - anything else: empty string

    Never raises.
    """
    match coerce_message_content(content):
        case str() as text:
            return text
        case list() as parts:
            texts = (_part_text(part, include_thinking) for part in parts)
            return '\n'.join(text for text in texts if text)
        case TextBlock(text=str() as text):
            return text
        case _:
            return ''


def is_displayable_user_prompt(raw_prompt: str) -> bool:
    """
    Check whether user text is a genuine prompt rather than command-wrapper output.

    Matching is a case-sensitive prefix test on the whitespace-normalized text,
    so a marker appearing mid-string does not hide the prompt.
    """
    normalized = _WHITESPACE.sub(' ', raw_prompt).strip()
    if not normalized:
        return False
    return not normalized.startswith(HIDDEN_PROMPT_PREFIXES)


async def iter_transcript_records(
    transcript_path: str,
    logger: LoggerProtocol,
    *,
    log_tag: str = 'discovery',
) -> AsyncIterator[TranscriptRecord]:
    """
    Stream the records of one transcript file in file order.

    Lines are read in batches on a worker thread so several passes can overlap
    their I/O. Blank lines are skipped, malformed JSON is logged and skipped,
    and JSON values that are not objects are skipped silently.

    Wrap in contextlib.aclosing() when the consumer may stop early, so the file
    handle is closed immediately.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(transcript_path, encoding='utf-8', errors='replace') as f:
        while lines := await asyncio.to_thread(f.readlines, READ_BATCH_CHARS):
            for line in lines:
                if not line.strip():
                    continue

                try:
                    raw = json.loads(line)
                except (ValueError, RecursionError) as e:
                    # ValueError also covers integer literals over the int digit limit
                    await logger.warning(f'[{log_tag}] malformed JSON in {transcript_path}: {e}')
                    continue

                if not isinstance(raw, dict):
                    continue

                yield TranscriptRecord.model_validate(raw)
