"""Tests for searchable content extraction."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import RecordingLogger
from support import assistant_line, system_line, user_line, write_jsonl

from session_index.services.content import CONTENT_CAP_CHARS, content_cap_reached, parse_session_content


@pytest.mark.asyncio
async def test_user_and_assistant_text_is_joined(tmp_path: Path, logger: RecordingLogger) -> None:
    path = write_jsonl(
        tmp_path / 's.jsonl',
        [
            system_line('s1', '/ws'),
            user_line('How do I parse JSON?'),
            assistant_line([{'type': 'text', 'text': 'Use json.loads'}, {'type': 'tool_use', 'name': 'Read'}]),
            user_line('<command-name>/clear</command-name>'),
            user_line('   '),
            assistant_line(''),
            {'type': 'summary', 'summary': 'not searchable'},
            user_line('Thanks'),
        ],
    )

    content = await parse_session_content(str(path), logger)

    assert content == 'How do I parse JSON?\nUse json.loads\nThanks'
    assert logger.messages == []


@pytest.mark.asyncio
async def test_empty_transcript_has_no_content(tmp_path: Path, logger: RecordingLogger) -> None:
    path = write_jsonl(tmp_path / 's.jsonl', [system_line('s1', '/ws')])

    assert await parse_session_content(str(path), logger) == ''


@pytest.mark.asyncio
async def test_reading_stops_at_the_cap(tmp_path: Path, logger: RecordingLogger) -> None:
    chunk = 'c' * 100_000
    path = write_jsonl(
        tmp_path / 's.jsonl',
        [
            user_line('start'),
            assistant_line(chunk),
            assistant_line(chunk),
            assistant_line(chunk),
            assistant_line('never collected'),
            'malformed line that is never parsed',
        ],
    )

    content = await parse_session_content(str(path), logger)

    assert 'never collected' not in content
    assert content.count(chunk) == 3
    assert len(content) >= CONTENT_CAP_CHARS
    assert logger.messages == [('info', f'[search] content cap reached for {path}')]


@pytest.mark.asyncio
async def test_malformed_lines_use_the_search_tag(tmp_path: Path, logger: RecordingLogger) -> None:
    path = write_jsonl(tmp_path / 's.jsonl', ['{oops', user_line('fine')])

    assert await parse_session_content(str(path), logger) == 'fine'
    assert logger.lines('warning')[0].startswith(f'[search] malformed JSON in {path}')


def test_content_cap_reached() -> None:
    assert not content_cap_reached(CONTENT_CAP_CHARS - 1)
    assert content_cap_reached(CONTENT_CAP_CHARS)
