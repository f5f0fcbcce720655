"""
Session and prompt title resolution.

Handles:
- Sanitizing raw prompt text into a single-line, length-capped title
- Detecting in-band rename signals inside user turns
  (`/rename` command arguments and the rename confirmation stdout)
- Picking the best title source for a session

Title priority for a session:
1. The latest explicit title in file order (rename signal, custom-title or agent-name record)
2. The first displayable user prompt
3. The first user message of any kind
"""

from __future__ import annotations

import re

__all__ = [
    'MAX_TITLE_LENGTH',
    'build_title',
    'choose_session_title_raw',
    'parse_rename_command_args',
    'parse_rename_stdout_title',
    'to_non_empty_single_line',
]

MAX_TITLE_LENGTH = 80
_ELLIPSIS = '...'

_LINE_BREAK = re.compile(r'\r?\n')
_TAG = re.compile(r'<[^>]+>')
_WHITESPACE = re.compile(r'\s+')

_RENAME_COMMAND = re.compile(r'<command-name>\s*/rename\s*</command-name>')
_COMMAND_ARGS = re.compile(r'<command-args>(.*?)</command-args>', re.DOTALL)
_COMMAND_STDOUT = re.compile(r'<local-command-stdout>(.*?)</local-command-stdout>', re.DOTALL)
# "Session renamed to: X" / "Session and agent renamed to: X"
_RENAME_STDOUT_PREFIX = re.compile(r'^Session(?: and agent)? renamed to:\s*', re.IGNORECASE)


def to_non_empty_single_line(value: object) -> str | None:
    """Collapse whitespace runs to single spaces; None for non-strings and blank text."""
    if not isinstance(value, str):
        return None
    normalized = _WHITESPACE.sub(' ', value).strip()
    return normalized or None


def build_title(raw_prompt: str, session_id: str) -> str:
    """
    Build a display title from raw text.

    Takes the first non-blank line, strips tag-like `<...>` substrings and
    collapses whitespace. Falls back to 'Session <first 8 chars of id>' when
    nothing usable remains. Titles longer than 80 characters are cut to 77
    and suffixed with '...'.

    Examples:
        >>> build_title('\\n  Fix the <b>login</b> bug\\nmore detail', 'abc')
        'Fix the login bug'
        >>> build_title('<command-name>/clear</command-name>', '0123456789')
        'Session 01234567'
    """
    fallback = f'Session {session_id[:8]}'

    first_line = next((line.strip() for line in _LINE_BREAK.split(raw_prompt) if line.strip()), None)
    if first_line is None:
        return fallback

    sanitized = _WHITESPACE.sub(' ', _TAG.sub(' ', first_line)).strip()
    if not sanitized:
        return fallback

    if len(sanitized) <= MAX_TITLE_LENGTH:
        return sanitized
    return sanitized[: MAX_TITLE_LENGTH - len(_ELLIPSIS)] + _ELLIPSIS


def choose_session_title_raw(
    *,
    latest_explicit_title: str | None = None,
    first_prompt_raw: str | None = None,
    first_user_raw: str | None = None,
) -> str | None:
    """Pick the title source by priority: explicit title, first prompt, first user text."""
    explicit = to_non_empty_single_line(latest_explicit_title)
    if explicit:
        return explicit
    if first_prompt_raw and first_prompt_raw.strip():
        return first_prompt_raw
    if first_user_raw and first_user_raw.strip():
        return first_user_raw
    return None


def parse_rename_command_args(raw_prompt: str) -> str | None:
    """
    Extract the new name from a `/rename <name>` command wrapper.

    Returns None unless the text names the /rename command and carries
    non-blank <command-args>.
    """
    if not _RENAME_COMMAND.search(raw_prompt):
        return None

    match = _COMMAND_ARGS.search(raw_prompt)
    if not match:
        return None

    return to_non_empty_single_line(match.group(1))


def parse_rename_stdout_title(raw_prompt: str) -> str | None:
    """
    Extract the new name from the rename confirmation echoed as command stdout.

    Recognizes 'Session renamed to: <name>' and 'Session and agent renamed to: <name>'.
    """
    match = _COMMAND_STDOUT.search(raw_prompt)
    if not match:
        return None

    stdout_text = to_non_empty_single_line(match.group(1))
    if not stdout_text or not _RENAME_STDOUT_PREFIX.match(stdout_text):
        return None

    return to_non_empty_single_line(_RENAME_STDOUT_PREFIX.sub('', stdout_text, count=1))
