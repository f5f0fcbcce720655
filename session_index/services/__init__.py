"""Service layer for session discovery, parsing and search."""

from session_index.services.content import CONTENT_CAP_CHARS, parse_session_content
from session_index.services.discovery import SessionDiscoveryService
from session_index.services.prompt_parser import MAX_RESPONSE_LENGTH, parse_all_user_prompts
from session_index.services.records import extract_text, is_displayable_user_prompt, iter_transcript_records
from session_index.services.scanner import collect_transcript_files, exists
from session_index.services.search import SearchHit, extract_snippet, search_entries
from session_index.services.session_parser import parse_transcript_file
from session_index.services.title import (
    build_title,
    choose_session_title_raw,
    parse_rename_command_args,
    parse_rename_stdout_title,
)

__all__ = [
    'CONTENT_CAP_CHARS',
    'MAX_RESPONSE_LENGTH',
    'SearchHit',
    'SessionDiscoveryService',
    'build_title',
    'choose_session_title_raw',
    'collect_transcript_files',
    'exists',
    'extract_snippet',
    'extract_text',
    'is_displayable_user_prompt',
    'iter_transcript_records',
    'parse_all_user_prompts',
    'parse_rename_command_args',
    'parse_rename_stdout_title',
    'parse_session_content',
    'parse_transcript_file',
    'search_entries',
]
