"""
Pydantic models for Claude Code transcript JSONL records.

Only the fields the indexer reads are modeled. Everything else on a line is
accepted as an extra field and ignored.

Record shapes of interest:
- identity:      {"type": "system", "sessionId": "...", "cwd": "/abs/path"}
- user turn:     {"type": "user", "uuid": "...", "timestamp": "...", "message": {"role": "user", "content": ...}}
- assistant:     {"type": "assistant", "message": {"role": "assistant", "content": ...}}
- custom title:  {"type": "custom-title", "customTitle": "..."}
- agent name:    {"type": "agent-name", "agentName": "..."}

Message content is a tagged union:
- plain string
- list of strings and/or {"type": "text", "text": "..."} / {"thinking": "..."} blocks
- single {"text": "..."} object

Any other shape validates to None and extracts as empty text. Fields holding a
value of the wrong JSON type validate to None rather than failing the record.
"""

from __future__ import annotations

from typing import Annotated

import pydantic

from session_index.schemas.types import LenientStr, PermissiveModel

__all__ = [
    'ContentPart',
    'MessageContent',
    'TextBlock',
    'TranscriptMessage',
    'TranscriptRecord',
    'coerce_message_content',
]


class TextBlock(PermissiveModel):
    """Object-shaped content block. Tool use, images etc. simply carry no text."""

    type: LenientStr = None
    text: LenientStr = None
    thinking: LenientStr = None


def _coerce_content(value: object) -> object:
    """Map raw content onto one of the union variants, or None."""
    if isinstance(value, str | dict | TextBlock):
        return value
    if isinstance(value, list):
        return [part for part in value if isinstance(part, str | dict | TextBlock)]
    return None


ContentPart = str | TextBlock

MessageContent = Annotated[
    str | list[ContentPart] | TextBlock | None,
    pydantic.BeforeValidator(_coerce_content),
]

_content_adapter = pydantic.TypeAdapter(MessageContent)


def coerce_message_content(value: object) -> str | list[ContentPart] | TextBlock | None:
    """Validate raw (already JSON-decoded) content into the MessageContent union."""
    return _content_adapter.validate_python(value)


class TranscriptMessage(PermissiveModel):
    """The nested `message` object of user and assistant records."""

    role: LenientStr = None
    content: MessageContent = None


def _dict_or_none(value: object) -> object:
    return value if isinstance(value, dict) else None


class TranscriptRecord(PermissiveModel):
    """One decoded JSONL line."""

    type: LenientStr = None
    sessionId: LenientStr = None
    cwd: LenientStr = None
    timestamp: LenientStr = None
    uuid: LenientStr = None
    customTitle: LenientStr = None
    agentName: LenientStr = None
    message: Annotated[TranscriptMessage | None, pydantic.BeforeValidator(_dict_or_none)] = None

    @property
    def is_user_message(self) -> bool:
        """True for `type: user` records whose message role is also user."""
        return self.type == 'user' and self.message is not None and self.message.role == 'user'

    @property
    def is_assistant_message(self) -> bool:
        """True for `type: assistant` records whose message role is also assistant."""
        return self.type == 'assistant' and self.message is not None and self.message.role == 'assistant'
