"""Text formatting helpers for CLI output."""

from __future__ import annotations

import math
import re
import time
from datetime import datetime

__all__ = [
    'format_age_token',
    'format_local_time',
    'truncate_label',
]

_MINUTE = 60 * 1000
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY

# (upper bound exclusive, unit size, suffix), checked in order
_AGE_UNITS = (
    (_HOUR, _MINUTE, 'm'),
    (_DAY, _HOUR, 'h'),
    (_WEEK, _DAY, 'd'),
    (_MONTH, _WEEK, 'w'),
    (_YEAR, _MONTH, 'mo'),
    (math.inf, _YEAR, 'y'),
)

_WHITESPACE = re.compile(r'\s+')


def format_age_token(timestamp_ms: float, now_ms: float | None = None) -> str:
    """
    Compact relative age such as '5m ago', '3d ago' or 'in 2h'.

    Examples:
        >>> format_age_token(0, now_ms=90 * 60 * 1000)
        '2h ago'
        >>> format_age_token(1000, now_ms=0)
        'now'
    """
    if now_ms is None:
        now_ms = time.time() * 1000

    diff_ms = timestamp_ms - now_ms
    abs_ms = abs(diff_ms)
    if abs_ms < _MINUTE:
        return 'now'

    for bound, unit_ms, suffix in _AGE_UNITS:
        if abs_ms < bound:
            value = math.floor(abs_ms / unit_ms + 0.5)
            break

    return f'{value}{suffix} ago' if diff_ms <= 0 else f'in {value}{suffix}'


def truncate_label(value: str, max_length: int) -> str:
    """Collapse whitespace and cut to max_length, ending in '...' when shortened."""
    normalized = _WHITESPACE.sub(' ', value).strip()
    if len(normalized) <= max_length:
        return normalized
    return normalized[: max(0, max_length - 3)] + '...'


def format_local_time(timestamp_ms: float) -> str:
    """Epoch milliseconds as local 'YYYY-MM-DD HH:MM'."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime('%Y-%m-%d %H:%M')
