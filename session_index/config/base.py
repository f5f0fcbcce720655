"""
Base configuration for the session index.

Shared settings and helper functions for every consumer (CLI, embedding hosts).
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

T = TypeVar('T', bound='BaseIndexSettings')

ENV_PREFIX = 'CLAUDE_SESSIONS_'
ENV_FILE_VARIABLE = 'LOAD_ENV_FILE'


def default_projects_root() -> pathlib.Path:
    """Claude Code's per-project transcript history."""
    return pathlib.Path.home() / '.claude' / 'projects'


class BaseIndexSettings(pydantic_settings.BaseSettings):
    """Shared configuration across all session index consumers."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='forbid',  # Reject unknown keys in an explicit .env file
    )

    # Application metadata
    APP_NAME: str = 'claude-session-index'
    VERSION: str = '0.1.0'

    # Discovery settings
    PROJECTS_ROOT: pathlib.Path = pydantic.Field(default_factory=default_projects_root)
    BATCH_CONCURRENCY: int = 8  # Transcript files parsed concurrently per batch

    @pydantic.field_validator('BATCH_CONCURRENCY')
    @classmethod
    def validate_batch_concurrency(cls, v: int) -> int:
        """Validate the fan-out is usable."""
        if v < 1:
            raise ValueError('BATCH_CONCURRENCY must be at least 1')
        return v

    @pydantic.field_validator('PROJECTS_ROOT')
    @classmethod
    def expand_projects_root(cls, v: pathlib.Path) -> pathlib.Path:
        """Expand a leading ~ so the root can be given as '~/...'."""
        return v.expanduser()


def _env_file_path(env_file: str | os.PathLike[str] | None) -> pathlib.Path | None:
    """Explicit env file, else LOAD_ENV_FILE, else None. A named file must exist."""
    candidate = env_file or os.getenv(ENV_FILE_VARIABLE)
    if not candidate:
        return None

    path = pathlib.Path(candidate).expanduser().resolve()
    if not path.is_file():
        raise FileNotFoundError(f'Environment file not found: {path}')
    return path


def get_settings(settings_class: type[T], env_file: str | os.PathLike[str] | None = None) -> T:
    """
    Build settings from the environment and an optional .env file.

    The file comes from env_file, or from the LOAD_ENV_FILE variable; real
    environment variables still take precedence over its entries.

    Raises:
        FileNotFoundError: If a named .env file is missing
        pydantic.ValidationError: If a value is invalid or a key is unknown
    """
    path = _env_file_path(env_file)
    if path is None:
        return settings_class()
    return settings_class(_env_file=path)


def lazy_settings(settings_class: type[T]) -> T:
    """Settings proxy; the environment is read on first attribute access, not at import."""
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))
