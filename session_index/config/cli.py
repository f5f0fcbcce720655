"""
CLI configuration.

Extends base configuration with command-line specific settings.
"""

from __future__ import annotations

from session_index.config.base import BaseIndexSettings, lazy_settings


class CliSettings(BaseIndexSettings):
    """CLI-specific configuration."""

    SEARCH_RESULT_LIMIT: int = 50  # Default --limit of the search command


# Module-level singleton (lazy-loaded)
settings = lazy_settings(CliSettings)
