"""
Shared protocols for the session index.

Every parsing pass and the discovery service log through LoggerProtocol so
they work unchanged under the CLI, inside an editor extension host, or silently
in tests.
"""

from __future__ import annotations

from typing import Protocol


class LoggerProtocol(Protocol):
    """
    Async sink for discovery diagnostics.

    Messages start with a subsystem tag ('[discovery]' or '[search]').
    Warnings mark skipped items (unreadable directory, malformed line,
    vanished file); info carries scan statistics and cap notices.

    Implementations:
    - CLILogger (cli/logger.py): stderr, info gated by --verbose
    - NullLogger (below): discards everything
    """

    async def info(self, message: str) -> None: ...
    async def warning(self, message: str) -> None: ...
    async def error(self, message: str) -> None: ...


class NullLogger:
    """Default logger of SessionDiscoveryService."""

    async def info(self, message: str) -> None:
        return None

    async def warning(self, message: str) -> None:
        return None

    async def error(self, message: str) -> None:
        return None
