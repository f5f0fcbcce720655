"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


class RecordingLogger:
    """LoggerProtocol implementation that keeps every message for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    async def info(self, message: str) -> None:
        self.messages.append(('info', message))

    async def warning(self, message: str) -> None:
        self.messages.append(('warning', message))

    async def error(self, message: str) -> None:
        self.messages.append(('error', message))

    def lines(self, level: str | None = None) -> list[str]:
        return [message for lvl, message in self.messages if level is None or lvl == level]


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def projects_root(tmp_path: Path) -> Path:
    root = tmp_path / 'projects'
    root.mkdir()
    return root


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    folder = tmp_path / 'ws'
    folder.mkdir()
    return folder
