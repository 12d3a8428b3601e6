# tests/conftest.py
"""Shared pytest fixtures for all test modules.

Provides common fixtures for:
- Temporary database paths
- An open CommandRepository driven by a controllable clock
- Environment isolation for Settings
"""

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest

from cmdstack.core.commands.repository import CommandRepository

T0 = 1_700_000_000


class FakeClock:
    """Deterministic Unix clock; advance() moves it forward."""

    def __init__(self, start: int = T0) -> None:
        self.start = start
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def temp_db(tmp_path) -> str:
    """Path to a not-yet-created SQLite database file."""
    return str(tmp_path / "data" / "cmdstack.db")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repo(temp_db, clock) -> Generator[CommandRepository, None, None]:
    """Open repository on a temporary database, closed after the test."""
    repository = CommandRepository(db_path=temp_db, clock=clock)
    repository.open()

    yield repository

    repository.close()


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove CMDSTACK_* variables so Settings sees only its defaults."""
    cleaned = {k: v for k, v in os.environ.items() if not k.startswith("CMDSTACK_")}
    with patch.dict(os.environ, cleaned, clear=True):
        yield
