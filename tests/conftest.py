"""Shared pytest fixtures and test helpers for regctl tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from regctl.core.registration import RegistrationService
from regctl.domain.letters import Letter
from regctl.domain.types import Classification
from regctl.infrastructure.database.engine import init_database
from regctl.infrastructure.stores import MemoryStore
from regctl.services.telemetry import disable_telemetry


class FakeClock:
    """Deterministic clock: every reading is one second after the previous one."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def registry(memory_store: MemoryStore, clock: FakeClock) -> RegistrationService:
    """Registration service over an in-memory store with a fixed clock."""
    return RegistrationService(memory_store, clock=clock)


@pytest.fixture(autouse=True)
def _reset_process_state() -> Generator[None]:
    """Undo what the root CLI group configures: logging and telemetry."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()
    disable_telemetry()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host REGCTL_* variables out of every test."""
    monkeypatch.delenv("REGCTL_CONFIG", raising=False)
    monkeypatch.delenv("REGCTL_STORAGE__BACKEND", raising=False)
    monkeypatch.delenv("REGCTL_STORAGE__PATH", raising=False)


@pytest.fixture
def _isolated_register(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Change CWD to a temp directory so the CLI uses an isolated register.

    Use via ``@pytest.mark.usefixtures("_isolated_register")`` on command
    test classes.  Tests that need the path can also request ``tmp_path``.
    """
    monkeypatch.chdir(tmp_path)
    yield


def register_file(root: Path) -> Path:
    """Default JSON register location under *root*."""
    return root / ".regctl" / "register.json"


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "register.db")
    try:
        yield engine
    finally:
        engine.dispose()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def issue_letter(registry: RegistrationService, **kwargs: Any) -> Letter:
    """Issue a letter with sensible defaults for anything not given."""
    kwargs.setdefault("classification", Classification.OUTGOING)
    kwargs.setdefault("letter_date", "2024-03-15")
    kwargs.setdefault("subject", "Budget report")
    return registry.issue(**kwargs)


def write_snapshot(path: Path, payload: dict[str, Any]) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
