"""Persistence adapters for the register snapshot.

Every adapter loads and saves the whole ``{counters, letters}`` snapshot.
Loading never fails on bad content: an absent or malformed payload
degrades to an empty state.  Read/write failures of the medium itself
raise :class:`PersistenceError`.

Backends:

- :class:`JsonFileStore` — one JSON document on disk (default).
- :class:`~regctl.infrastructure.database.store.SqliteStore` — SQLite via
  SQLAlchemy Core.
- :class:`MemoryStore` — in-process, for tests and embedding.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from regctl.domain.errors import PersistenceError, RegisterValidationError
from regctl.domain.letters import RegisterState

if TYPE_CHECKING:
    from regctl.config.settings import RegSettings

log = structlog.get_logger(__name__)

DEFAULT_STORE_PATHS: dict[str, str] = {
    "json": ".regctl/register.json",
    "sqlite": ".regctl/register.db",
}


class StateStore(Protocol):
    """Load/save contract the registration service depends on."""

    def load(self) -> RegisterState: ...

    def save(self, state: RegisterState) -> None: ...


def decode_state(payload: Any, *, source: str) -> RegisterState | None:
    """Validate a stored payload, returning None (and logging) when malformed."""
    try:
        return RegisterState.parse(payload)
    except RegisterValidationError as exc:
        log.warning("store.malformed", source=source, reason=str(exc))
        return None


def quarantine_path(path: Path) -> Path:
    """Sibling name an unreadable register is kept under."""
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    return path.with_name(f"{path.stem}.corrupt-{stamp}{path.suffix}")


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class MemoryStore:
    """Keeps the last saved snapshot in memory.

    ``fail_saves`` makes every save raise, for exercising failure paths.
    """

    def __init__(self, state: RegisterState | None = None) -> None:
        self.state = state or RegisterState.empty()
        self.saves = 0
        self.fail_saves = False

    def load(self) -> RegisterState:
        return self.state

    def save(self, state: RegisterState) -> None:
        if self.fail_saves:
            msg = "Memory store is refusing writes"
            raise PersistenceError(msg)
        self.state = state
        self.saves += 1


# ---------------------------------------------------------------------------
# JSON file
# ---------------------------------------------------------------------------


class JsonFileStore:
    """Single JSON document holding the full snapshot.

    Writes land in a temp file beside the target and are moved into place
    with ``os.replace``, so a crash never leaves a half-written document.
    A malformed document is copied aside to
    ``<stem>.corrupt-<timestamp><suffix>`` before an empty state is returned.
    """

    def __init__(self, path: Path, *, indent: int | None = 2) -> None:
        self.path = path
        self.indent = indent

    def load(self) -> RegisterState:
        if not self.path.exists():
            return RegisterState.empty()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            log.warning("store.malformed", source=str(self.path), reason=str(exc))
            self._quarantine()
            return RegisterState.empty()
        except OSError as exc:
            msg = f"Cannot read {self.path}: {exc}"
            raise PersistenceError(msg) from exc

        if not raw.strip():
            return RegisterState.empty()

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            log.warning("store.malformed", source=str(self.path), reason=str(exc))
            self._quarantine()
            return RegisterState.empty()

        state = decode_state(payload, source=str(self.path))
        if state is None:
            self._quarantine()
            return RegisterState.empty()
        return state

    def save(self, state: RegisterState) -> None:
        text = json.dumps(state.to_payload(), indent=self.indent, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(text)
                    fh.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            msg = f"Cannot write {self.path}: {exc}"
            raise PersistenceError(msg) from exc

    def _quarantine(self) -> None:
        """Copy the unreadable document aside (best-effort)."""
        target = quarantine_path(self.path)
        try:
            shutil.copy2(self.path, target)
        except OSError:
            log.warning("store.quarantine_failed", source=str(self.path))
            return
        log.warning("store.quarantined", source=str(self.path), backup=str(target))


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def resolve_store_path(settings: RegSettings) -> Path:
    """Storage path from settings, relative paths anchored at the register root."""
    raw = settings.storage.path or DEFAULT_STORE_PATHS[settings.storage.backend]
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = settings.register_root / path
    return path


def open_store(settings: RegSettings) -> StateStore:
    """Build the persistence adapter selected by ``[storage] backend``."""
    path = resolve_store_path(settings)
    backend = settings.storage.backend
    if backend == "json":
        return JsonFileStore(path)
    if backend == "sqlite":
        from regctl.infrastructure.database.store import SqliteStore

        return SqliteStore(path)
    msg = f"Unknown storage backend: {backend!r}"
    raise ValueError(msg)
