"""SqliteStore — the snapshot persisted as two SQLite tables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import delete, insert, select
from sqlalchemy.exc import DatabaseError, OperationalError, SQLAlchemyError

from regctl.domain.errors import PersistenceError
from regctl.domain.letters import RegisterState
from regctl.infrastructure.database.engine import init_database
from regctl.infrastructure.database.schema import LETTER_FIELDS, letters, register_counters
from regctl.infrastructure.stores import decode_state, quarantine_path

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = structlog.get_logger(__name__)


class SqliteStore:
    """Persist the snapshot in SQLite.

    ``save`` rewrites both tables inside one transaction: either the whole
    new snapshot lands or the previous one stays.  A file that is not a
    SQLite database is moved to ``<stem>.corrupt-<timestamp><suffix>`` and
    loads as an empty state, so the next save starts a fresh database.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        """Engine bound to :attr:`path`; tables are created on first access.

        SQLAlchemy errors propagate so callers can tell a corrupt file
        apart from an unreachable one.
        """
        if self._engine is None:
            try:
                self._engine = init_database(self.path)
            except OSError as exc:
                msg = f"Cannot open database {self.path}: {exc}"
                raise PersistenceError(msg) from exc
        return self._engine

    def load(self) -> RegisterState:
        if not self.path.exists():
            return RegisterState.empty()
        try:
            with self.engine.connect() as conn:
                counter_rows = conn.execute(select(register_counters)).all()
                letter_rows = conn.execute(select(letters).order_by(letters.c.position)).all()
        except OperationalError as exc:
            msg = f"Cannot read database {self.path}: {exc}"
            raise PersistenceError(msg) from exc
        except DatabaseError as exc:
            log.warning("store.malformed", source=str(self.path), reason=str(exc.orig))
            self._quarantine()
            return RegisterState.empty()
        except SQLAlchemyError as exc:
            msg = f"Cannot read database {self.path}: {exc}"
            raise PersistenceError(msg) from exc

        payload: dict[str, Any] = {
            "counters": {row.key: row.last_value for row in counter_rows},
            "letters": [
                {name: getattr(row, name) for name in LETTER_FIELDS} for row in letter_rows
            ],
        }
        state = decode_state(payload, source=str(self.path))
        return state if state is not None else RegisterState.empty()

    def save(self, state: RegisterState) -> None:
        payload = state.to_payload()
        counter_rows = [{"key": k, "last_value": v} for k, v in payload["counters"].items()]
        letter_rows = [
            {"position": position, **record} for position, record in enumerate(payload["letters"])
        ]
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(register_counters))
                conn.execute(delete(letters))
                if counter_rows:
                    conn.execute(insert(register_counters), counter_rows)
                if letter_rows:
                    conn.execute(insert(letters), letter_rows)
        except SQLAlchemyError as exc:
            msg = f"Cannot write database {self.path}: {exc}"
            raise PersistenceError(msg) from exc

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def _quarantine(self) -> None:
        """Move the unreadable file out of the way of a fresh database."""
        self.close()
        target = quarantine_path(self.path)
        try:
            os.replace(self.path, target)
        except OSError as exc:
            msg = f"Cannot move corrupt database {self.path} aside: {exc}"
            raise PersistenceError(msg) from exc
        for suffix in ("-wal", "-shm"):
            Path(f"{self.path}{suffix}").unlink(missing_ok=True)
        log.warning("store.quarantined", source=str(self.path), backup=str(target))
