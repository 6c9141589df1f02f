"""RegistrationService — the numbering engine.

Issue pipeline: VALIDATE → ALLOCATE → CONSTRUCT → APPEND → PERSIST

The service owns the in-memory state (one :class:`CounterStore`, one
:class:`LetterLedger`) and persists the combined snapshot through a
``StateStore`` after every mutation.

INVARIANT: A sequence number is consumed exactly once.  Voiding and
purging never return a number to its counter.  When the save after an
allocation fails, the number stays burned: the counter remains advanced,
the unsaved letter is dropped, and :class:`PersistenceError` propagates.
The next successful save records the gap.

A single re-entrant lock serializes every mutating operation, save
included, so allocations against one key never interleave.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

import structlog

from regctl.core.counters import CounterStore
from regctl.core.ledger import LetterLedger
from regctl.domain.errors import PersistenceError, RegisterValidationError
from regctl.domain.letters import Letter, RegisterState, check_consistency
from regctl.domain.numbering import format_register_no, parse_counter_key, parse_letter_date
from regctl.domain.types import Classification, LetterStatus, parse_classification

if TYPE_CHECKING:
    from regctl.infrastructure.stores import StateStore

log = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_letter_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class CounterSummary:
    """One row of the counter overview."""

    classification: Classification
    year: int
    last: int
    display: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "classification": self.classification.value,
            "label": self.classification.label,
            "year": self.year,
            "last": self.last,
            "display": self.display,
        }


class RegistrationService:
    """Issues, voids and purges letters against per-key counters.

    Args:
        store: Persistence adapter; loaded once at construction.
        clock: Returns the current instant (UTC).  Injectable for tests.
        id_factory: Returns a fresh, globally unique letter ID.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_letter_id
        self._lock = threading.RLock()

        state = store.load()
        self._counters = CounterStore(state.counters)
        self._ledger = LetterLedger(state.letters)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def issue(
        self,
        classification: Classification | str,
        letter_date: date | str | None,
        subject: str,
        party: str | None = None,
    ) -> Letter:
        """Allocate the next number for the letter's key and record the letter.

        A missing *letter_date* defaults to today (UTC).  The year is taken
        from the letter date and frozen on the record.

        Raises:
            RegisterValidationError: Empty subject, unknown classification or
                malformed date.  Raised before anything is allocated.
            PersistenceError: The save failed.  The number is burned.
        """
        # ── VALIDATE ──────────────────────────────────────────────
        if isinstance(classification, str):
            try:
                classification = parse_classification(classification)
            except ValueError as exc:
                raise RegisterValidationError(str(exc)) from None
        subject = (subject or "").strip()
        if not subject:
            msg = "Subject is required"
            raise RegisterValidationError(msg)
        if letter_date is None:
            letter_date = self._clock().date()
        elif isinstance(letter_date, str):
            letter_date = parse_letter_date(letter_date)
        year = letter_date.year

        with self._lock:
            # ── ALLOCATE ──────────────────────────────────────────
            register_no = self._counters.allocate_next(classification, year)

            # ── CONSTRUCT / APPEND ────────────────────────────────
            now = self._now_iso()
            letter = Letter(
                id=self._id_factory(),
                classification=classification,
                letter_date=letter_date.isoformat(),
                year=year,
                register_no=register_no,
                register_display=format_register_no(classification, year, register_no),
                subject=subject,
                party=(party or "").strip(),
                status=LetterStatus.ACTIVE,
                created_at=now,
                updated_at=now,
            )
            self._ledger.append(letter)

            # ── PERSIST ───────────────────────────────────────────
            try:
                self._persist()
            except PersistenceError:
                self._ledger.remove(letter.id)
                log.warning(
                    "letter.number_burned",
                    register_display=letter.register_display,
                    counter_key=letter.counter_key,
                )
                raise

        log.info(
            "letter.issued",
            letter_id=letter.id,
            register_display=letter.register_display,
        )
        return letter

    def void(self, letter_id: str) -> bool:
        """Mark a letter VOID.  Returns False when no such letter exists.

        Counters are untouched.  Voiding a letter that is already VOID
        succeeds again and re-stamps ``updated_at``.
        """
        with self._lock, self._rollback_on_failure():
            stamped = self._now_iso()
            if not self._ledger.set_status(letter_id, LetterStatus.VOID, updated_at=stamped):
                return False
            self._persist()
        log.info("letter.voided", letter_id=letter_id)
        return True

    def purge(self, letter_id: str) -> bool:
        """Permanently drop a letter record.  History-losing.

        The letter's number is not returned to its counter; the next
        issuance under the same key continues past it.  Returns whether a
        record was removed.
        """
        with self._lock, self._rollback_on_failure():
            removed = self._ledger.remove(letter_id)
            self._persist()
        if removed:
            log.info("letter.purged", letter_id=letter_id)
        return removed

    def restore_snapshot(self, data: Any, *, strict: bool = False) -> list[str]:
        """Replace the whole state with an imported snapshot.

        The payload is validated first; a rejected payload leaves the
        current state untouched.  With *strict*, letters numbered above
        their counter (or repeating a number) also reject the payload;
        otherwise those findings are returned as warnings.

        Raises:
            RegisterValidationError: Malformed payload, or inconsistent in strict mode.
            PersistenceError: The save failed; the previous state is kept.
        """
        state = data if isinstance(data, RegisterState) else RegisterState.parse(data)
        issues = check_consistency(state)
        if strict and issues:
            msg = f"Snapshot is inconsistent: {'; '.join(issues)}"
            raise RegisterValidationError(msg)

        with self._lock, self._rollback_on_failure():
            self._counters = CounterStore(state.counters)
            self._ledger = LetterLedger(state.letters)
            self._persist()
        log.info(
            "state.restored",
            counters=len(state.counters),
            letters=len(state.letters),
            issues=len(issues),
        )
        return issues

    def reset(self) -> None:
        """Wipe every counter and letter.  The only way a counter goes back to 0."""
        with self._lock, self._rollback_on_failure():
            self._counters.reset()
            self._ledger.clear()
            self._persist()
        log.info("state.reset")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find(self, letter_id: str) -> Letter | None:
        return self._ledger.find(letter_id)

    def peek_next(self, classification: Classification, year: int) -> int:
        """Preview the next number for a key.  Nothing is reserved."""
        return self._counters.peek_next(classification, year)

    def peek_next_display(self, classification: Classification, year: int) -> str:
        """Preview the next display number for a key.  Nothing is reserved."""
        return format_register_no(classification, year, self.peek_next(classification, year))

    def list_letters(self, predicate: Callable[[Letter], bool] | None = None) -> list[Letter]:
        """Letters matching *predicate*, newest first."""
        return list(self._ledger.filter(predicate))

    def iter_letters(self, predicate: Callable[[Letter], bool] | None = None) -> Iterator[Letter]:
        """Lazy variant of :meth:`list_letters`."""
        return self._ledger.filter(predicate)

    def counters(self) -> list[CounterSummary]:
        """Counter overview, newest year first.

        Every year with at least one stored counter lists every
        classification; a classification never issued that year shows 0.
        """
        stored = self._counters.as_dict()
        years = sorted({parse_counter_key(key)[1] for key in stored}, reverse=True)
        rows: list[CounterSummary] = []
        for year in years:
            for classification in Classification:
                last = self._counters.current(classification, year)
                rows.append(
                    CounterSummary(
                        classification=classification,
                        year=year,
                        last=last,
                        display=format_register_no(classification, year, last),
                    )
                )
        return rows

    def stats(self) -> dict[str, int]:
        """Ledger totals: ``total``, ``active``, ``void``."""
        total = len(self._ledger)
        active = sum(1 for letter in self._ledger if letter.is_active)
        return {"total": total, "active": active, "void": total - active}

    def snapshot(self) -> RegisterState:
        """Current ``{counters, letters}`` state as an immutable snapshot."""
        with self._lock:
            return RegisterState(counters=self._counters.as_dict(), letters=list(self._ledger))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _now_iso(self) -> str:
        return self._clock().isoformat()

    def _persist(self) -> None:
        self._store.save(self.snapshot())

    @contextmanager
    def _rollback_on_failure(self) -> Iterator[None]:
        """Restore the in-memory state if the block fails to persist."""
        previous = self.snapshot()
        try:
            yield
        except PersistenceError:
            self._counters = CounterStore(previous.counters)
            self._ledger = LetterLedger(previous.letters)
            raise
