"""RegisterService — issue, void, purge and read letters.

Thin adapter over :class:`RegistrationService`: parses caller input,
delegates, and shapes the outcome as a ServiceResult.
"""

from __future__ import annotations

from regctl.domain.errors import LetterNotFoundError, RegisterError, RegisterValidationError
from regctl.domain.letters import LetterQuery
from regctl.domain.numbering import parse_letter_date
from regctl.domain.types import Classification, LetterStatus, parse_classification
from regctl.services._helpers import current_year
from regctl.services.base import BaseService
from regctl.services.result import ServiceResult
from regctl.services.telemetry import trace_span, traced


def _classification(value: Classification | str) -> Classification:
    if isinstance(value, Classification):
        return value
    try:
        return parse_classification(value)
    except ValueError as exc:
        raise RegisterValidationError(str(exc)) from None


class RegisterService(BaseService):
    """Letter lifecycle operations for the CLI and other callers."""

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @traced
    def issue(
        self,
        classification: Classification | str,
        subject: str,
        *,
        letter_date: str | None = None,
        party: str | None = None,
    ) -> ServiceResult:
        """Issue a new letter under the next number of its series."""
        op = "issue"
        try:
            with trace_span("registry.issue"):
                letter = self._registry.issue(
                    _classification(classification), letter_date, subject, party
                )
        except RegisterError as exc:
            return self._error(op, exc)
        return ServiceResult(ok=True, op=op, data=letter.to_record())

    @traced
    def void(self, letter_id: str) -> ServiceResult:
        """Mark a letter VOID.  Its number stays consumed."""
        op = "void"
        existing = self._registry.find(letter_id)
        if existing is None:
            return self._error(op, LetterNotFoundError(letter_id))

        warnings: list[str] = []
        if existing.status == LetterStatus.VOID:
            warnings.append(f"{existing.register_display} was already VOID")

        try:
            with trace_span("registry.void"):
                self._registry.void(letter_id)
        except RegisterError as exc:
            return self._error(op, exc)

        letter = self._registry.find(letter_id)
        data = letter.to_record() if letter is not None else {"id": letter_id}
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def purge(self, letter_id: str) -> ServiceResult:
        """Permanently remove a letter record.  Counters are not affected."""
        op = "purge"
        existing = self._registry.find(letter_id)
        if existing is None:
            return self._error(op, LetterNotFoundError(letter_id))

        try:
            with trace_span("registry.purge"):
                self._registry.purge(letter_id)
        except RegisterError as exc:
            return self._error(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": existing.id,
                "register_display": existing.register_display,
                "removed": True,
            },
            warnings=[
                f"{existing.register_display} removed from the ledger; "
                f"its number will not be reissued"
            ],
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def get(self, letter_id: str) -> ServiceResult:
        """Look up a single letter by ID."""
        op = "show"
        letter = self._registry.find(letter_id)
        if letter is None:
            return self._error(op, LetterNotFoundError(letter_id))
        return ServiceResult(ok=True, op=op, data=letter.to_record())

    @traced
    def preview(
        self,
        classification: Classification | str,
        *,
        year: int | None = None,
        letter_date: str | None = None,
    ) -> ServiceResult:
        """Preview the next display number for a series.  Nothing is reserved.

        The year comes from *year*, else from *letter_date*, else the
        current year.
        """
        op = "next"
        try:
            cls = _classification(classification)
            if year is None:
                year = parse_letter_date(letter_date).year if letter_date else current_year()
        except RegisterError as exc:
            return self._error(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "classification": cls.value,
                "year": year,
                "next_no": self._registry.peek_next(cls, year),
                "display": self._registry.peek_next_display(cls, year),
            },
        )

    @traced
    def list_letters(self, query: LetterQuery | None = None) -> ServiceResult:
        """List letters newest first, with ledger totals."""
        query = query or LetterQuery()
        items = [letter.to_record() for letter in self._registry.iter_letters(query)]
        stats = {**self._registry.stats(), "shown": len(items)}
        return ServiceResult(
            ok=True,
            op="list",
            data={
                "items": items,
                "count": len(items),
                "filters": query.to_dict(),
                "stats": stats,
            },
        )

    @traced
    def counters(self) -> ServiceResult:
        """Counter overview: last-issued number per series, newest year first."""
        rows = [row.to_dict() for row in self._registry.counters()]
        return ServiceResult(ok=True, op="counters", data={"items": rows, "count": len(rows)})
