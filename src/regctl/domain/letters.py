"""Letter records, listing filters, and the register snapshot.

``Letter`` attributes map 1:1 to the stored/exported record keys.  Dates
and timestamps stay ISO strings so that an imported payload exports back
unchanged.

INVARIANT: ``register_no``, ``year`` and ``register_display`` are set once
at issuance and never change.  Only ``status`` and ``updated_at`` move.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from regctl.domain.errors import RegisterValidationError
from regctl.domain.numbering import counter_key, parse_counter_key
from regctl.domain.types import Classification, LetterStatus

# ---------------------------------------------------------------------------
# Letter record
# ---------------------------------------------------------------------------


class Letter(BaseModel):
    """An issued letter.  Created only by the registration service.

    Unknown keys and numbers given as strings are rejected, so a record
    that validates serializes back to the same keys and values.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(min_length=1)
    classification: Classification
    letter_date: str
    year: int = Field(strict=True)
    register_no: int = Field(ge=1, strict=True)
    register_display: str
    subject: str = Field(min_length=1)
    party: str = ""
    status: LetterStatus = LetterStatus.ACTIVE
    created_at: str
    updated_at: str

    @field_validator("subject")
    @classmethod
    def _subject_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "subject must not be blank"
            raise ValueError(msg)
        return value

    @property
    def counter_key(self) -> str:
        return counter_key(self.classification, self.year)

    @property
    def is_active(self) -> bool:
        return self.status == LetterStatus.ACTIVE

    def with_status(self, status: LetterStatus, *, updated_at: str) -> Self:
        """Return a copy with a new status and refreshed ``updated_at``."""
        return self.model_copy(update={"status": status, "updated_at": updated_at})

    def to_record(self) -> dict[str, Any]:
        """Serialize to the plain JSON-compatible record shape."""
        return self.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Listing filter
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LetterQuery:
    """Optional filters applied when listing letters.

    ``search`` is a case-insensitive substring match over the display
    number, classification label, subject, party, letter date and status.
    """

    classification: Classification | None = None
    year: int | None = None
    status: LetterStatus | None = None
    search: str | None = None

    def matches(self, letter: Letter) -> bool:
        if self.classification is not None and letter.classification != self.classification:
            return False
        if self.year is not None and letter.year != self.year:
            return False
        if self.status is not None and letter.status != self.status:
            return False

        needle = (self.search or "").strip().lower()
        if needle:
            haystack = " ".join(
                [
                    letter.register_display,
                    letter.classification.label,
                    letter.subject,
                    letter.party,
                    letter.letter_date,
                    letter.status.value,
                ]
            ).lower()
            if needle not in haystack:
                return False
        return True

    def __call__(self, letter: Letter) -> bool:
        return self.matches(letter)

    def to_dict(self) -> dict[str, Any]:
        """Return the applied filters as a user-facing payload."""
        data: dict[str, Any] = {}
        if self.classification is not None:
            data["classification"] = self.classification.value
        if self.year is not None:
            data["year"] = self.year
        if self.status is not None:
            data["status"] = self.status.value
        if self.search:
            data["search"] = self.search
        return data


# ---------------------------------------------------------------------------
# Snapshot (the persisted / exported shape)
# ---------------------------------------------------------------------------


class RegisterState(BaseModel):
    """Combined ``{counters, letters}`` snapshot.

    ``counters`` maps ``"<CLASSIFICATION>:<year>"`` to the last-issued
    number.  ``letters`` is newest-first.
    """

    model_config = {"frozen": True}

    counters: dict[str, int] = Field(default_factory=dict)
    letters: list[Letter] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def parse(cls, data: Any) -> Self:
        """Validate an untrusted payload (imported file or stored blob).

        Raises:
            RegisterValidationError: If either top-level field is missing or
                any counter or letter record is malformed.
        """
        if not isinstance(data, dict):
            msg = "Payload must be a JSON object"
            raise RegisterValidationError(msg)
        missing = [name for name in ("counters", "letters") if name not in data]
        if missing:
            msg = f"Payload is missing required field(s): {', '.join(missing)}"
            raise RegisterValidationError(msg)

        raw_counters = data["counters"]
        raw_letters = data["letters"]
        if not isinstance(raw_counters, dict):
            msg = "'counters' must be a mapping of counter key to integer"
            raise RegisterValidationError(msg)
        if not isinstance(raw_letters, list):
            msg = "'letters' must be a list of letter records"
            raise RegisterValidationError(msg)

        counters: dict[str, int] = {}
        for key, value in raw_counters.items():
            parse_counter_key(str(key))
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                msg = f"Counter {key!r} must be a non-negative integer, got {value!r}"
                raise RegisterValidationError(msg)
            counters[str(key)] = value

        letters: list[Letter] = []
        seen: set[str] = set()
        for index, record in enumerate(raw_letters):
            try:
                letter = Letter.model_validate(record)
            except PydanticValidationError as exc:
                msg = f"Letter record {index} is invalid: {exc.error_count()} error(s)"
                raise RegisterValidationError(msg) from exc
            if letter.id in seen:
                msg = f"Duplicate letter ID in payload: {letter.id}"
                raise RegisterValidationError(msg)
            seen.add(letter.id)
            letters.append(letter)

        return cls(counters=counters, letters=letters)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible interchange structure."""
        return {
            "counters": dict(self.counters),
            "letters": [letter.to_record() for letter in self.letters],
        }


def check_consistency(state: RegisterState) -> list[str]:
    """List letters the counters could not have produced.

    Flags letters numbered above their key's counter (the next issuance
    would reuse their number) and repeated numbers within one key.
    """
    issues: list[str] = []
    for letter in state.letters:
        last = state.counters.get(letter.counter_key, 0)
        if letter.register_no > last:
            issues.append(
                f"{letter.register_display} ({letter.id}) is numbered above "
                f"counter {letter.counter_key}={last}"
            )

    numbers = Counter((letter.counter_key, letter.register_no) for letter in state.letters)
    for (key, number), count in sorted(numbers.items()):
        if count > 1:
            issues.append(f"Number {number} is used {count} times under {key}")
    return issues
