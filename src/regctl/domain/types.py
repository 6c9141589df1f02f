"""Letter classifications and lifecycle status enums."""

from __future__ import annotations

from enum import StrEnum


class Classification(StrEnum):
    """Numbering series a letter belongs to.

    The prefix is display-only; uniqueness comes from the
    ``(classification, year)`` counter key.
    """

    OUTGOING = "OUTGOING"
    CERTIFICATE = "CERTIFICATE"

    @property
    def prefix(self) -> str:
        return CLASSIFICATION_PREFIXES[self]

    @property
    def label(self) -> str:
        return CLASSIFICATION_LABELS[self]


class LetterStatus(StrEnum):
    """Letter lifecycle. ACTIVE -> VOID is one-way."""

    ACTIVE = "ACTIVE"
    VOID = "VOID"


CLASSIFICATION_PREFIXES: dict[Classification, str] = {
    Classification.OUTGOING: "OUT",
    Classification.CERTIFICATE: "KET",
}

CLASSIFICATION_LABELS: dict[Classification, str] = {
    Classification.OUTGOING: "Outgoing Letter",
    Classification.CERTIFICATE: "Certificate Letter",
}


def parse_classification(value: str) -> Classification:
    """Resolve a classification by name, case-insensitively.

    Raises:
        ValueError: If *value* names no known classification.
    """
    try:
        return Classification(value.strip().upper())
    except ValueError:
        msg = (
            f"Unknown classification: {value!r}. "
            f"Expected one of {[c.value for c in Classification]}"
        )
        raise ValueError(msg) from None
