"""Register number formatting and counter-key encoding.

Display numbers follow ``<PREFIX>/<year>/<number>`` with the number
zero-padded to a minimum of 4 digits. Wider numbers grow naturally
past 9999, they are never truncated.

INVARIANT: A display number is derived once from classification, year
and sequence number. It is cached on the letter, never recomputed.
"""

from __future__ import annotations

import re
from datetime import date

from regctl.domain.errors import RegisterValidationError
from regctl.domain.types import Classification

PAD_WIDTH = 4

_KEY_PATTERN = re.compile(r"^(?P<classification>[A-Z_]+):(?P<year>\d{1,4})$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def format_register_no(classification: Classification, year: int, register_no: int) -> str:
    """Render the canonical display number, e.g. ``OUT/2024/0007``."""
    return f"{classification.prefix}/{year}/{register_no:0{PAD_WIDTH}d}"


def counter_key(classification: Classification, year: int) -> str:
    """Encode a counter key as ``"<CLASSIFICATION>:<year>"``."""
    return f"{classification.value}:{year}"


def parse_counter_key(key: str) -> tuple[Classification, int]:
    """Decode a ``"<CLASSIFICATION>:<year>"`` key.

    Raises:
        RegisterValidationError: On unknown classifications or non-numeric years.
    """
    match = _KEY_PATTERN.match(key)
    if match is None:
        msg = f"Malformed counter key: {key!r}"
        raise RegisterValidationError(msg)
    try:
        classification = Classification(match["classification"])
    except ValueError:
        msg = f"Unknown classification in counter key: {key!r}"
        raise RegisterValidationError(msg) from None
    return classification, int(match["year"])


def parse_letter_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` letter date.

    Raises:
        RegisterValidationError: If *value* is not a calendar date.
    """
    text = value.strip()
    if _DATE_PATTERN.match(text) is None:
        msg = f"Invalid letter date: {value!r} (expected YYYY-MM-DD)"
        raise RegisterValidationError(msg)
    try:
        return date.fromisoformat(text)
    except ValueError:
        msg = f"Invalid letter date: {value!r} (expected YYYY-MM-DD)"
        raise RegisterValidationError(msg) from None
