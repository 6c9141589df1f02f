"""Error hierarchy raised by the numbering core.

The service layer translates these into ``ServiceResult`` errors; nothing
below the service layer formats them for humans.
"""

from __future__ import annotations


class RegisterError(Exception):
    """Base class for all register errors."""


class RegisterValidationError(RegisterError):
    """Input rejected before any state was touched (empty subject, bad payload)."""


class LetterNotFoundError(RegisterError):
    """No letter with the requested ID exists in the ledger."""

    def __init__(self, letter_id: str) -> None:
        super().__init__(f"No letter found with ID: {letter_id}")
        self.letter_id = letter_id


class PersistenceError(RegisterError):
    """The backing store could not be read or written."""
