"""Letter ledger — the newest-first collection of issued letters."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from regctl.domain.letters import Letter
from regctl.domain.types import LetterStatus


class LetterLedger:
    """Owns the letter records.

    New letters are prepended, so iteration order is reverse
    chronological by creation.  Records are immutable models; status
    changes swap in an updated copy at the same position.
    """

    def __init__(self, letters: Iterable[Letter] | None = None) -> None:
        self._letters: list[Letter] = list(letters or [])

    def append(self, letter: Letter) -> None:
        """Insert *letter* at the front.  The caller guarantees a fresh ID."""
        self._letters.insert(0, letter)

    def find(self, letter_id: str) -> Letter | None:
        for letter in self._letters:
            if letter.id == letter_id:
                return letter
        return None

    def set_status(self, letter_id: str, status: LetterStatus, *, updated_at: str) -> bool:
        """Set the status of a letter and refresh its ``updated_at``.

        Setting the status a letter already has is allowed and re-stamps
        ``updated_at``.  Returns False when no letter has *letter_id*.
        """
        for index, letter in enumerate(self._letters):
            if letter.id == letter_id:
                self._letters[index] = letter.with_status(status, updated_at=updated_at)
                return True
        return False

    def remove(self, letter_id: str) -> bool:
        """Delete the letter if present.  Returns whether anything was removed."""
        before = len(self._letters)
        self._letters = [letter for letter in self._letters if letter.id != letter_id]
        return len(self._letters) < before

    def filter(self, predicate: Callable[[Letter], bool] | None = None) -> Iterator[Letter]:
        """Lazily yield letters matching *predicate* (all when None).

        Iterates over a snapshot, so mutations during iteration are not seen.
        """
        snapshot = tuple(self._letters)
        return (letter for letter in snapshot if predicate is None or predicate(letter))

    def clear(self) -> None:
        self._letters.clear()

    def __iter__(self) -> Iterator[Letter]:
        return iter(tuple(self._letters))

    def __len__(self) -> int:
        return len(self._letters)
