"""Numbering core — counter store, letter ledger, registration service.

The core holds the register state in memory and persists it through a
``StateStore`` at explicit boundaries.  It raises domain errors and
returns domain objects; the service layer wraps it for callers.
"""

from regctl.core.counters import CounterStore
from regctl.core.ledger import LetterLedger
from regctl.core.registration import RegistrationService

__all__ = ["CounterStore", "LetterLedger", "RegistrationService"]
