"""BaseService — abstract foundation for all regctl services.

Every service receives the :class:`RegistrationService` at construction
time.  The registration service owns the register state and its
persistence; services translate its domain errors into ServiceResult.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from regctl.domain.errors import (
    LetterNotFoundError,
    PersistenceError,
    RegisterError,
    RegisterValidationError,
)
from regctl.services.result import ServiceResult

if TYPE_CHECKING:
    from regctl.core.registration import RegistrationService

# Map domain error types to ServiceError codes (most specific first).
ERROR_CODES: tuple[tuple[type[RegisterError], str], ...] = (
    (RegisterValidationError, "VALIDATION_FAILED"),
    (LetterNotFoundError, "NOT_FOUND"),
    (PersistenceError, "PERSISTENCE_FAILED"),
)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class RegisterService(BaseService):
            def issue(self, ...) -> ServiceResult:
                try:
                    letter = self._registry.issue(...)
                except RegisterError as exc:
                    return self._error(op, exc)
    """

    def __init__(self, registry: RegistrationService) -> None:
        self._registry = registry

    @staticmethod
    def _error(op: str, exc: RegisterError) -> ServiceResult:
        """Wrap a domain error in a failed ServiceResult."""
        code = "REGISTER_ERROR"
        for error_type, error_code in ERROR_CODES:
            if isinstance(exc, error_type):
                code = error_code
                break
        return ServiceResult.failure(op, code, str(exc))
