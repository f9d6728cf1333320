from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..attendance.model import BatchOutcome


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class RemoteApiError(DomainError):
    """Raised when the table backend answers with a non-success status.

    ``status_code`` is None when the request never got a response
    (connection refused, DNS failure, ...).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteWriteError(DomainError):
    """Raised when one or more write batches of a submission failed.

    Batches that already succeeded are not rolled back; ``outcome`` tells how
    many records made it.
    """

    def __init__(self, message: str, outcome: "BatchOutcome"):
        super().__init__(message)
        self.outcome = outcome
