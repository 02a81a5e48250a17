from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    title = "Something Error"

    def __init__(self, message: str, *, title: Optional[str] = None):
        super().__init__(message)
        if title:
            self.title = title


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    title = "Invalid"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the account is disabled."""

    title = "Account Not Found"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    title = "Forbidden"


class BackendError(DomainError):
    """Raised when the backend rejects an operation; carries its raw message."""

    title = "Something error"


class NotFoundError(BackendError):
    """Raised when a single-row query matches no row (or more than one)."""

    title = "Not Found"


class QRCodeError(DomainError):
    """Raised when the QR artifact fails after the appointment was committed.

    The committed record is not rolled back; `appointment` holds it.
    """

    title = "QR Code Error"

    def __init__(self, message: str, *, appointment: Any = None):
        super().__init__(message)
        self.appointment = appointment
