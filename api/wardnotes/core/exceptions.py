"""
Custom exceptions for the application.
"""


class WardNotesException(Exception):
    """Base exception for all WardNotes application exceptions."""
    pass


class ValidationError(WardNotesException):
    """Raised when validation fails."""
    pass


class NotFoundError(WardNotesException):
    """Raised when a requested resource is not found (or is not owned by the caller)."""
    pass


class ConflictError(WardNotesException):
    """Raised when there's a conflict (e.g., duplicate entry, reviewing a suspended card)."""
    pass


class AuthenticationError(WardNotesException):
    """Raised when authentication fails."""
    pass


class PersistenceError(WardNotesException):
    """Raised when a database write fails and the unit of work was rolled back."""
    pass
