"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers in main.py turn
them into the standard JSON envelope.
"""
from typing import Dict, List, Optional


class DirectoryError(Exception):
    """Base class for all service-layer errors."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(DirectoryError):
    """Malformed or out-of-range input the caller can correct."""
    status_code = 422


class InvalidOperationError(DirectoryError):
    """The operation is not allowed in the current state."""
    status_code = 400


class AuthorizationError(InvalidOperationError):
    """Authenticated, but not permitted (wrong owner or role)."""
    status_code = 403


class NotFoundError(DirectoryError):
    """Referenced entity is absent or not visible."""
    status_code = 404


class ConflictError(DirectoryError):
    """Uniqueness violation that cannot be resolved by an upsert."""
    status_code = 409


class DeliveryError(DirectoryError):
    """A notification channel failed to deliver."""
    status_code = 502


class InternalError(DirectoryError):
    """Unexpected infrastructure failure."""
    status_code = 500
