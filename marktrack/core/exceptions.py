"""
Custom exceptions for the MarkTrack package.
"""

from typing import Optional, Any, Dict


class MarkTrackException(Exception):
    """Base exception for all MarkTrack-related errors."""

    default_error_code: Optional[str] = None

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}


class ValidationError(MarkTrackException):
    """Raised when data validation fails."""
    pass


class InvalidInputError(ValidationError):
    """Raised when a value would make a derived computation undefined or fails to parse."""

    default_error_code = "INVALID_INPUT"


class ResourceNotFoundError(MarkTrackException):
    """Raised when a requested resource is not found."""
    pass


class NotFoundError(ResourceNotFoundError):
    """Raised when a lookup by identifier matches no course or mark."""

    default_error_code = "NOT_FOUND"


class DuplicateEntityError(MarkTrackException):
    """Raised when attempting to add an entity whose id is already present."""

    default_error_code = "DUPLICATE_ENTITY"


class IdentifierExhaustedError(MarkTrackException):
    """Raised when no unused identifier could be generated."""

    default_error_code = "IDENTIFIER_EXHAUSTED"


class ConfigurationError(MarkTrackException):
    """Raised when configuration is invalid."""
    pass


class PersistenceError(MarkTrackException):
    """Raised when persistence operations fail."""
    pass
