"""
Core module containing the grade-computation model.
"""

from .entities import (
    AbstractEntity, Mark, Course, CourseCatalog, compute_percentage, compute_weighted
)
from .identifiers import generate_code, generate_course_code, UniqueCodeGenerator
from .exceptions import (
    MarkTrackException, ValidationError, InvalidInputError, ResourceNotFoundError,
    NotFoundError, DuplicateEntityError, IdentifierExhaustedError,
    ConfigurationError, PersistenceError
)

__all__ = [
    # Entities
    "AbstractEntity",
    "Mark",
    "Course",
    "CourseCatalog",
    "compute_percentage",
    "compute_weighted",

    # Identifiers
    "generate_code",
    "generate_course_code",
    "UniqueCodeGenerator",

    # Exceptions
    "MarkTrackException",
    "ValidationError",
    "InvalidInputError",
    "ResourceNotFoundError",
    "NotFoundError",
    "DuplicateEntityError",
    "IdentifierExhaustedError",
    "ConfigurationError",
    "PersistenceError",
]
