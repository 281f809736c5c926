"""
Services module wrapping the core model for request handlers.
"""

from .catalog_service import MAX_SEED_COUNT, CatalogService, CourseTotals, parse_float, is_provided

__all__ = [
    "MAX_SEED_COUNT",
    "CatalogService",
    "CourseTotals",
    "parse_float",
    "is_provided",
]
