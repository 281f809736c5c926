"""
Persistence module for the startup sample record.
"""

from .database import DatabaseManager, SQLiteDatabase, DatabaseFactory

__all__ = [
    "DatabaseManager",
    "SQLiteDatabase",
    "DatabaseFactory",
]
