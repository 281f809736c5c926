"""
Database management for the startup sample record.

The course catalog itself lives in memory; the database only holds the
``users`` table seeded with one sample row when the application starts.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from ..core.exceptions import PersistenceError, ConfigurationError


logger = logging.getLogger(__name__)

USERS_TABLE_SCHEMA = """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY,
        email VARCHAR(255) NOT NULL UNIQUE,
        cpi FLOAT NOT NULL
    )
"""

SAMPLE_EMAIL = "student@study.com"
SAMPLE_CPI = 7.8


class DatabaseManager(ABC):
    """Abstract base class for database management."""

    @abstractmethod
    def execute_query(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        """Execute a query and return results."""
        pass

    @abstractmethod
    def execute_update(self, query: str, params: Optional[tuple] = None) -> int:
        """Execute an update query and return affected rows."""
        pass

    @abstractmethod
    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists."""
        pass

    def insert_sample_entry(self) -> bool:
        """Insert the sample user once; returns True if a row was added."""
        inserted = self.execute_update(
            "INSERT OR IGNORE INTO users (email, cpi) VALUES (?, ?)",
            (SAMPLE_EMAIL, SAMPLE_CPI)
        )
        if inserted:
            logger.info("Inserted sample entry for %s", SAMPLE_EMAIL)
        return inserted > 0

    def list_users(self) -> List[Dict[str, Any]]:
        return self.execute_query("SELECT id, email, cpi FROM users ORDER BY id")


class SQLiteDatabase(DatabaseManager):
    """SQLite database implementation."""

    def __init__(self, database_path: str = "marktrack.db"):
        self._database_path = database_path
        self._lock = threading.RLock()
        # An in-memory database vanishes with its connection, so keep one open.
        self._shared_conn: Optional[sqlite3.Connection] = None
        if database_path == ":memory:":
            self._shared_conn = sqlite3.connect(database_path, check_same_thread=False)
        self._initialize_database()

    @property
    def database_path(self) -> str:
        return self._database_path

    def _initialize_database(self) -> None:
        """Initialize the database with the users table."""
        with self._get_connection() as conn:
            conn.execute(USERS_TABLE_SCHEMA)
            conn.commit()
        logger.debug("Database initialized at %s", self._database_path)

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper cleanup."""
        conn = None
        with self._lock:
            try:
                conn = self._shared_conn or sqlite3.connect(self._database_path, check_same_thread=False)
                yield conn
            except sqlite3.Error as e:
                if conn:
                    conn.rollback()
                raise PersistenceError(f"Database error: {str(e)}")
            finally:
                if conn and conn is not self._shared_conn:
                    conn.close()

    def execute_query(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        """Execute a query and return results."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params or ())
            columns = [description[0] for description in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def execute_update(self, query: str, params: Optional[tuple] = None) -> int:
        """Execute an update query and return affected rows."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params or ())
            conn.commit()
            return cursor.rowcount

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists."""
        query = "SELECT name FROM sqlite_master WHERE type='table' AND name=?"
        return len(self.execute_query(query, (table_name,))) > 0

    def close(self) -> None:
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None


class DatabaseFactory:
    """Factory for creating database instances."""

    @staticmethod
    def create_database(database_type: str, **kwargs) -> DatabaseManager:
        """Create a database instance based on type."""
        if database_type.lower() == "sqlite":
            return SQLiteDatabase(**kwargs)
        raise ConfigurationError(f"Unsupported database type: {database_type}")
