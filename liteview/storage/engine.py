"""
Engine Binding - Wraps an in-memory sqlite3 connection

Features:
- Builds a private in-memory database from a complete file image
- Runs single SQL statements in autocommit mode
- Serializes the live database back to a file image
"""

import logging
import sqlite3
from typing import Any, List, Optional, Sequence, Tuple

log = logging.getLogger(__name__)

# Result of one statement: (column names, rows), or None when no result set
RawResult = Optional[Tuple[List[str], List[Sequence[Any]]]]


class EngineBinding:
    """
    One in-memory SQLite database.

    The connection is opened with isolation_level=None so every statement
    is committed as soon as it runs and serialize() always sees it.
    """

    def __init__(self, connection: sqlite3.Connection):
        self._conn = connection

    @classmethod
    def from_bytes(cls, data: bytes) -> "EngineBinding":
        """
        Create a database from a complete file image.

        An empty image yields an empty database, the same way an empty
        file opens as an empty database.

        Raises:
            sqlite3.Error: If the engine rejects the image.
        """
        conn = sqlite3.connect(":memory:", isolation_level=None, check_same_thread=False)
        try:
            if data:
                conn.deserialize(bytes(data))
        except Exception:
            conn.close()
            raise
        log.debug("Deserialized %d bytes into a new in-memory database", len(data))
        return cls(conn)

    @property
    def closed(self) -> bool:
        return self._conn is None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError("Cannot operate on a closed database.")
        return self._conn

    def execute(self, sql: str) -> RawResult:
        """
        Run exactly one statement.

        Returns:
            (columns, rows) when the statement produced a result set,
            None otherwise.

        Raises:
            sqlite3.Error: On parse or execution failure.
        """
        cursor = self._connection().execute(sql)
        try:
            if cursor.description is None:
                return None
            columns = [desc[0] for desc in cursor.description]
            return columns, cursor.fetchall()
        finally:
            cursor.close()

    def page_count(self) -> int:
        """Number of pages currently in the database"""
        row = self._connection().execute("PRAGMA page_count").fetchone()
        return int(row[0]) if row else 0

    def serialize(self) -> bytes:
        """
        Return the current database as a file image.

        A database without any pages serializes to b"" (sqlite3 refuses
        to serialize it otherwise).
        """
        conn = self._connection()
        if self.page_count() == 0:
            return b""
        return bytes(conn.serialize())

    def close(self) -> None:
        """Release the connection. Safe to call twice."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
