"""
Session - Main entry point for LiteView

A Session owns at most one in-memory database at a time. It coordinates
the engine binding, schema introspector, query executor and export
pipeline, and keeps the table list and last query outcome consistent
with the loaded database.
"""

import logging
import sqlite3
from dataclasses import dataclass
from threading import Lock
from typing import Optional, Tuple, Union

from ..storage.engine import EngineBinding
from .errors import LoadError, NoActiveSession, ExecError
from .executor import QueryExecutor, QueryOutcome, Rows, Empty
from .export import ExportPipeline
from .schema import SchemaIntrospector

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """What a successful load produced"""
    tables: Tuple[str, ...]
    size: int


@dataclass(frozen=True)
class ErrorMessage:
    """The last error, as it should be displayed"""
    message: str
    text: str


DisplayItem = Union[Rows, Empty, ErrorMessage, None]


def quote_identifier(name: str) -> str:
    """Quote a table name for use in SQL text"""
    return '"' + name.replace('"', '""') + '"'


class Session:
    """
    LiteView session.

    Usage:
        session = Session()
        session.load_from_bytes(open("app.db", "rb").read())
        outcome = session.execute("SELECT * FROM users")
        data = session.export_bytes()

    The table list is computed only when a database is loaded. Statements
    that create or drop tables do not refresh it; reload to see them.
    """

    def __init__(self):
        self._lock = Lock()
        self._engine: Optional[EngineBinding] = None
        self._tables: Tuple[str, ...] = ()
        self._last_result: Optional[QueryOutcome] = None
        self._last_error: Optional[ExecError] = None
        # Which of result/error was produced most recently
        self._error_is_latest = False

        self.introspector = SchemaIntrospector()
        self.executor = QueryExecutor()
        self.exporter = ExportPipeline()

    # -- state reads ------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._engine is not None

    @property
    def last_result(self) -> Optional[QueryOutcome]:
        return self._last_result

    @property
    def last_error(self) -> Optional[str]:
        if self._last_error is None:
            return None
        return self._last_error.message

    def current_tables(self) -> Tuple[str, ...]:
        """Tables found at load time; empty if nothing is loaded"""
        return self._tables

    def display(self) -> DisplayItem:
        """
        The single item to show: the last result or the last error,
        whichever came last.
        """
        if self._error_is_latest and self._last_error is not None:
            return ErrorMessage(self._last_error.message, self._last_error.display_text())
        return self._last_result

    def prefill_query(self, table: str) -> str:
        """Query text placed in the editor when a table is selected"""
        return f"SELECT * FROM {quote_identifier(table)}"

    def table_info(self, table: str) -> QueryOutcome:
        """
        Column listing for a table (PRAGMA table_info).

        The result is returned only; last_result and last_error are left
        as they were.

        Raises:
            NoActiveSession: If no database is loaded
            ExecError: If the engine rejects the pragma
        """
        with self._lock:
            if self._engine is None:
                raise NoActiveSession()
            return self.executor.run(
                self._engine, f"PRAGMA table_info({quote_identifier(table)})"
            )

    # -- operations -------------------------------------------------------

    def load_from_bytes(self, data: bytes) -> SessionSnapshot:
        """
        Replace the current database with one built from a file image.

        Args:
            data: Complete database file contents

        Returns:
            SessionSnapshot with the new table list

        Raises:
            LoadError: If the bytes cannot be opened; the session is unchanged
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise LoadError(f"expected bytes, got {type(data).__name__}")

        # Build and inspect the new database before touching any state
        engine = None
        try:
            engine = EngineBinding.from_bytes(bytes(data))
            tables = self.introspector.tables(engine)
        except (sqlite3.Error, MemoryError) as e:
            if engine is not None:
                engine.close()
            log.warning("Load failed: %s", e)
            raise LoadError(str(e)) from e

        with self._lock:
            previous = self._engine
            self._engine = engine
            self._tables = tables
            self._last_result = None
            self._last_error = None
            self._error_is_latest = False

        if previous is not None:
            previous.close()

        log.info("Loaded database (%d bytes, %d table(s))", len(data), len(tables))
        return SessionSnapshot(tables=tables, size=len(data))

    def execute(self, sql: str) -> Optional[QueryOutcome]:
        """
        Execute one SQL statement against the loaded database.

        Args:
            sql: Statement text; blank text is ignored

        Returns:
            Rows or Empty, or None when sql was blank

        Raises:
            NoActiveSession: If no database is loaded
            ExecError: If the engine rejects the statement
        """
        statement = self.executor.normalize(sql)
        if not statement:
            return None

        with self._lock:
            if self._engine is None:
                raise NoActiveSession()
            try:
                outcome = self.executor.run(self._engine, statement)
            except ExecError as e:
                # Keep the previous result; the error only takes display priority
                self._last_error = e
                self._error_is_latest = True
                raise
            self._last_result = outcome
            self._last_error = None
            self._error_is_latest = False
            return outcome

    def export_bytes(self) -> bytes:
        """
        Serialize the current database, including all executed changes.

        Raises:
            NoActiveSession: If no database is loaded
            ExportError: If serialization fails
        """
        with self._lock:
            if self._engine is None:
                raise NoActiveSession()
            return self.exporter.export(self._engine)

    def close(self) -> None:
        """Release the loaded database, if any."""
        with self._lock:
            if self._engine is not None:
                self._engine.close()
            self._engine = None
            self._tables = ()
            self._last_result = None
            self._last_error = None
            self._error_is_latest = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
