"""
Errors Module - Exception types raised by the LiteView session core

Every failure coming out of the engine is translated into one of these
at the session boundary, so callers (REPL, web viewer) can catch
LiteViewError without accidentally swallowing unrelated exceptions.
"""

from typing import Optional


class LiteViewError(Exception):
    """Base class for all LiteView errors"""

    # Prefix used by display_text() when rebuilding the banner string
    prefix = "Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def display_text(self) -> str:
        """Banner text shown to the user: '<prefix>: <message>'"""
        return f"{self.prefix}: {self.message}"


class LoadError(LiteViewError):
    """
    Raised when a database image cannot be loaded.

    Examples:
      - Bytes are not an SQLite database
      - Engine initialization failure
    """
    prefix = "Error loading database"


class NoActiveSession(LiteViewError):
    """Raised when an operation needs a loaded database and none is open"""
    prefix = "No database loaded"

    def __init__(self, message: str = "open a database file first"):
        super().__init__(message)


class ExecError(LiteViewError):
    """
    Raised when a statement fails to parse or execute.

    The message is the engine's diagnostic, passed through unmodified.

    Args:
        message: Engine diagnostic text.
        sql: Statement that failed.
    """
    prefix = "Error executing query"

    def __init__(self, message: str, sql: Optional[str] = None):
        self.sql = sql
        super().__init__(message)


class ExportError(LiteViewError):
    """Raised when the live database cannot be serialized"""
    prefix = "Error exporting database"
