"""
LiteView - Open, query and save SQLite database files in memory

A database file is loaded into an in-memory session, queried with
ad-hoc SQL, and exported back to bytes for saving.
"""

__version__ = "1.0.0"

from .core.session import Session, SessionSnapshot
from .core.repl import REPL

__all__ = ["Session", "SessionSnapshot", "REPL"]
