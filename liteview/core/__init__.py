"""Core module - Session, Schema, Executor, Export, Types, Errors, REPL"""

from .session import Session, SessionSnapshot, ErrorMessage
from .schema import SchemaIntrospector
from .executor import QueryExecutor, QueryOutcome, Rows, Empty
from .export import ExportPipeline
from .types import Cell, CellKind
from .errors import LiteViewError, LoadError, NoActiveSession, ExecError, ExportError
from .repl import REPL

__all__ = [
    'Session', 'SessionSnapshot', 'ErrorMessage', 'REPL',
    'SchemaIntrospector',
    'QueryExecutor', 'QueryOutcome', 'Rows', 'Empty',
    'ExportPipeline',
    'Cell', 'CellKind',
    'LiteViewError', 'LoadError', 'NoActiveSession', 'ExecError', 'ExportError',
]
