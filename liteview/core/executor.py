"""
Query Executor - Runs one statement and classifies the outcome

Every statement ends up as exactly one of:
- Rows: the engine returned a non-empty result set
- Empty: the statement succeeded without returning rows
- ExecError: the engine rejected the statement
"""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..storage.engine import EngineBinding
from .errors import ExecError
from .types import Cell

log = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "Query executed successfully but returned no results"


@dataclass(frozen=True)
class Rows:
    """A non-empty result set"""
    columns: Tuple[str, ...]
    values: Tuple[Tuple[Cell, ...], ...]

    def __post_init__(self):
        width = len(self.columns)
        for row in self.values:
            if len(row) != width:
                raise ValueError(
                    f"Row has {len(row)} values but result has {width} columns"
                )

    @property
    def row_count(self) -> int:
        return len(self.values)

    def rendered(self) -> Tuple[Tuple[str, ...], ...]:
        """Rows with every cell converted to display text"""
        return tuple(tuple(cell.render() for cell in row) for row in self.values)


@dataclass(frozen=True)
class Empty:
    """Statement succeeded but produced no rows"""
    message: str = EMPTY_RESULT_MESSAGE


QueryOutcome = Union[Rows, Empty]


class QueryExecutor:
    """Runs free-text statements against an engine"""

    @staticmethod
    def normalize(sql: Optional[str]) -> str:
        """Trim surrounding whitespace; '' means there is nothing to run"""
        return (sql or "").strip()

    def run(self, engine: EngineBinding, sql: str) -> QueryOutcome:
        """
        Execute a single statement.

        Args:
            engine: Database to run against
            sql: Statement text, already normalized and non-empty

        Returns:
            Rows or Empty

        Raises:
            ExecError: With the engine's diagnostic, verbatim
        """
        try:
            result = engine.execute(sql)
        # Older interpreters report multi-statement input as sqlite3.Warning;
        # text that cannot be encoded as UTF-8 fails before reaching sqlite
        except (sqlite3.Error, sqlite3.Warning, ValueError) as e:
            log.warning("Statement failed: %s", e)
            raise ExecError(str(e), sql=sql) from e

        # No result set and a zero-row result set are indistinguishable here
        if result is None or not result[1]:
            log.debug("Statement returned no rows")
            return Empty()

        columns, raw_rows = result
        values = tuple(tuple(Cell.from_engine(v) for v in row) for row in raw_rows)
        log.debug("Statement returned %d row(s) x %d column(s)", len(values), len(columns))
        return Rows(columns=tuple(columns), values=values)
