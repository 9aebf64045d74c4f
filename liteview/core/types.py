"""
Cell Types Module - Defines the closed set of values a result cell can hold

SQLite stores every value with one of five storage classes:
INTEGER, REAL, TEXT, BLOB, NULL
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class CellKind(Enum):
    """Storage classes a result cell can carry"""
    INTEGER = auto()
    REAL = auto()
    TEXT = auto()
    BLOB = auto()
    NULL = auto()


@dataclass(frozen=True)
class Cell:
    """A single value returned by the engine, tagged with its storage class"""
    kind: CellKind
    value: Any = None

    @classmethod
    def from_engine(cls, value: Any) -> "Cell":
        """Classify a raw value coming back from sqlite3"""
        if value is None:
            return cls(CellKind.NULL)
        # bool is a subclass of int and must not be mistaken for REAL/TEXT
        if isinstance(value, bool):
            return cls(CellKind.INTEGER, int(value))
        if isinstance(value, int):
            return cls(CellKind.INTEGER, value)
        if isinstance(value, float):
            return cls(CellKind.REAL, value)
        if isinstance(value, str):
            return cls(CellKind.TEXT, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(CellKind.BLOB, bytes(value))
        raise TypeError(f"Unsupported cell value type: {type(value).__name__}")

    @property
    def is_null(self) -> bool:
        return self.kind is CellKind.NULL

    def render(self) -> str:
        """
        Convert the cell to display text.

        NULL renders as 'NULL', blobs as an SQL hex literal (x'0a1b'),
        everything else through str().
        """
        if self.kind is CellKind.NULL:
            return "NULL"
        if self.kind is CellKind.BLOB:
            return f"x'{self.value.hex()}'"
        return str(self.value)

    def __str__(self) -> str:
        return self.render()
