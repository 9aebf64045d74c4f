"""
Schema Module - Derives the list of tables from a loaded database

The catalog query is fixed; table names are returned in whatever order
the engine's catalog yields them.
"""

from typing import Tuple

from ..storage.engine import EngineBinding


class SchemaIntrospector:
    """Reads table names out of the sqlite_master catalog"""

    CATALOG_QUERY = "SELECT name FROM sqlite_master WHERE type='table'"

    def tables(self, engine: EngineBinding) -> Tuple[str, ...]:
        """
        List the tables of a database.

        Args:
            engine: Database to inspect

        Returns:
            Table names in catalog order; empty for an empty database

        Raises:
            sqlite3.Error: If the catalog cannot be read (e.g. not a database)
        """
        result = engine.execute(self.CATALOG_QUERY)
        if result is None:
            return ()
        _, rows = result
        return tuple(str(row[0]) for row in rows)
