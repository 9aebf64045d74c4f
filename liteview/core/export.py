"""
Export Pipeline - Serializes the live database for saving

No I/O happens here; the bytes are handed to a file writer or an HTTP
download by the caller. Every call serializes the current state, so the
image always includes the statements executed so far.
"""

import logging
import sqlite3

from ..storage.engine import EngineBinding
from .errors import ExportError

log = logging.getLogger(__name__)


class ExportPipeline:
    """Turns a live engine into a database file image"""

    def export(self, engine: EngineBinding) -> bytes:
        """
        Serialize the database.

        Raises:
            ExportError: If the engine cannot serialize
        """
        try:
            data = engine.serialize()
        except (sqlite3.Error, MemoryError) as e:
            log.warning("Export failed: %s", e)
            raise ExportError(str(e)) from e
        log.info("Exported database image (%d bytes)", len(data))
        return data
