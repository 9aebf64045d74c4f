"""
File I/O - Reads and writes whole database files

The session core never touches the filesystem; the REPL and CLI use
these helpers to move images between disk and a Session.
"""

import logging
import os
import tempfile
from typing import Iterable

log = logging.getLogger(__name__)

DATABASE_EXTENSIONS = (".db", ".sqlite", ".sqlite3")


def is_supported_filename(name: str, allowed: Iterable[str] = DATABASE_EXTENSIONS) -> bool:
    """Check a filename against the accepted database extensions"""
    ext = os.path.splitext(name or "")[1].lower()
    return ext in {a.lower() for a in allowed}


def read_database_file(path: str) -> bytes:
    """Read an entire database file into memory"""
    with open(path, 'rb') as f:
        data = f.read()
    log.debug("Read %d bytes from %s", len(data), path)
    return data


def write_database_file(path: str, data: bytes) -> None:
    """
    Write a database image to disk.

    The bytes go to a temporary file next to the target which then
    replaces it, so a failed write leaves the old file intact.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".liteview-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    log.info("Wrote %d bytes to %s", len(data), path)
