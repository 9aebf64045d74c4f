"""Storage module - Engine binding and file I/O"""

from .engine import EngineBinding
from .files import read_database_file, write_database_file, is_supported_filename

__all__ = ['EngineBinding', 'read_database_file', 'write_database_file', 'is_supported_filename']
