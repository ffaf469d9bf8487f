"""
Edit unix permission attributes inside a ZIP archive's central directory.
"""

__version__ = "1.2.0"

from zipexec.archive import ZipArchive
from zipexec.attributes import Classification
from zipexec.errors import (
    ZipExecError,
    ArchiveIOError,
    ReadFailed,
    WriteFailed,
    MalformedArchive,
    UnsupportedArchive,
    EntryNotFound,
)

__all__ = ['ZipArchive', 'Classification', 'ZipExecError', 'ArchiveIOError', 'ReadFailed',
           'WriteFailed', 'MalformedArchive', 'UnsupportedArchive', 'EntryNotFound']
