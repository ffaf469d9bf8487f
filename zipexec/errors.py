"""
Exceptions raised while opening, editing and saving ZIP archives.
"""


class ZipExecError(Exception):
    """Base class for all archive editing errors."""


class ArchiveIOError(ZipExecError, OSError):
    """The underlying file could not be opened, read or written."""


class ReadFailed(ArchiveIOError):
    pass


class WriteFailed(ArchiveIOError):
    pass


class MalformedArchive(ZipExecError):
    """No usable end of central directory record, or a corrupt central directory."""


class UnsupportedArchive(ZipExecError):
    """The archive uses a feature we refuse to edit (spanned/multi-volume)."""


class EntryNotFound(ZipExecError, KeyError):
    """The requested name is not in the central directory."""

    def __init__(self, name):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return 'There is no item named %r in the archive' % (self.name,)
