"""
Whole-file byte store used to load an archive into memory and write it back.
"""

import os

from zipexec.errors import ArchiveIOError, ReadFailed, WriteFailed

SEEK_SET = os.SEEK_SET
SEEK_CUR = os.SEEK_CUR
SEEK_END = os.SEEK_END

READ_REMAINDER = -1


class ByteStore:
    """A file opened either for reading or for writing.

    Seeking with SEEK_END counts backwards from the end of the file, so
    ``seek(22, SEEK_END)`` positions the cursor 22 bytes before the end.
    """

    def __init__(self, path, reading=True):
        self.path = path
        self.reading = reading
        try:
            self._fp = open(path, 'rb' if reading else 'wb')
        except OSError as e:
            raise ArchiveIOError(f"Could not open {path}: {e.strerror or e}") from e
        self._size = os.fstat(self._fp.fileno()).st_size if reading else 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        if self._fp is not None:
            self._fp.close()
            self._fp = None

    def size(self):
        return self._size

    def seek(self, pos, mode=SEEK_SET):
        """Move the cursor.

        Raises:
            ReadFailed: If the target lies before the start of the file.
        """
        if mode == SEEK_END:
            pos, mode = self._size - pos, SEEK_SET
        if mode == SEEK_SET and pos < 0:
            raise ReadFailed(f"Cannot seek to {pos} in {self.path}")
        try:
            self._fp.seek(pos, mode)
        except (OSError, ValueError) as e:
            raise ReadFailed(f"Cannot seek in {self.path}: {e}") from e

    def read(self, length=READ_REMAINDER):
        """Read exactly length bytes, or everything left with READ_REMAINDER.

        Raises:
            ReadFailed: If the store is not readable or fewer bytes are available.
        """
        if not self.reading or self._fp is None:
            raise ReadFailed(f"{self.path} is not open for reading")
        if length == READ_REMAINDER:
            length = self._size - self._fp.tell()
        try:
            data = self._fp.read(length)
        except OSError as e:
            raise ReadFailed(f"Could not read {self.path}: {e}") from e
        if len(data) != length:
            raise ReadFailed(f"Short read from {self.path}: wanted {length} bytes, got {len(data)}")
        return data

    def write(self, data):
        """Write all of data.

        Raises:
            WriteFailed: If the store is not writable or the write fails.
        """
        if self.reading or self._fp is None:
            raise WriteFailed(f"{self.path} is not open for writing")
        try:
            self._fp.write(data)
            self._fp.flush()
        except OSError as e:
            raise WriteFailed(f"Could not write {self.path}: {e}") from e
        self._size += len(data)


def read_file(path):
    """Read a whole file into memory."""
    with ByteStore(path) as store:
        return store.read(READ_REMAINDER)


def write_file(path, data):
    """Write data to path, replacing any existing file."""
    try:
        store = ByteStore(path, reading=False)
    except ArchiveIOError as e:
        raise WriteFailed(str(e)) from e
    with store:
        store.write(data)
