"""
Parse the central directory of a ZIP archive held in memory.

Only the end of central directory record and the central directory headers
are decoded. Local file headers and file data are never looked at; they are
carried over verbatim when the archive is written back.
"""

import struct

from zipexec.errors import MalformedArchive, UnsupportedArchive
from zipexec.records import (
    CDH_FIXED_SIZE,
    CDH_SIGNATURE,
    EOCD_FIXED_SIZE,
    EOCD_MARKER,
    CentralDirectoryEntry,
    EndOfCentralDirectoryRecord,
)


def find_end_record(data):
    """Locate the end of central directory record.

    The record ends with a comment of unknown length, so scan backwards from
    the last place a bare record could start. A candidate only counts if its
    declared comment length reaches exactly to the end of the buffer.

    Args:
        data: The whole archive.

    Returns:
        A tuple of (offset, record) with the record's comment filled in.

    Raises:
        MalformedArchive: If no candidate is consistent with the buffer length.
    """
    size = len(data)
    pos = size - EOCD_FIXED_SIZE
    while pos >= 0:
        pos = data.rfind(EOCD_MARKER, 0, pos + 4)
        if pos < 0:
            break
        record, comment_length = EndOfCentralDirectoryRecord.decode(data, pos)
        if pos + EOCD_FIXED_SIZE + comment_length == size:
            record.comment = bytes(data[pos + EOCD_FIXED_SIZE:size])
            return pos, record
        pos -= 1
    raise MalformedArchive("No end of central directory record found")


def read_central_directory(data, end_record):
    """Decode every central directory header the end record declares.

    Returns:
        The entries, in central directory order.

    Raises:
        MalformedArchive: If a header or its variable fields run past the
            end of the buffer, or a header has the wrong signature.
    """
    entries = []
    pos = end_record.cd_offset
    for index in range(end_record.total_entries):
        if pos + CDH_FIXED_SIZE > len(data):
            raise MalformedArchive(f"Central directory entry {index} at offset {pos} is truncated")
        try:
            entry, name_length, extra_length, comment_length = \
                CentralDirectoryEntry.decode_header(data, pos)
        except struct.error as e:
            raise MalformedArchive(f"Central directory entry {index} at offset {pos}: {e}") from e
        if entry.signature != CDH_SIGNATURE:
            raise MalformedArchive(
                f"Bad central directory signature 0x{entry.signature:08x} at offset {pos}")

        # Extract variable-length fields
        var_start = pos + CDH_FIXED_SIZE
        name_end = var_start + name_length
        extra_end = name_end + extra_length
        comment_end = extra_end + comment_length
        if comment_end > len(data):
            raise MalformedArchive(f"Central directory entry {index} at offset {pos} is truncated")

        entry.name = bytes(data[var_start:name_end])
        entry.extra = bytes(data[name_end:extra_end])
        entry.comment = bytes(data[extra_end:comment_end])
        entries.append(entry)

        pos = comment_end
    return entries


class ArchiveReader:
    """Reads the end record and central directory out of an archive buffer."""

    def __init__(self, data):
        self.data = data
        self.end_record = None
        self.entries = []

    def read(self):
        """Parse the buffer.

        Returns:
            A tuple of (end record, list of CentralDirectoryEntry).

        Raises:
            MalformedArchive: No end record, or a corrupt central directory.
            UnsupportedArchive: The archive spans several volumes.
        """
        _, self.end_record = find_end_record(self.data)
        if not self.end_record.is_single_volume():
            raise UnsupportedArchive("Multiple volume archives are not supported")
        self.entries = read_central_directory(self.data, self.end_record)
        return self.end_record, self.entries
