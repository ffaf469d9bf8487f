"""
Wire layout of the ZIP records we edit.

Every multi-byte field is little-endian on disk. Records are decoded field by
field into plain ints and encoded back the same way, so nothing here depends
on the byte order of the host.
"""

import struct
import zipfile

# Constants for ZIP structure sizes
CDH_FIXED_SIZE = 46      # Central Directory Header fixed part size
EOCD_FIXED_SIZE = zipfile.sizeEndCentDir  # 22

CDH_SIGNATURE = 0x02014b50
EOCD_MARKER = zipfile.stringEndArchive    # b'PK\x05\x06'

# sign, ver, ver_needed, flags, method, time, date, crc32, csize, usize,
# name_len, extra_len, comment_len, disk_start, int_attr, ext_attr, lfh_offset
CDH_STRUCT = struct.Struct('<L6H3L5H2L')
EOCD_STRUCT = struct.Struct(zipfile.structEndArchive)


class EndOfCentralDirectoryRecord:
    """End of central directory record plus the archive comment."""

    def __init__(self, disk_number=0, cd_disk=0, disk_entries=0, total_entries=0,
                 cd_size=0, cd_offset=0, comment=b''):
        self.disk_number = disk_number
        self.cd_disk = cd_disk
        self.disk_entries = disk_entries
        self.total_entries = total_entries
        self.cd_size = cd_size
        self.cd_offset = cd_offset
        self.comment = comment

    @classmethod
    def decode(cls, data, offset=0):
        """Decode the fixed 22 bytes at offset. The comment is left empty.

        Returns:
            A tuple of (record, declared comment length).
        """
        (sig, disk_number, cd_disk, disk_entries, total_entries,
         cd_size, cd_offset, comment_length) = EOCD_STRUCT.unpack_from(data, offset)
        if sig != EOCD_MARKER:
            raise ValueError('not an end of central directory record')
        record = cls(disk_number, cd_disk, disk_entries, total_entries, cd_size, cd_offset)
        return record, comment_length

    def encode(self):
        """Return the fixed part followed by the archive comment."""
        return EOCD_STRUCT.pack(
            EOCD_MARKER,
            self.disk_number,
            self.cd_disk,
            self.disk_entries,
            self.total_entries,
            self.cd_size,
            self.cd_offset,
            len(self.comment),
        ) + self.comment

    def is_single_volume(self):
        return (self.disk_number == 0 and self.cd_disk == 0
                and self.disk_entries == self.total_entries)

    def __repr__(self):
        return f"<EOCD(entries={self.total_entries}, cd_offset={self.cd_offset}, cd_size={self.cd_size})>"


class CentralDirectoryEntry:
    """One central directory file header with its name, extra and comment blobs.

    The name, extra field and comment are kept as raw bytes; only the
    attribute fields are ever rewritten.
    """

    def __init__(self, name=b'', extra=b'', comment=b''):
        self.signature = CDH_SIGNATURE
        self.version_made_by = 0
        self.version_needed = 0
        self.flags = 0
        self.compression_method = 0
        self.last_mod_time = 0
        self.last_mod_date = 0
        self.crc32 = 0
        self.compressed_size = 0
        self.uncompressed_size = 0
        self.disk_start = 0
        self.internal_attr = 0
        self.external_attr = 0
        self.lfh_offset = 0
        self.name = name
        self.extra = extra
        self.comment = comment

    @classmethod
    def decode_header(cls, data, offset=0):
        """Decode the fixed 46 byte header at offset.

        Returns:
            A tuple of (entry, name length, extra length, comment length).
            The entry's blobs are empty until the caller slices them out.
        """
        fields = CDH_STRUCT.unpack_from(data, offset)
        entry = cls()
        (entry.signature,
         entry.version_made_by,
         entry.version_needed,
         entry.flags,
         entry.compression_method,
         entry.last_mod_time,
         entry.last_mod_date,
         entry.crc32,
         entry.compressed_size,
         entry.uncompressed_size,
         name_length,
         extra_length,
         comment_length,
         entry.disk_start,
         entry.internal_attr,
         entry.external_attr,
         entry.lfh_offset) = fields
        return entry, name_length, extra_length, comment_length

    def encode(self):
        """Return the 46 byte header followed by name, extra and comment."""
        header = CDH_STRUCT.pack(
            self.signature,
            self.version_made_by,
            self.version_needed,
            self.flags,
            self.compression_method,
            self.last_mod_time,
            self.last_mod_date,
            self.crc32,
            self.compressed_size,
            self.uncompressed_size,
            len(self.name),
            len(self.extra),
            len(self.comment),
            self.disk_start,
            self.internal_attr,
            self.external_attr,
            self.lfh_offset,
        )
        return header + self.name + self.extra + self.comment

    @property
    def size(self):
        return CDH_FIXED_SIZE + len(self.name) + len(self.extra) + len(self.comment)

    @property
    def filename(self):
        """Name decoded for lookup, using the same rules as zipfile."""
        if self.flags & 0x800:  # UTF-8 flag
            return self.name.decode('utf-8', errors='surrogateescape')
        return self.name.decode('cp437')

    @property
    def display_name(self):
        """Name safe to print: invalid UTF-8 becomes U+FFFD."""
        if self.flags & 0x800:
            return self.name.decode('utf-8', errors='replace')
        return self.name.decode('cp437')

    def __repr__(self):
        return f"<CDH({self.name!r}, ext_attr=0x{self.external_attr:08x})>"
