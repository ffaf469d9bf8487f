"""
In-memory ZIP archive whose central directory attributes can be edited.
"""

from zipexec import attributes
from zipexec.byte_store import read_file
from zipexec.errors import EntryNotFound
from zipexec.reader import ArchiveReader
from zipexec.writer import serialize, write_archive


def _raw_name(name):
    if isinstance(name, str):
        return name.encode('utf-8', errors='surrogateescape')
    return bytes(name)


class ZipArchive:
    """An opened archive: original bytes, end record and central directory.

    Entries are addressed by their exact stored name (case-sensitive, full
    path, trailing slash for directories). Names may be given as str or bytes;
    a str is tried as UTF-8 first, then against the decoded entry names.

    The set and order of entries never changes; only attribute fields do.
    """

    def __init__(self, data, end_record, entries):
        self.data = data
        self.end_record = end_record
        self.entries = entries

    @classmethod
    def open(cls, data):
        """Parse an archive buffer.

        Raises:
            MalformedArchive: If the buffer has no usable central directory.
            UnsupportedArchive: If the archive spans several volumes.
        """
        data = bytes(data)
        end_record, entries = ArchiveReader(data).read()
        return cls(data, end_record, entries)

    @classmethod
    def from_file(cls, path):
        return cls.open(read_file(path))

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def names(self):
        return [entry.name for entry in self.entries]

    @property
    def comment(self):
        return self.end_record.comment

    @property
    def payload(self):
        """Everything before the central directory: local headers and file data."""
        return self.data[:self.end_record.cd_offset]

    def find_by_name(self, name):
        """Return the index of the first entry stored under name.

        Raises:
            EntryNotFound: If no entry has that exact name.
        """
        raw = _raw_name(name)
        for index, entry in enumerate(self.entries):
            if entry.name == raw:
                return index
        # names without the UTF-8 flag are cp437
        if isinstance(name, str):
            for index, entry in enumerate(self.entries):
                if entry.filename == name:
                    return index
        raise EntryNotFound(name)

    def get_entry(self, name):
        return self.entries[self.find_by_name(name)]

    def classify(self, name):
        return attributes.classify(self.get_entry(name))

    def is_directory(self, name):
        return attributes.is_directory(self.get_entry(name))

    def is_executable(self, name):
        return attributes.is_executable(self.get_entry(name))

    def is_normal(self, name):
        return attributes.is_normal(self.get_entry(name))

    def set_executable(self, name):
        return attributes.mark_executable(self.get_entry(name))

    def set_normal(self, name):
        return attributes.mark_normal(self.get_entry(name))

    def set_directory(self, name):
        return attributes.mark_directory(self.get_entry(name))

    def to_bytes(self):
        """Serialize the archive. This normalizes the entries in place, as save does."""
        return serialize(self)

    def save(self, path):
        """Normalize attributes and write the archive to path."""
        write_archive(self, path)
