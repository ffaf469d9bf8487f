"""
Serialize an edited archive back to bytes.

The output is the original file up to the start of the central directory,
then every central directory header in its original order, then the end
record and the archive comment. Offsets and sizes are unchanged because only
fixed-width attribute fields are ever edited.
"""

from zipexec import attributes
from zipexec.byte_store import write_file


def normalize_entry(entry):
    """Re-encode an entry so the whole archive uses one attribute convention.

    Directories get the directory encoding, executables are kept as they are,
    and everything else becomes a normal file. Leaving Windows attributes on
    some entries and unix attributes on others confuses the macOS Finder.
    """
    if attributes.is_directory(entry):
        attributes.mark_directory(entry)
    elif not attributes.is_executable(entry):
        attributes.mark_normal(entry)
    return entry


def serialize(archive):
    """Return the archive as bytes.

    Every entry is normalized in place first, so the archive's own entries
    carry the saved attributes afterwards.
    """
    out = bytearray(archive.payload)
    for entry in archive.entries:
        normalize_entry(entry)
        out += entry.encode()
    out += archive.end_record.encode()
    return bytes(out)


def write_archive(archive, path):
    """Serialize the archive and write it to path.

    The whole output is built before the file is opened, so path may be the
    file the archive was read from.

    Raises:
        WriteFailed: If the file cannot be created or written. A partially
            written file is left in place.
    """
    write_file(path, serialize(archive))
