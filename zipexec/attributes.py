"""
Unix permission bits as they are stored in a central directory entry.

The format document does not describe the external attributes field. What
unpackers actually do, found by testing archives from Windows Explorer,
7-Zip and the macOS Finder, is:

- the high byte of "version made by" / "version needed" names the host
  system, 0x03 meaning unix;
- the high 16 bits of the external attributes hold the unix st_mode;
- the low 16 bits hold the MS-DOS attribute byte.

Some unpackers read one half and some the other, so every encoding written
here fills in both halves. An archive whose entries mix unix and DOS
encodings is not extracted reliably (the Finder copies attributes from one
entry onto the ones after it), which is why the writer re-encodes every
entry on save.

Finder archives also carry 0x4000 in the DOS half. Windows Explorer shows
such entries as encrypted, so it is left out. Nobody has documented what
that bit means; do not add it back without testing against real unpackers.
"""

import enum

UNIX_HOST = 0x03

DOS_DIRECTORY = 0x10
DOS_ARCHIVE = 0x20

UNIX_EXECUTABLE = 0x81ed  # -rwxr-xr-x
UNIX_NORMAL = 0x81a4      # -rw-r--r--
UNIX_DIRECTORY = 0x41ed   # drwxr-xr-x

EXECUTABLE_ATTR = (UNIX_EXECUTABLE << 16) | DOS_ARCHIVE   # 0x81ed0020
NORMAL_ATTR = (UNIX_NORMAL << 16) | DOS_ARCHIVE           # 0x81a40020
DIRECTORY_ATTR = (UNIX_DIRECTORY << 16) | DOS_DIRECTORY   # 0x41ed0010


class Classification(enum.Enum):
    DIRECTORY = 'directory'
    EXECUTABLE = 'executable'
    NORMAL = 'normal'


def host_system(version):
    return (version >> 8) & 0xff


def unix_mode(entry):
    return (entry.external_attr >> 16) & 0xffff


def is_unix_tagged(entry):
    return (host_system(entry.version_made_by) == UNIX_HOST
            and host_system(entry.version_needed) == UNIX_HOST)


def is_directory(entry):
    """Trailing slash, DOS directory bit, or the unix directory mode we write."""
    if entry.name.endswith(b'/'):
        return True
    if entry.external_attr & DOS_DIRECTORY:
        return True
    return unix_mode(entry) == UNIX_DIRECTORY


def is_executable(entry):
    return is_unix_tagged(entry) and unix_mode(entry) == UNIX_EXECUTABLE


def is_normal(entry):
    if is_unix_tagged(entry):
        return unix_mode(entry) not in (UNIX_DIRECTORY, UNIX_EXECUTABLE)
    # windows archives only have the DOS half to go on
    return bool(entry.external_attr & DOS_ARCHIVE)


def classify(entry):
    """Return the Classification of an entry.

    Directory wins over executable, and an entry that matches neither is
    normal, even when its DOS half carries no archive bit.
    """
    if is_directory(entry):
        return Classification.DIRECTORY
    if is_executable(entry):
        return Classification.EXECUTABLE
    return Classification.NORMAL


def _set_unix_host(entry):
    # keep the spec version in the low byte
    entry.version_made_by = (entry.version_made_by & 0x00ff) | (UNIX_HOST << 8)
    entry.version_needed = (entry.version_needed & 0x00ff) | (UNIX_HOST << 8)


def mark_executable(entry):
    _set_unix_host(entry)
    entry.external_attr = EXECUTABLE_ATTR
    return entry


def mark_normal(entry):
    _set_unix_host(entry)
    entry.external_attr = NORMAL_ATTR
    return entry


def mark_directory(entry):
    _set_unix_host(entry)
    entry.external_attr = DIRECTORY_ATTR
    return entry


_FILE_TYPES = {
    0o120000: "l",
    0o040000: "d",
}

# (read, write, execute, special bit, special letter)
_PERMISSION_TRIPLETS = (
    (0o400, 0o200, 0o100, 0o4000, "s"),  # user, setuid
    (0o040, 0o020, 0o010, 0o2000, "s"),  # group, setgid
    (0o004, 0o002, 0o001, 0o1000, "t"),  # other, sticky
)


def format_mode(entry):
    """Format the unix half of an entry's attributes like ls -l.

    Args:
        entry: A CentralDirectoryEntry.

    Returns:
        A ten character string such as "-rwxr-xr-x". Entries with no unix
        bits at all (Windows archives) show as "----------".
    """
    mode = unix_mode(entry)
    if not mode:
        return "----------"

    result = _FILE_TYPES.get(mode & 0o170000, "-")
    for read, write, execute, special, letter in _PERMISSION_TRIPLETS:
        result += "r" if mode & read else "-"
        result += "w" if mode & write else "-"
        if mode & special:
            result += letter if mode & execute else letter.upper()
        else:
            result += "x" if mode & execute else "-"
    return result
