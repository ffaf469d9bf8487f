"""
zip-exec - set the unix executable bit on a file inside a ZIP archive.

Windows keeps no executable flag, so archives made there unpack on Linux and
macOS without any executable files. This tool edits the central directory of
such an archive so one chosen entry is extracted as -rwxr-xr-x, and re-encodes
every other entry with plain unix attributes. File data is copied untouched.
"""

import argparse
import sys

from zipexec import __version__, attributes
from zipexec.archive import ZipArchive
from zipexec.errors import ZipExecError


class ZipExec:
    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the command line argument parser."""
        parser = argparse.ArgumentParser(
            prog="zip-exec",
            description=__doc__,
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        # Global options
        parser.add_argument("file", help="ZIP archive to read")
        parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
        parser.add_argument("--version", action="version", version=f"%(prog)s v{__version__}")

        subparsers = parser.add_subparsers(dest="command", help="Command to execute")
        subparsers.required = True

        exec_parser = subparsers.add_parser("exec", help="Mark one entry executable")
        exec_parser.add_argument("path", help="Full path of the entry within the archive")
        exec_parser.add_argument("--output", "-o",
                                 help="Where to write the result (default: overwrite the archive)")

        normalize_parser = subparsers.add_parser(
            "normalize", help="Rewrite all entries with unix attributes, keeping executables")
        normalize_parser.add_argument("--output", "-o",
                                      help="Where to write the result (default: overwrite the archive)")

        list_parser = subparsers.add_parser("list", help="List entries and their attributes")
        list_parser.add_argument("--long", "-l", action="store_true",
                                 help="Also show versions, CRC, sizes and offsets")
        # Make ls alias for list
        subparsers._name_parser_map["ls"] = list_parser

        return parser

    def _save(self, archive, args):
        output = args.output or args.file
        archive.save(output)
        if args.verbose:
            print(f"Wrote {output}")

    def mark_executable(self, args):
        archive = ZipArchive.from_file(args.file)
        if args.verbose:
            print(f"Read {len(archive)} entries from {args.file}")
        archive.set_executable(args.path)
        if args.verbose:
            print(f"Marked {args.path} executable")
        self._save(archive, args)

    def normalize(self, args):
        archive = ZipArchive.from_file(args.file)
        self._save(archive, args)

    def list(self, args):
        archive = ZipArchive.from_file(args.file)
        for entry in archive:
            kind = attributes.classify(entry)
            mode = attributes.format_mode(entry)
            print(f"{kind.value:<10} {mode} 0x{entry.external_attr:08x}  {entry.display_name}")
            if args.long:
                print(f"    made by: 0x{entry.version_made_by:04x}  needed: 0x{entry.version_needed:04x}"
                      f"  crc32: 0x{entry.crc32:08x}")
                print(f"    compressed: {entry.compressed_size}  uncompressed: {entry.uncompressed_size}"
                      f"  local header: {entry.lfh_offset}")
        if archive.comment:
            print(f"Comment: {archive.comment!r}")

    def run(self, argv=None):
        """Run the main program and return the exit status."""
        args = self.parser.parse_args(argv)

        if args.verbose:
            print(f"zip-exec v{__version__}")

        try:
            if args.command == "exec":
                self.mark_executable(args)
            elif args.command == "normalize":
                self.normalize(args)
            elif args.command in ["list", "ls"]:
                self.list(args)
        except ZipExecError as e:
            print(f"Error: {e}")
            return 1
        return 0


def main(argv=None):
    return ZipExec().run(argv)


if __name__ == "__main__":
    sys.exit(main())
