# tests/test_writer.py

import io
import os
import stat
import tempfile
import unittest
import zipfile

from zipexec import ZipArchive, Classification, WriteFailed
from zipexec.writer import normalize_entry, serialize, write_archive

import zipbuilder


class TestSerialize(unittest.TestCase):
    def test_unix_archive_round_trips_exactly(self):
        data = zipbuilder.unix_archive(comment=b'keep me')
        self.assertEqual(serialize(ZipArchive.open(data)), data)

    def test_windows_archive_keeps_payload(self):
        data = zipbuilder.windows_archive()
        archive = ZipArchive.open(data)
        out = serialize(archive)
        cd_offset = archive.end_record.cd_offset
        self.assertEqual(out[:cd_offset], data[:cd_offset])
        self.assertEqual(len(out), len(data))

    def test_extra_and_comments_survive(self):
        data = zipbuilder.build_archive([
            ('a.txt', b'a', dict(zipbuilder.UNIX_FILE, extra=b'\x75\x78\x00\x00', comment=b'c1')),
            ('b.txt', b'b', dict(zipbuilder.UNIX_FILE, comment=b'second')),
        ], comment=b'\x00\xffbinary comment')
        self.assertEqual(serialize(ZipArchive.open(data)), data)

    def test_end_to_end(self):
        data = zipbuilder.windows_archive()
        archive = ZipArchive.open(data)
        original = [(e.crc32, e.compressed_size, e.uncompressed_size, e.lfh_offset) for e in archive]

        archive.set_executable('dir/run.sh')
        reopened = ZipArchive.open(archive.to_bytes())

        self.assertEqual(reopened.classify('dir/'), Classification.DIRECTORY)
        self.assertEqual(reopened.classify('dir/readme.txt'), Classification.NORMAL)
        self.assertEqual(reopened.classify('dir/run.sh'), Classification.EXECUTABLE)
        self.assertEqual([e.external_attr for e in reopened], [0x41ed0010, 0x81a40020, 0x81ed0020])
        self.assertEqual(
            [(e.crc32, e.compressed_size, e.uncompressed_size, e.lfh_offset) for e in reopened],
            original)

    def test_stdlib_zipfile_sees_permissions(self):
        archive = ZipArchive.open(zipbuilder.windows_archive())
        archive.set_executable('dir/run.sh')
        with zipfile.ZipFile(io.BytesIO(archive.to_bytes())) as zf:
            self.assertIsNone(zf.testzip())
            info = zf.getinfo('dir/run.sh')
            self.assertEqual(info.create_system, 3)
            self.assertEqual(stat.S_IMODE(info.external_attr >> 16), 0o755)
            self.assertEqual(stat.S_IMODE(zf.getinfo('dir/readme.txt').external_attr >> 16), 0o644)
            self.assertTrue(zf.getinfo('dir/').is_dir())
            self.assertEqual(zf.read('dir/run.sh'), b'#!/bin/sh\necho hello\n')

    def test_sevenzip_archive(self):
        data = zipbuilder.build_archive([
            ('app/', b'', zipbuilder.SEVENZIP_DIR),
            ('app/bin/', b'', zipbuilder.SEVENZIP_DIR),
            ('app/bin/tool', b'\x7fELF', zipbuilder.SEVENZIP_FILE),
            ('app/lib.so', b'\x7fELF', zipbuilder.SEVENZIP_FILE),
        ])
        archive = ZipArchive.open(data)
        self.assertEqual(archive.classify('app/'), Classification.DIRECTORY)
        self.assertEqual(archive.classify('app/lib.so'), Classification.NORMAL)
        self.assertTrue(archive.is_normal('app/bin/tool'))
        self.assertFalse(archive.is_executable('app/bin/tool'))
        self.assertTrue(archive.is_directory('app/bin/'))

        archive.set_executable('app/bin/tool')
        reopened = ZipArchive.open(archive.to_bytes())
        self.assertEqual([reopened.classify(n) for n in reopened.names()], [
            Classification.DIRECTORY,
            Classification.DIRECTORY,
            Classification.EXECUTABLE,
            Classification.NORMAL,
        ])
        # 7-Zip's spec version byte is kept
        self.assertEqual(reopened.get_entry('app/lib.so').version_made_by, 0x033f)

    def test_executable_is_kept(self):
        data = zipbuilder.build_archive([
            ('run', b'x', dict(version_made_by=0x0314, version_needed=0x0314, external_attr=0x81ed0000)),
        ])
        entry = ZipArchive.open(data).get_entry('run')
        normalize_entry(entry)
        self.assertEqual(entry.external_attr, 0x81ed0000)


class TestWriteArchive(unittest.TestCase):
    def test_overwrite_in_place(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'app.zip')
            with open(path, 'wb') as f:
                f.write(zipbuilder.windows_archive())
            archive = ZipArchive.from_file(path)
            archive.set_executable('dir/run.sh')
            archive.save(path)
            self.assertTrue(ZipArchive.from_file(path).is_executable('dir/run.sh'))

    def test_unwritable_destination(self):
        archive = ZipArchive.open(zipbuilder.windows_archive())
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(WriteFailed):
                write_archive(archive, os.path.join(tmp, 'missing', 'out.zip'))


if __name__ == '__main__':
    unittest.main()
