import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lsgrid_models import FileType, FilesystemError, NameLookupError, NotFoundError
from lsgrid_provider import (
    PosixMetadataProvider,
    collect_entries,
    file_type_from_mode,
    gather_metadata,
)


class FakeProvider:
    def __init__(self, names):
        self.names = names

    def list_directory(self, path):
        return list(self.names)


class CollectEntriesTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.base = Path(self.tmp.name)

    def touch(self, name, content=""):
        (self.base / name).write_text(content, encoding="utf-8")

    def test_sorted_in_byte_order(self):
        for name in ("b", "A", "a"):
            self.touch(name)
        self.assertEqual(collect_entries(self.base), ["A", "a", "b"])

    def test_dotfiles_are_skipped(self):
        self.touch(".hidden")
        self.touch("shown")
        (self.base / ".git").mkdir()
        self.assertEqual(collect_entries(self.base), ["shown"])

    def test_directories_and_files_are_listed(self):
        (self.base / "sub").mkdir()
        self.touch("file.txt")
        self.assertEqual(collect_entries(self.base), ["file.txt", "sub"])

    def test_empty_directory(self):
        self.assertEqual(collect_entries(self.base), [])

    def test_missing_path_raises_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            collect_entries(self.base / "nope")
        self.assertIn("No such directory", str(ctx.exception))

    def test_file_path_reports_not_a_directory(self):
        self.touch("plain")
        with self.assertRaises(NotFoundError) as ctx:
            collect_entries(self.base / "plain")
        self.assertEqual(ctx.exception.reason, "Not a directory")
        self.assertIn("Not a directory", str(ctx.exception))

    def test_empty_and_duplicate_names_dropped(self):
        provider = FakeProvider(["b", "", None, "a", "b"])
        self.assertEqual(collect_entries("/ignored", provider), ["a", "b"])

    def test_byte_order_puts_ascii_before_multibyte(self):
        provider = FakeProvider(["あ", "z", "Z", "é"])
        self.assertEqual(collect_entries("/ignored", provider), ["Z", "z", "é", "あ"])


class StatTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.base = Path(self.tmp.name)
        self.provider = PosixMetadataProvider()

    def test_regular_file_metadata(self):
        path = self.base / "data.bin"
        path.write_bytes(b"x" * 1500)
        os.chmod(path, 0o640)

        meta = self.provider.stat(path)
        st = os.lstat(path)
        self.assertEqual(meta.file_type, FileType.REGULAR)
        self.assertEqual(meta.mode & 0o777, 0o640)
        self.assertEqual(meta.size, 1500)
        self.assertEqual(meta.link_count, st.st_nlink)
        self.assertEqual(meta.blocks, st.st_blocks)
        self.assertEqual(meta.owner_id, st.st_uid)
        self.assertTrue(meta.owner_name)
        self.assertTrue(meta.group_name)

    def test_directory_and_symlink_types(self):
        (self.base / "sub").mkdir()
        os.symlink(self.base / "missing", self.base / "dangling")

        self.assertEqual(self.provider.stat(self.base / "sub").file_type, FileType.DIRECTORY)
        # lstat: dangling link is reported, not followed
        self.assertEqual(self.provider.stat(self.base / "dangling").file_type, FileType.SYMLINK)

    def test_fifo_type(self):
        if not hasattr(os, "mkfifo"):
            self.skipTest("no mkfifo")
        os.mkfifo(self.base / "pipe")
        self.assertEqual(self.provider.stat(self.base / "pipe").file_type, FileType.FIFO)

    def test_stat_failure_raises_filesystem_error(self):
        with self.assertRaises(FilesystemError) as ctx:
            self.provider.stat(self.base / "gone")
        self.assertIn("gone", str(ctx.exception))

    def test_file_type_from_mode(self):
        self.assertEqual(file_type_from_mode(stat.S_IFCHR | 0o600), FileType.CHAR_DEVICE)
        self.assertEqual(file_type_from_mode(stat.S_IFBLK | 0o600), FileType.BLOCK_DEVICE)
        self.assertEqual(file_type_from_mode(stat.S_IFSOCK | 0o755), FileType.SOCKET)
        self.assertEqual(file_type_from_mode(0o644), FileType.UNKNOWN)

    def test_file_type_values_are_plain_names(self):
        self.assertEqual(
            [t.value for t in FileType],
            ["directory", "regular", "symlink", "char_device", "block_device", "fifo", "socket", "unknown"],
        )

    def test_gather_metadata_keeps_order(self):
        (self.base / "a").write_bytes(b"1")
        (self.base / "b").write_bytes(b"22")
        metas = gather_metadata(self.base, ["b", "a"], self.provider)
        self.assertEqual([m.size for m in metas], [2, 1])

    def test_gather_metadata_aborts_on_first_failure(self):
        (self.base / "a").write_bytes(b"1")
        with self.assertRaises(FilesystemError):
            gather_metadata(self.base, ["a", "vanished"], self.provider)


class NameLookupTests(unittest.TestCase):
    def test_unknown_uid_falls_back_to_number(self):
        provider = PosixMetadataProvider()
        with mock.patch("lsgrid_provider.pwd.getpwuid", side_effect=KeyError(4242)):
            self.assertEqual(provider.lookup_user_name(4242), "4242")

    def test_unknown_gid_falls_back_to_number(self):
        provider = PosixMetadataProvider()
        with mock.patch("lsgrid_provider.grp.getgrgid", side_effect=KeyError(777)):
            self.assertEqual(provider.lookup_group_name(777), "777")

    def test_strict_provider_raises_lookup_error(self):
        provider = PosixMetadataProvider(numeric_fallback=False)
        with mock.patch("lsgrid_provider.pwd.getpwuid", side_effect=KeyError(4242)):
            with self.assertRaises(NameLookupError) as ctx:
                provider.lookup_user_name(4242)
        self.assertIsInstance(ctx.exception, LookupError)

    def test_names_are_cached(self):
        provider = PosixMetadataProvider()
        entry = mock.Mock(pw_name="alice")
        with mock.patch("lsgrid_provider.pwd.getpwuid", return_value=entry) as getpwuid:
            self.assertEqual(provider.lookup_user_name(1000), "alice")
            self.assertEqual(provider.lookup_user_name(1000), "alice")
        getpwuid.assert_called_once_with(1000)


if __name__ == "__main__":
    unittest.main()
