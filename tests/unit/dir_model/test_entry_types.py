"""Tests for entry identity and the lstat-based metadata accessor."""

from __future__ import annotations

import os
import stat
import tempfile
import unittest
from pathlib import Path

from lazyfiles.dir_model import DirEntry, FileType, Metadata, read_metadata


def _entry(path: str, size: int = 0, file_type: FileType = FileType.REGULAR) -> DirEntry:
    return DirEntry(name=Path(path).name, path=Path(path), metadata=Metadata(file_type=file_type, size=size))


class DirEntryIdentityTests(unittest.TestCase):
    def test_entries_with_same_path_are_equal_despite_stale_metadata(self) -> None:
        old = _entry("/data/report.txt", size=10)
        new = _entry("/data/report.txt", size=99, file_type=FileType.SYMLINK)
        new.set_selected(True)

        self.assertEqual(old, new)
        self.assertEqual(hash(old), hash(new))
        self.assertEqual(len({old, new}), 1)

    def test_entries_with_same_name_but_different_paths_differ(self) -> None:
        a = _entry("/one/report.txt")
        b = _entry("/two/report.txt")

        self.assertNotEqual(a, b)
        self.assertLess(a, b)
        self.assertGreater(b, a)

    def test_toggle_selected_flips_flag(self) -> None:
        entry = _entry("/data/a")
        self.assertTrue(entry.toggle_selected())
        self.assertTrue(entry.selected)
        self.assertFalse(entry.toggle_selected())
        self.assertEqual(str(entry), "a")


class MetadataAccessorTests(unittest.TestCase):
    def test_read_metadata_reports_type_size_and_permissions(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "notes.txt"
            target.write_bytes(b"hello")
            os.chmod(target, 0o640)
            subdir = root / "sub"
            subdir.mkdir()
            link = root / "link"
            link.symlink_to(target)

            file_meta = read_metadata(target)
            self.assertIs(file_meta.file_type, FileType.REGULAR)
            self.assertEqual(file_meta.size, 5)
            self.assertEqual(file_meta.permissions, 0o640)
            self.assertIsNotNone(file_meta.mtime_ns)
            self.assertFalse(file_meta.degraded)

            dir_meta = read_metadata(subdir)
            self.assertIs(dir_meta.file_type, FileType.DIRECTORY)
            self.assertTrue(dir_meta.is_dir)
            self.assertEqual(dir_meta.size, 0)

            self.assertIs(read_metadata(link).file_type, FileType.SYMLINK)

    def test_read_metadata_raises_for_missing_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                read_metadata(Path(tmp) / "missing")

    def test_file_type_from_mode_maps_special_files_to_other(self) -> None:
        self.assertIs(FileType.from_mode(stat.S_IFIFO | 0o644), FileType.OTHER)
        self.assertIs(FileType.from_mode(stat.S_IFREG | 0o644), FileType.REGULAR)


if __name__ == "__main__":
    unittest.main()
