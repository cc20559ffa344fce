"""CLI argument handling and breadcrumb rendering tests.

Verifies how ``lazyfiles.cli.main`` resolves its target directory and prints
the cached listings from the root down to it.
"""

from __future__ import annotations

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyfiles import cli
from lazyfiles.dir_model import DirList, SortMethod, SortOption
from lazyfiles.runtime import config


class RenderListingTests(unittest.TestCase):
    def test_render_marks_cursor_selection_and_kinds(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "dir").mkdir()
            (root / "a.txt").write_text("12345", encoding="utf-8")
            (root / "link").symlink_to("a.txt")
            dirlist = DirList.load(root, SortOption())
            dirlist.contents[dirlist.index_of(root / "link")].set_selected(True)

            rendered = cli.render_listing(dirlist)

            self.assertEqual(
                rendered,
                f"{root}\n> dir/\n  a.txt  5 B\n* link@\n",
            )

    def test_render_empty_listing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.assertEqual(cli.render_listing(DirList.load(root, SortOption())), f"{root}\n  (empty)\n")


class CliMainTests(unittest.TestCase):
    def _run(self, argv: list[str], config_path: Path, default_path: Path | None = None) -> str:
        stdout = io.StringIO()
        with (
            mock.patch("lazyfiles.runtime.config.CONFIG_PATH", config_path),
            mock.patch("sys.stdout", stdout),
        ):
            cli.main(default_path=default_path, argv=argv)
        return stdout.getvalue()

    def test_main_prints_listings_from_root_down_to_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "project"
            target.mkdir()
            (target / "notes.txt").write_text("hi", encoding="utf-8")

            output = self._run([str(target)], root / "config.json")

            blocks = output.split("\n\n")
            self.assertEqual(blocks[0].splitlines()[0], "/")
            self.assertTrue(blocks[-1].startswith(f"{target}\n> notes.txt  2 B"))
            self.assertIn(f"{root}\n", output)
            self.assertIn("> project/", output)

    def test_main_defaults_to_current_working_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "here.txt").write_text("", encoding="utf-8")
            previous_cwd = Path.cwd()
            try:
                os.chdir(root)
                output = self._run([], root / "config.json")
            finally:
                os.chdir(previous_cwd)

            self.assertIn(f"{root}\n> here.txt  0 B\n", output)

    def test_file_argument_opens_its_parent_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "file.txt"
            target.write_text("x", encoding="utf-8")

            output = self._run([str(target)], root / "config.json", default_path=root / "unused")

            self.assertTrue(output.rstrip("\n").endswith(f"{root}\n> file.txt  1 B"))

    def test_missing_path_exits_with_message(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with self.assertRaises(SystemExit) as raised:
                self._run([str(root / "missing")], root / "config.json")
            self.assertEqual(str(raised.exception), f"Path not found: {root / 'missing'}")

    def test_sort_flags_apply_and_save_persists_them(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "listing"
            target.mkdir()
            for name in ("a", "b"):
                (target / name).write_text(name, encoding="utf-8")
            config_path = root / "config.json"

            output = self._run([str(target), "--reverse", "--sort", "lexical", "--save"], config_path)

            self.assertIn(f"{target}\n> b  1 B\n  a  1 B\n", output)
            with mock.patch("lazyfiles.runtime.config.CONFIG_PATH", config_path):
                saved = config.load_sort_option()
            self.assertIs(saved.method, SortMethod.LEXICAL)
            self.assertTrue(saved.reverse)

    def test_main_uses_sys_argv_when_argv_is_omitted(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            stdout = io.StringIO()
            with (
                mock.patch.object(sys, "argv", ["lazyfiles", str(root)]),
                mock.patch("lazyfiles.runtime.config.CONFIG_PATH", root / "config.json"),
                mock.patch("sys.stdout", stdout),
            ):
                cli.main()

            self.assertTrue(stdout.getvalue().rstrip("\n").endswith(f"{root}\n  (empty)"))


if __name__ == "__main__":
    unittest.main()
