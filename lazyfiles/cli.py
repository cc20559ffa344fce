"""Command-line front door for lazyfiles.

Parses CLI options, resolves the target directory, and prints the cursored
listing of every directory from the filesystem root down to it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .dir_model import DirList, SortMethod, SortOption
from .file_ops import format_bytes
from .runtime import NavigationContext
from .runtime import config

CURSOR_MARKER = "> "
SELECTED_MARKER = "* "
PLAIN_MARKER = "  "


def render_listing(dirlist: DirList) -> str:
    """Render one listing as a header line plus one row per entry."""
    lines = [str(dirlist.path)]
    if dirlist.is_empty:
        lines.append(PLAIN_MARKER + "(empty)")
    for idx, entry in enumerate(dirlist):
        if idx == dirlist.index:
            marker = CURSOR_MARKER
        elif entry.selected:
            marker = SELECTED_MARKER
        else:
            marker = PLAIN_MARKER
        if entry.is_dir:
            lines.append(f"{marker}{entry.name}/")
        elif entry.metadata.is_symlink:
            lines.append(f"{marker}{entry.name}@")
        else:
            lines.append(f"{marker}{entry.name}  {format_bytes(entry.metadata.size)}")
    return "\n".join(lines) + "\n"


def render_breadcrumb(context: NavigationContext) -> str:
    """Render cached listings from the root down to the current directory."""
    chain = [context.curr_path, *context.curr_path.parents]
    blocks: list[str] = []
    for path in reversed(chain):
        dirlist = context.history.get(path)
        if dirlist is not None:
            blocks.append(render_listing(dirlist))
    return "\n".join(blocks)


def _sort_option_from_args(args: argparse.Namespace, base: SortOption) -> SortOption:
    changes: dict[str, object] = {}
    if args.sort is not None:
        changes["method"] = SortMethod.parse(args.sort)
    if args.reverse:
        changes["reverse"] = True
    if args.hidden:
        changes["show_hidden"] = True
    if args.no_dirs_first:
        changes["directories_first"] = False
    return base.with_changes(**changes)


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print the listing breadcrumb for a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = argparse.ArgumentParser(description="Show cached directory listings from the root down to PATH.")
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument(
        "--sort",
        choices=[method.value for method in SortMethod],
        default=None,
        help="Sort method (default: saved preference).",
    )
    parser.add_argument("--reverse", action="store_true", help="Reverse the sort order.")
    parser.add_argument("--hidden", action="store_true", help="Show dotfiles.")
    parser.add_argument("--no-dirs-first", action="store_true", help="Do not group directories first.")
    parser.add_argument("--save", action="store_true", help="Persist the resulting sort preferences.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log cache and file-operation activity.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        path = path.parent

    sort_option = _sort_option_from_args(args, config.load_sort_option())
    if args.save:
        config.save_sort_option(sort_option)

    try:
        context = NavigationContext(path, sort_option=sort_option)
    except OSError as exc:
        raise SystemExit(f"Cannot list {path}: {exc.strerror or exc}") from exc
    sys.stdout.write(render_breadcrumb(context))


if __name__ == "__main__":
    main()
