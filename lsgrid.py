#!/usr/bin/env python3
"""
lsgrid - Directory Listing Tool

Lists a directory as a 3-column grid of names, or with -l as one line of
POSIX metadata per entry (type, permissions, links, owner, group, size,
modification time) after a "total" block count.
"""

import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from lsgrid_config import setup_logging
from lsgrid_layout import detail_lines, grid_lines
from lsgrid_models import ListingError, ListingOptions, NotFoundError
from lsgrid_provider import PosixMetadataProvider, collect_entries, gather_metadata

logger = logging.getLogger(__name__)

error_console = Console(stderr=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Renderer
# ═══════════════════════════════════════════════════════════════════════════════

def build_lines(options: ListingOptions, provider=None) -> list[str]:
    """Gather everything for the listing, then lay it out."""
    provider = provider or PosixMetadataProvider()
    names = collect_entries(options.path, provider)
    if options.detail:
        metadata = gather_metadata(options.path, names, provider)
        return detail_lines(names, metadata)
    return grid_lines(names)


def render(options: ListingOptions, provider=None, out=None) -> None:
    """Write the listing for ``options`` to ``out`` (stdout by default).

    Names that are not valid UTF-8 are written back as their raw bytes when
    ``out`` has a binary buffer.
    """
    if out is None:
        out = sys.stdout
    logger.debug("listing %s (%s mode)", options.path, "detail" if options.detail else "grid")
    lines = build_lines(options, provider)

    buffer = getattr(out, "buffer", None)
    if buffer is None:
        for line in lines:
            out.write(line + "\n")
        out.flush()
        return

    out.flush()
    for line in lines:
        buffer.write(os.fsencode(line + "\n"))
    buffer.flush()


def report_error(message: str) -> None:
    error_console.print(f"[red]lsgrid:[/] {escape(message)}", highlight=False, soft_wrap=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Main Entry Point
# ═══════════════════════════════════════════════════════════════════════════════

def print_help():
    """Print help message."""
    help_text = """
lsgrid - Directory Listing Tool

Usage: lsgrid [OPTIONS] [PATH]

Options:
  -l                Detail listing (mode, links, owner, group, size, time)
  --tui             Browse interactively
  -h, --help        Show this help message

Interactive Shortcuts:
  g                 Toggle detail table / name grid
  Enter             Open directory
  Backspace         Go to parent directory
  q                 Quit

Environment:
  LSGRID_CONFIG     Settings file (default ~/.config/lsgrid/config.json)
  LSGRID_DEBUG      Log debug messages to stderr
  LSGRID_LOG        Append debug log to this file

Examples:
  lsgrid                    # Grid of the current directory
  lsgrid -l /etc            # Detail listing of /etc
  lsgrid --tui ~/Documents  # Interactive mode for Documents
"""
    print(help_text)


def resolve_path(arg: str = None) -> Path:
    """Absolute form of ``arg`` (or the working directory), symlinks untouched."""
    return Path(os.path.abspath(os.path.expanduser(arg or ".")))


def parse_args(args: list[str]) -> ListingOptions:
    """Turn command line arguments into ListingOptions.

    Raises ValueError for unknown options or extra paths.
    """
    path_arg = None
    detail = False
    tui = False

    for arg in args:
        if arg == "-l":
            detail = True
        elif arg == "--tui":
            tui = True
        elif arg.startswith("-") and arg != "-":
            raise ValueError(f"unknown option: {arg}")
        elif path_arg is None:
            path_arg = arg
        else:
            raise ValueError(f"unexpected argument: {arg}")

    return ListingOptions(path=resolve_path(path_arg), detail=detail, tui=tui)


def main(argv: list[str] = None) -> int:
    """Main entry point."""
    setup_logging()
    args = sys.argv[1:] if argv is None else argv

    if "-h" in args or "--help" in args:
        print_help()
        return 0

    try:
        options = parse_args(args)
    except ValueError as e:
        report_error(str(e))
        report_error("use --help for usage information")
        return 2

    try:
        if options.tui:
            from lsgrid_tui import LsgridApp

            if not options.path.is_dir():
                if options.path.exists():
                    raise NotFoundError(options.path, "Not a directory")
                raise NotFoundError(options.path)
            LsgridApp(options.path).run()
        else:
            render(options)
    except ListingError as e:
        logger.debug("listing failed: %r", e)
        report_error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
