"""Tessera CLI — tessera SOURCE DEST [--build] [--dev].

Entry point for the ``tessera`` command-line interface.

Exit codes:
    0  success
    1  one or more pages failed to render or write
    2  configuration or data file error
"""

from __future__ import annotations

import argparse
import sys

EXIT_PAGE_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the tessera CLI."""
    parser = argparse.ArgumentParser(
        prog="tessera",
        description="Render Jinja page templates into a static HTML tree.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("source", help="Source directory (templates + data.json)")
    parser.add_argument("dest", help="Destination directory for rendered HTML")
    parser.add_argument(
        "--build",
        action="store_true",
        help="Render every page once, beautified",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Watch the source tree and re-render changed pages",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from tessera import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not (args.build or args.dev):
        parser.print_help()
        sys.exit(0)

    from tessera._errors import TesseraError
    from tessera.app import build, dev

    try:
        if args.dev:
            dev(args.source, args.dest, initial_build=args.build)
            return
        result = build(args.source, args.dest)
    except TesseraError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    if not result.ok:
        sys.exit(EXIT_PAGE_FAILURE)


if __name__ == "__main__":
    main()
