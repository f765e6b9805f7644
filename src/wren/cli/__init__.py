"""wren CLI: route listing and static site generation.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="wren: file-system routed pages, server rendering, and static output.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List discovered routes")
    routes_parser.add_argument("--pages", default="pages", help="Pages directory")

    # -- wren ssg ---------------------------------------------------------
    ssg_parser = subparsers.add_parser("ssg", help="Prerender pages to static files")
    ssg_parser.add_argument("--pages", default="pages", help="Pages directory")
    ssg_parser.add_argument("--out", default="dist/static", help="Output directory")
    ssg_parser.add_argument(
        "--client-dir",
        default=None,
        help="Client asset directory copied to <out>/client",
    )
    ssg_parser.add_argument(
        "--base-url",
        default="http://localhost",
        help="Origin pages are rendered against",
    )
    ssg_parser.add_argument(
        "--script",
        action="append",
        default=[],
        dest="scripts",
        help="Module script URL added to every page (repeatable)",
    )

    # -- wren version -----------------------------------------------------
    subparsers.add_parser("version", help="Print the wren version")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from wren.cli._routes import run_routes

        run_routes(args)
    elif args.command == "ssg":
        from wren.cli._ssg import run_build

        run_build(args)
    elif args.command == "version":
        from wren import __version__

        print(f"wren {__version__}")
