"""``wren routes``: list the routes discovered under a pages directory.

Prints PATH, SOURCE, and FLAGS (scan-time export hints) in match
order, followed by any scan errors.
"""

import argparse
import sys
from pathlib import Path

from wren.errors import ConfigurationError
from wren.pages.discovery import scan_routes
from wren.routing.route import RouteDefinition


def _flags(route: RouteDefinition) -> str:
    flags = []
    if route.has_loader:
        flags.append("loader")
    if route.has_static_paths:
        flags.append("static-paths")
    if route.has_prerender:
        flags.append("prerender")
    return ", ".join(flags)


def run_routes(args: argparse.Namespace) -> None:
    """Scan ``args.pages`` and print the route table.

    Exits with status 1 when the scan reported errors.
    """
    try:
        table = scan_routes(args.pages)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    root = Path(args.pages).resolve()
    if not table.routes:
        print("No routes found.")
    else:
        rows = [(route.path, _relative(route.source, root), _flags(route)) for route in table]

        max_path = max(max(len(r[0]) for r in rows), 4)  # "PATH" header
        max_source = max(max(len(r[1]) for r in rows), 6)  # "SOURCE" header

        fmt = f"{{:<{max_path}}}  {{:<{max_source}}}  {{}}"
        print(fmt.format("PATH", "SOURCE", "FLAGS"))
        sep_len = max_path + max_source + 4 + max((len(r[2]) for r in rows), default=0)
        print("-" * min(max(sep_len, 20), 80))
        for path, source, flags in rows:
            print(fmt.format(path, source, flags))

    if table.errors:
        print(f"\n{len(table.errors)} error(s):", file=sys.stderr)
        for error in table.errors:
            print(f"  {error}", file=sys.stderr)
        raise SystemExit(1)


def _relative(source: str, root: Path) -> str:
    path = Path(source)
    if path.is_relative_to(root):
        return path.relative_to(root).as_posix()
    return source
