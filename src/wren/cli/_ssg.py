"""``wren ssg``: prerender a pages directory to static files."""

import argparse
import asyncio
import sys

from wren.config import WrenConfig
from wren.errors import WrenError
from wren.ssg import run_ssg


def run_build(args: argparse.Namespace) -> None:
    """Run the static site generator with settings from *args*."""
    config = WrenConfig(
        pages_dir=args.pages,
        out_dir=args.out,
        client_dir=args.client_dir,
        base_url=args.base_url,
        scripts=tuple(args.scripts),
    )
    try:
        written = asyncio.run(run_ssg(config))
    except WrenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"Wrote {len(written)} page(s) to {config.out_dir}")
