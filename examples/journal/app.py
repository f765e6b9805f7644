"""Journal: a small file-routed site served live or built to static files.

Demonstrates the pages directory conventions: a root layout, a kida
template page, a dynamic route with a loader and ``get_static_paths``,
and a custom not-found page.

Serve with any ASGI server:
    cd examples/journal && uvicorn app:app

Build static output:
    cd examples/journal && python app.py
"""

import asyncio
from pathlib import Path

from wren import PagesApp, WrenConfig, run_ssg, scan_routes
from wren.templating.integration import create_environment

HERE = Path(__file__).parent

config = WrenConfig(
    pages_dir=HERE / "pages",
    extensions=(".py", ".html"),
    out_dir=HERE / "dist",
    scripts=("/client/entry.js",),
)
routes = scan_routes(config.pages_dir, config.extensions, create_environment(config))
app = PagesApp(routes, config=config, static_dir=HERE / "static")


if __name__ == "__main__":
    written = asyncio.run(run_ssg(config))
    print(f"Wrote {len(written)} page(s) to {config.out_dir}")
