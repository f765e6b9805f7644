"""Static site generation: render prerenderable pages to a file tree.

Every route whose render unit sets ``prerender = True`` is rendered
through the same :func:`~wren.render.pipeline.render_page` the server
uses and written as ``<out_dir>/<path>/index.html``.  Dynamic routes
enumerate their parameter sets with ``get_static_paths``.

Output layout::

    out/index.html                     /
    out/about/index.html               /about
    out/blog/hello-world/index.html    /blog/:slug  {"slug": "hello-world"}
    out/client/...                     client assets (run_ssg only)
"""

import inspect
import logging
import shutil
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any
from urllib.parse import quote

from wren.config import WrenConfig
from wren.errors import ConfigurationError, MissingStaticPathsError, StaticPathError
from wren.pages.discovery import scan_routes
from wren.render.document import generate_html
from wren.render.pipeline import render_page
from wren.routing.route import RouteDefinition
from wren.templating.integration import create_environment

logger = logging.getLogger("wren.ssg")

# Characters encodeURIComponent leaves alone, besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    """Percent-encode one path segment."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def encode_catch_all(value: str) -> str:
    """Encode a catch-all value segment by segment, dropping empty parts."""
    return "/".join(encode_component(part) for part in value.split("/") if part)


def resolve_prerender_path(route: RouteDefinition, params: Mapping[str, Any]) -> str:
    """Substitute *params* into *route*'s pattern.

    Raises:
        StaticPathError: A parameter the pattern needs is missing.
    """
    parts: list[str] = []
    for segment in route.segments:
        if segment.kind == "static":
            parts.append(segment.value)
            continue

        name = segment.param_name or ""
        raw = params.get(name)
        if raw is None:
            msg = f'Missing param "{name}" for route {route.path}'
            raise StaticPathError(msg)

        if segment.kind == "catch_all":
            encoded = encode_catch_all(str(raw))
            if encoded:
                parts.append(encoded)
        else:
            parts.append(encode_component(str(raw)))

    return "/" + "/".join(parts)


def output_path(out_dir: Path, pathname: str) -> Path:
    """``index.html`` location for *pathname* under *out_dir*."""
    parts = [p for p in pathname.split("/") if p]
    return out_dir.joinpath(*parts, "index.html")


def _entry_params(entry: Any) -> Mapping[str, Any]:
    """Accept ``{"params": {...}}`` entries as well as bare parameter mappings."""
    if isinstance(entry, Mapping):
        nested = entry.get("params")
        if isinstance(nested, Mapping):
            return nested
        return entry
    nested = getattr(entry, "params", None)
    if isinstance(nested, Mapping):
        return nested
    msg = f"Static path entry must be a mapping, got {type(entry).__name__}"
    raise StaticPathError(msg)


async def _static_paths(route: RouteDefinition, enumerate_paths: Any) -> list[str]:
    entries = enumerate_paths()
    if inspect.isawaitable(entries):
        entries = await entries
    return [resolve_prerender_path(route, _entry_params(e)) for e in entries or ()]


async def prerender(
    routes: Iterable[RouteDefinition],
    out_dir: str | Path,
    *,
    base_url: str = "http://localhost",
    scripts: Sequence[str] = (),
    include_initial_data_script: bool = False,
    root_element_id: str = "root",
    not_found_path: str = "/404",
) -> list[Path]:
    """Render every prerenderable route to ``<out_dir>/.../index.html``.

    Args:
        routes: Route table, already sorted.
        out_dir: Output directory, created if missing.
        base_url: Origin the pages are rendered against.
        scripts: Module scripts referenced by each page.
        include_initial_data_script: Embed loader data (off for static output).
        root_element_id: Id of the element wrapping each page.
        not_found_path: Pattern of the designated not-found page.

    Returns:
        Written file paths, in render order.

    Raises:
        MissingStaticPathsError: A dynamic route has no ``get_static_paths``.
        StaticPathError: A static path entry lacks a parameter.
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    table = list(routes)
    written: list[Path] = []

    async def render_to_file(pathname: str) -> None:
        url = base_url.rstrip("/") + pathname
        result = await render_page(
            pathname,
            url,
            table,
            not_found_path=not_found_path,
            base_url=base_url,
        )
        if result.status >= 500:
            logger.warning("Prerender of %s returned %d", pathname, result.status)

        document = generate_html(
            html=f'<div id="{root_element_id}">{result.html}</div>',
            head=result.head,
            initial_data=result.initial_data,
            include_initial_data_script=include_initial_data_script,
            scripts=scripts,
        )
        target = output_path(out, pathname)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(document, encoding="utf-8")
        written.append(target)
        logger.info("Prerendered %s -> %s", pathname, target)

    for route in table:
        unit = await route.resolve()
        if not unit.prerender:
            continue

        if route.is_dynamic:
            if unit.get_static_paths is None:
                raise MissingStaticPathsError(route.path)
            for pathname in await _static_paths(route, unit.get_static_paths):
                await render_to_file(pathname)
            continue

        await render_to_file(route.path)

    return written


async def run_ssg(config: WrenConfig, routes: Iterable[RouteDefinition] | None = None) -> list[Path]:
    """Build the static site described by *config*.

    Scans ``config.pages_dir`` unless *routes* is given, clears
    ``config.out_dir``, prerenders, then copies ``config.client_dir``
    (when set) to ``<out_dir>/client``.

    Raises:
        ConfigurationError: ``client_dir`` is set but does not exist.
    """
    client_dir = Path(config.client_dir) if config.client_dir is not None else None
    if client_dir is not None and not client_dir.is_dir():
        msg = f"Client build output not found at {client_dir}. Run the client build before SSG."
        raise ConfigurationError(msg)

    if routes is None:
        env = create_environment(config) if config.template_dir is not None else None
        routes = scan_routes(config.pages_dir, config.extensions, env)

    out = Path(config.out_dir)
    shutil.rmtree(out, ignore_errors=True)

    written = await prerender(
        routes,
        out,
        base_url=config.base_url,
        scripts=config.scripts,
        include_initial_data_script=False,
        root_element_id=config.root_element_id,
        not_found_path=config.not_found_path,
    )

    if client_dir is not None:
        shutil.copytree(client_dir, out / "client", dirs_exist_ok=True)

    logger.info("SSG output written to %s", out)
    return written
