"""Server render pipeline: path in, RenderResult out.

Each call walks one small state machine::

    Matching -> Resolving -> Loading -> Rendering -> Done
        |           |           |           |
       404         500         500         500

Loader and render failures never propagate; they are logged on the
``wren.render`` logger and turned into a generic 500 body so no
traceback reaches the response.
"""

import inspect
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin, urlsplit

from wren.errors import LoaderError, RenderError
from wren.head.registry import HeadRegistry, HeadToken, head_scope
from wren.http.query import QueryParams
from wren.pages.unit import RenderUnit
from wren.render.tree import create_page_element, render_to_markup
from wren.routing.matcher import resolve_match
from wren.routing.route import RouteDefinition

logger = logging.getLogger("wren.render")

NOT_FOUND_HTML = "<h1>404 - Not Found</h1>"
SERVER_ERROR_HTML = "<h1>500 - Internal Server Error</h1>"


@dataclass(frozen=True, slots=True)
class LoaderContext:
    """Everything a page loader can see about the current request.

    Built once per render and never retained.
    """

    request: Any
    url: str
    pathname: str
    params: Mapping[str, str] = field(default_factory=dict)
    query: QueryParams = field(default_factory=QueryParams)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """The envelope the boundary adapter turns into a response."""

    status: int
    html: str
    head: str = ""
    initial_data: Any = None


def request_url(request: Any, pathname: str, base_url: str = "http://localhost") -> str:
    """Absolute URL for *request*.

    *request* may be a URL string, an object with a ``url`` attribute,
    or ``None`` (then *pathname* is resolved against *base_url*).
    """
    if request is None:
        raw = pathname
    elif isinstance(request, str):
        raw = request
    else:
        raw = str(request.url)
    return urljoin(base_url.rstrip("/") + "/", raw)


def build_loader_context(
    request: Any,
    pathname: str,
    params: Mapping[str, str],
    *,
    base_url: str = "http://localhost",
) -> LoaderContext:
    url = request_url(request, pathname, base_url)
    return LoaderContext(
        request=request,
        url=url,
        pathname=pathname,
        params=dict(params),
        query=QueryParams(urlsplit(url).query),
    )


async def run_loader(unit: RenderUnit, context: LoaderContext) -> Any:
    """Invoke the unit's loader once; sync and async loaders both work.

    A returned exception instance counts as a failure and is raised.
    """
    if unit.loader is None:
        return None
    result = unit.loader(context)
    if inspect.isawaitable(result):
        result = await result
    if isinstance(result, BaseException):
        raise result
    return result


def render_unit(unit: RenderUnit, data: Any, params: Mapping[str, str]) -> tuple[str, str]:
    """Render *unit* under a fresh server registry; returns ``(html, head)``."""
    registry = HeadRegistry.server()
    with head_scope(registry):
        for fragment in unit.head:
            registry.register(HeadToken.new(), fragment)
        html = render_to_markup(create_page_element(unit, data, params))
    return html, registry.render()


def static_head(unit: RenderUnit) -> str:
    """Head markup a client-only page contributes without rendering."""
    return "".join(unit.head)


async def render_page(
    pathname: str,
    request: Any,
    routes: Sequence[RouteDefinition],
    *,
    not_found_path: str = "/404",
    base_url: str = "http://localhost",
) -> RenderResult:
    """Render the page at *pathname*.

    Args:
        pathname: Request path, e.g. ``/blog/hello-world``.
        request: The boundary's request (URL string or object with ``url``).
        routes: Route table, already sorted.
        not_found_path: Pattern of the designated not-found page.
        base_url: Resolves relative request URLs.

    Returns:
        ``RenderResult``; status is 404 whenever the rendered route is the
        not-found route, 500 on any loader or render failure.
    """
    match = resolve_match(routes, pathname, not_found_path)
    if match is None:
        return RenderResult(status=404, html=NOT_FOUND_HTML)

    route = match.route
    status = 404 if route.path == not_found_path else 200

    try:
        unit = await route.resolve()
    except Exception as exc:
        logger.exception("%s", RenderError(route.path, exc))
        return RenderResult(status=500, html=SERVER_ERROR_HTML)

    if unit.client_only:
        return RenderResult(status=status, html="", head=static_head(unit))

    context = build_loader_context(request, pathname, match.params, base_url=base_url)
    try:
        data = await run_loader(unit, context)
    except Exception as exc:
        logger.exception("%s", LoaderError(route.path, exc))
        return RenderResult(status=500, html=SERVER_ERROR_HTML)

    try:
        html, head_html = render_unit(unit, data, match.params)
    except Exception as exc:
        logger.exception("%s", RenderError(route.path, exc))
        return RenderResult(status=500, html=SERVER_ERROR_HTML)

    return RenderResult(status=status, html=html, head=head_html, initial_data=data)
