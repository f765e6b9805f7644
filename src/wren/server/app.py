"""ASGI application serving pages through the render pipeline.

The boundary adapter: turns each HTTP request into a ``render_page``
call and the ``RenderResult`` into a full HTML document.  Besides
pages it answers ``GET /health`` and serves files from an optional
static directory.

Serve it with any ASGI server::

    from wren import PagesApp, WrenConfig
    from wren.pages import scan_routes

    config = WrenConfig(pages_dir="pages", scripts=("/client/entry.js",))
    app = PagesApp(scan_routes(config.pages_dir), config=config)
"""

import inspect
import logging
import mimetypes
from collections.abc import Awaitable, Callable, Iterable, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wren.config import WrenConfig
from wren.http.request import Request
from wren.http.response import Response
from wren.render.document import generate_html
from wren.render.pipeline import SERVER_ERROR_HTML, RenderResult, render_page
from wren.routing.route import RouteDefinition
from wren.routing.table import RouteTable, RouteTableRef
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")

Scope = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send = Callable[[MutableMapping[str, Any]], Awaitable[None]]

HEALTH_PATH = "/health"


@dataclass(frozen=True, slots=True)
class RenderContext:
    """What ``on_before_render`` sees, and may replace, before a render."""

    request: Request
    pathname: str
    routes: RouteTable


BeforeRenderHook = Callable[[RenderContext], RenderContext | None | Awaitable[RenderContext | None]]
AfterRenderHook = Callable[[RenderResult], RenderResult | None | Awaitable[RenderResult | None]]


async def _call_hook(hook: Callable[[Any], Any] | None, value: Any) -> Any:
    """Run an optional sync or async hook; ``None`` keeps *value*."""
    if hook is None:
        return value
    result = hook(value)
    if inspect.isawaitable(result):
        result = await result
    return value if result is None else result


def _as_table_ref(routes: RouteTableRef | RouteTable | Iterable[RouteDefinition]) -> RouteTableRef:
    if isinstance(routes, RouteTableRef):
        return routes
    if isinstance(routes, RouteTable):
        return RouteTableRef(routes)
    return RouteTableRef(RouteTable.build(routes))


class PagesApp:
    """ASGI 3 application for a route table.

    Args:
        routes: A :class:`RouteTableRef` (to allow hot swaps), a
            :class:`RouteTable`, or any iterable of routes.
        config: Document and routing settings.
        on_before_render: Called with a :class:`RenderContext`; may
            return a replacement.
        on_after_render: Called with the :class:`RenderResult`; may
            return a replacement.
        static_dir: Files served as-is before page matching.
    """

    __slots__ = ("_static_dir", "config", "on_after_render", "on_before_render", "routes")

    def __init__(
        self,
        routes: RouteTableRef | RouteTable | Iterable[RouteDefinition],
        *,
        config: WrenConfig | None = None,
        on_before_render: BeforeRenderHook | None = None,
        on_after_render: AfterRenderHook | None = None,
        static_dir: str | Path | None = None,
    ) -> None:
        self.routes = _as_table_ref(routes)
        self.config = config if config is not None else WrenConfig()
        self.on_before_render = on_before_render
        self.on_after_render = on_after_render
        self._static_dir = Path(static_dir).resolve() if static_dir is not None else None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            msg = f"Unsupported ASGI scope type: {scope['type']!r}"
            raise RuntimeError(msg)

        request = Request.from_asgi(scope)
        response = await self.handle(request)
        await send_response(response, send, method=request.method)

    async def handle(self, request: Request) -> Response:
        """Produce the response for one request."""
        if request.path == HEALTH_PATH:
            return Response.json({"status": "ok"})

        if request.method not in ("GET", "HEAD"):
            return Response("Method Not Allowed", status=405).with_header("Allow", "GET, HEAD")

        if self._static_dir is not None:
            static = self._serve_static(request.path)
            if static is not None:
                return static

        try:
            return await self._render(request)
        except Exception:
            logger.exception("500 %s %s", request.method, request.path)
            return Response(self._document(RenderResult(status=500, html=SERVER_ERROR_HTML)), 500)

    async def _render(self, request: Request) -> Response:
        context = RenderContext(request=request, pathname=request.path, routes=self.routes.current)
        context = await _call_hook(self.on_before_render, context)

        result = await render_page(
            context.pathname,
            context.request,
            context.routes.routes,
            not_found_path=self.config.not_found_path,
            base_url=self.config.base_url,
        )
        result = await _call_hook(self.on_after_render, result)
        return Response(self._document(result), status=result.status)

    def _document(self, result: RenderResult) -> str:
        config = self.config
        return generate_html(
            html=f'<div id="{config.root_element_id}">{result.html}</div>',
            head=result.head,
            initial_data=result.initial_data,
            include_initial_data_script=config.include_initial_data_script,
            scripts=config.scripts,
            preload_scripts=config.preload_scripts,
        )

    def _serve_static(self, path: str) -> Response | None:
        """Serve *path* from the static directory, or ``None`` to fall through."""
        assert self._static_dir is not None
        relative = path.lstrip("/")
        if not relative:
            return None

        file_path = (self._static_dir / relative).resolve()
        if not file_path.is_relative_to(self._static_dir):
            return Response(body="Forbidden", status=403, content_type="text/plain; charset=utf-8")
        if not file_path.is_file():
            return None

        content_type, _ = mimetypes.guess_type(str(file_path))
        return Response(
            body=file_path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("Serving %d routes", len(self.routes.current))
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
