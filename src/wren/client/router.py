"""Client-side router: in-page navigation over the shared route table.

The router matches and renders with the same pieces the server uses
(``resolve_match``, ``LazyUnit``, loaders, the layout fold), against a
:class:`~wren.client.browser.Browser` instead of a request.

Navigations can overlap.  Every render takes a number from a
monotonically increasing counter and checks it again right before
touching the DOM; a render that is no longer the latest is dropped
silently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Sequence
from typing import Any
from urllib.parse import urljoin, urlsplit, urlunsplit

from wren.client.browser import (
    UNSET,
    Anchor,
    Browser,
    ClickEvent,
    DomElement,
    MarkupMountAdapter,
    Mount,
    MountAdapter,
    PointerEvent,
    PopStateEvent,
)
from wren.head.dom import HeadSync
from wren.head.registry import HeadRegistry, HeadSession
from wren.pages.unit import RenderUnit
from wren.render.pipeline import build_loader_context, run_loader
from wren.render.tree import HeadBoundary, create_page_element
from wren.routing.matcher import resolve_match
from wren.routing.route import RouteDefinition

logger = logging.getLogger("wren.router")

ROUTER_OPT_OUT_ATTRIBUTE = "data-wren-router"
PREFETCH_EVENTS = ("mouseover", "focusin", "touchstart")
_SKIPPED_SCHEMES = ("mailto:", "tel:")


def _origin(url: str) -> tuple[str, str]:
    parts = urlsplit(url)
    return parts.scheme, parts.netloc


def _without_fragment(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))


def link_target(anchor: Anchor | None, current_href: str) -> str | None:
    """Absolute URL the router should handle for *anchor*, or ``None``.

    Links the browser must handle itself: downloads, other targets,
    opted-out or external links, ``mailto:``/``tel:``, other origins,
    and hash-only jumps within the current document.
    """
    if anchor is None or not anchor.href:
        return None
    if anchor.download:
        return None
    if anchor.target not in ("", "_self"):
        return None
    if anchor.attributes.get(ROUTER_OPT_OUT_ATTRIBUTE) == "false":
        return None
    if "external" in anchor.rel.split():
        return None
    if anchor.href.startswith(_SKIPPED_SCHEMES):
        return None

    url = urljoin(current_href, anchor.href)
    if _origin(url) != _origin(current_href):
        return None
    if urlsplit(url).fragment and _without_fragment(url) == _without_fragment(current_href):
        return None
    return url


def is_plain_left_click(event: ClickEvent) -> bool:
    return (
        event.button == 0
        and not event.default_prevented
        and not (event.meta_key or event.ctrl_key or event.shift_key or event.alt_key)
    )


class Router:
    """Drives client navigation for one document.

    Usage::

        router = await start_router(routes, browser)
        await router.navigate("/blog/hello-world")
        router.dispose()
    """

    def __init__(
        self,
        routes: Sequence[RouteDefinition],
        browser: Browser,
        root: DomElement | None,
        *,
        adapter: MountAdapter | None = None,
        not_found_path: str = "/404",
        prefetch: bool = True,
        base_url: str | None = None,
    ) -> None:
        self.routes = routes
        self.browser = browser
        self.root = root
        self.adapter: MountAdapter = adapter if adapter is not None else MarkupMountAdapter()
        self.not_found_path = not_found_path
        self.prefetch_enabled = prefetch
        self.base_url = base_url

        self.head_registry = HeadRegistry.client()
        self.head_session = HeadSession(self.head_registry)
        self._head_sync: HeadSync | None = None

        self._mount: Mount | None = None
        self._navigation_id = 0
        self._initial_data: Any = browser.initial_data
        self._prefetched: dict[str, asyncio.Task[RenderUnit]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self._listeners: list[tuple[str, Any]] = []

    @property
    def inert(self) -> bool:
        """True when there is no root element to render into."""
        return self.root is None

    @property
    def resolve_base(self) -> str:
        """Base URL for :meth:`navigate`; the current origin by default."""
        if self.base_url is not None:
            return self.base_url
        scheme, netloc = _origin(self.browser.href)
        return f"{scheme}://{netloc}/"

    @property
    def navigation_id(self) -> int:
        return self._navigation_id

    def start(self) -> None:
        """Attach the head sync and the document event listeners."""
        if self.inert:
            return
        head_element = self.browser.head
        if head_element is not None:
            self._head_sync = HeadSync(self.head_registry, head_element)
        self._listen("click", self.on_click)
        self._listen("popstate", self.on_popstate)
        if self.prefetch_enabled:
            for event_type in PREFETCH_EVENTS:
                self._listen(event_type, self.on_prefetch)

    def _listen(self, event_type: str, handler: Any) -> None:
        self.browser.add_event_listener(event_type, handler)
        self._listeners.append((event_type, handler))

    def dispose(self) -> None:
        """Remove every listener this router attached."""
        for event_type, handler in self._listeners:
            self.browser.remove_event_listener(event_type, handler)
        self._listeners.clear()
        if self._head_sync is not None:
            self._head_sync.dispose()
            self._head_sync = None

    # -- Navigation --

    async def navigate(self, to: str, *, replace: bool = False, scroll: bool = True) -> None:
        """Navigate to *to*, resolved against :attr:`resolve_base`.

        Relative paths such as ``"about"`` resolve from the site root,
        not from the current page.  Other origins get a full document
        navigation.
        """
        url = urljoin(self.resolve_base, to)
        if self.inert or _origin(url) != _origin(self.browser.href):
            self.browser.assign(url)
            return
        if replace:
            self.browser.replace_state(url)
        else:
            self.browser.push_state(url)
        await self.render(url, scroll=scroll)

    async def render(self, url: str, *, scroll: bool = True) -> None:
        """Match, resolve, load and mount the page at *url*."""
        self._navigation_id += 1
        navigation_id = self._navigation_id
        initial_data, self._initial_data = self._initial_data, UNSET

        pathname = urlsplit(url).path or "/"
        match = resolve_match(self.routes, pathname, self.not_found_path)
        if match is None:
            self.browser.assign(url)
            return

        try:
            unit = await match.route.resolve()
            if initial_data is not UNSET:
                data = initial_data
            elif unit.client_only:
                data = None
            else:
                context = build_loader_context(url, pathname, match.params, base_url=url)
                data = await run_loader(unit, context)
        except Exception:
            logger.exception("Client render of %s failed; falling back to a full load", url)
            if navigation_id == self._navigation_id:
                self.browser.assign(url)
            return

        if navigation_id != self._navigation_id:
            logger.debug("Discarding stale navigation to %s", url)
            return

        page = create_page_element(unit, data, match.params)
        tree = HeadBoundary(self.head_session, page, unit.head)
        self._mount_tree(tree, client_only=unit.client_only)

        if scroll:
            self._scroll(urlsplit(url).fragment)

    def _mount_tree(self, tree: HeadBoundary, *, client_only: bool) -> None:
        assert self.root is not None
        if self._mount is not None:
            self._mount.render(tree)
        elif client_only:
            self._mount = self.adapter.create(self.root)
            self._mount.render(tree)
        else:
            self._mount = self.adapter.hydrate(self.root, tree)

    def _scroll(self, fragment: str) -> None:
        if fragment:
            target = self.browser.get_element_by_id(fragment)
            if target is not None:
                target.scroll_into_view()
                return
        self.browser.scroll_to(0, 0)

    # -- Prefetch --

    def prefetch(self, url: str) -> asyncio.Task[RenderUnit] | None:
        """Start resolving the render unit behind *url* once.

        A failed prefetch is evicted so a later hover retries.
        """
        match = resolve_match(self.routes, urlsplit(url).path or "/", self.not_found_path)
        if match is None:
            return None
        route = match.route
        existing = self._prefetched.get(route.source)
        if existing is not None:
            return existing

        task = asyncio.get_running_loop().create_task(route.resolve())
        self._prefetched[route.source] = task

        def _done(finished: asyncio.Task[RenderUnit]) -> None:
            if finished.cancelled() or finished.exception() is not None:
                logger.debug("Prefetch of %s failed", route.path)
                if self._prefetched.get(route.source) is finished:
                    del self._prefetched[route.source]

        task.add_done_callback(_done)
        return task

    def is_prefetched(self, source: str) -> bool:
        return source in self._prefetched

    # -- Event handlers --

    def on_click(self, event: ClickEvent) -> None:
        if not is_plain_left_click(event):
            return
        url = link_target(event.anchor, self.browser.href)
        if url is None:
            return
        event.prevent_default()
        self._spawn(self.navigate(url))

    def on_prefetch(self, event: PointerEvent) -> None:
        url = link_target(event.anchor, self.browser.href)
        if url is not None:
            self.prefetch(url)

    def on_popstate(self, event: PopStateEvent) -> None:
        self._spawn(self.render(self.browser.href, scroll=False))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def settle(self) -> None:
        """Wait for every navigation started from an event handler."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)


async def start_router(
    routes: Sequence[RouteDefinition],
    browser: Browser,
    *,
    adapter: MountAdapter | None = None,
    root_element_id: str = "root",
    not_found_path: str = "/404",
    prefetch: bool = True,
    base_url: str | None = None,
) -> Router:
    """Create a router, hydrate the current page, and start listening.

    Without a root element the returned router is inert: nothing is
    rendered and every navigation is a full document load.
    """
    root = browser.get_element_by_id(root_element_id)
    router = Router(
        routes,
        browser,
        root,
        adapter=adapter,
        not_found_path=not_found_path,
        prefetch=prefetch,
        base_url=base_url,
    )
    if router.inert:
        logger.warning("No #%s element; client router disabled", root_element_id)
        return router

    router.start()
    await router.render(browser.href, scroll=False)
    return router
