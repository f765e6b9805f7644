"""Tests for wren.client.router: in-page navigation against a memory browser."""

import asyncio
from typing import Any

from wren.client.browser import UNSET, Anchor, MarkupMount, PointerEvent
from wren.client.router import Router, link_target, start_router
from wren.head import head
from wren.head.dom import HEAD_MARKER_END, HEAD_MARKER_START
from wren.pages.routes import define_route, lazy_route
from wren.pages.unit import RenderUnit
from wren.render.pipeline import LoaderContext
from wren.render.tree import Node
from wren.routing.parser import sort_routes
from wren.routing.route import RouteDefinition
from wren.testing import MemoryBrowser, MemoryElement

ORIGIN = "http://localhost"

# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------


def home(data: Any, params: dict[str, str]) -> str:
    head("<title>Home</title>")
    return "<h1>Home</h1>"


def about(data: Any, params: dict[str, str]) -> str:
    head("<title>About</title>")
    return "<h1>About</h1>"


def post(data: Any, params: dict[str, str]) -> str:
    head(f"<title>{data['title']}</title>")
    return f"<h1>{data['title']}</h1>"


def not_found(data: Any, params: dict[str, str]) -> str:
    return "<h1>Not found</h1>"


class _LoaderLog:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, ctx: LoaderContext) -> dict[str, str]:
        self.calls.append(ctx.pathname)
        return {"title": ctx.params["slug"].title()}


def _site(loader: _LoaderLog | None = None) -> list[RouteDefinition]:
    return sort_routes(
        [
            define_route("/", home),
            define_route("/about", about),
            define_route("/blog/:slug", post, loader=loader or _LoaderLog()),
            define_route("/404", not_found),
        ]
    )


def _browser(path: str = "/", initial_data: Any = UNSET) -> MemoryBrowser:
    browser = MemoryBrowser(ORIGIN + path, initial_data=initial_data)
    browser.add_element("root", "")
    return browser


def _root(browser: MemoryBrowser) -> MemoryElement:
    root = browser.get_element_by_id("root")
    assert root is not None
    return root


class _RecordingAdapter:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def hydrate(self, element: MemoryElement, tree: Node) -> MarkupMount:
        self.calls.append("hydrate")
        mount = MarkupMount(element)
        mount.render(tree)
        return mount

    def create(self, element: MemoryElement) -> MarkupMount:
        self.calls.append("create")
        return MarkupMount(element)


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


class TestStartRouter:
    async def test_hydrates_with_initial_data(self) -> None:
        loader = _LoaderLog()
        browser = _browser("/blog/hello", initial_data={"title": "From Server"})
        adapter = _RecordingAdapter()

        router = await start_router(_site(loader), browser, adapter=adapter)

        assert adapter.calls == ["hydrate"]
        assert loader.calls == []
        assert _root(browser).inner_html == "<h1>From Server</h1>"
        assert router.navigation_id == 1

    async def test_initial_data_used_only_once(self) -> None:
        loader = _LoaderLog()
        browser = _browser("/blog/hello", initial_data={"title": "From Server"})
        router = await start_router(_site(loader), browser)

        await router.navigate("/blog/other")

        assert loader.calls == ["/blog/other"]
        assert _root(browser).inner_html == "<h1>Other</h1>"

    async def test_head_synced(self) -> None:
        browser = _browser("/")
        await start_router(_site(), browser)
        assert browser.head is not None
        assert browser.head.inner_html == f"{HEAD_MARKER_START}<title>Home</title>{HEAD_MARKER_END}"

    async def test_client_only_first_render_creates(self) -> None:
        routes = [define_route("/", home, client_only=True)]
        browser = _browser("/")
        adapter = _RecordingAdapter()

        await start_router(routes, browser, adapter=adapter)

        assert adapter.calls == ["create"]
        assert _root(browser).inner_html == "<h1>Home</h1>"

    async def test_no_root_is_inert(self) -> None:
        browser = MemoryBrowser(ORIGIN + "/")
        router = await start_router(_site(), browser)

        assert router.inert is True
        assert browser.listener_count() == 0

        await router.navigate("/about")
        assert browser.assigned == [ORIGIN + "/about"]


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class TestNavigate:
    async def test_push_render_scroll(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)
        scrolls = browser.scroll_calls

        await router.navigate("/about")

        assert browser.href == ORIGIN + "/about"
        assert browser.history == [ORIGIN + "/", ORIGIN + "/about"]
        assert _root(browser).inner_html == "<h1>About</h1>"
        assert browser.scroll_calls == scrolls + 1
        assert browser.scroll_position == (0, 0)

    async def test_replace(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        await router.navigate("/about", replace=True)

        assert browser.history == [ORIGIN + "/about"]

    async def test_relative_target_resolves_from_origin(self) -> None:
        browser = _browser("/blog/hello")
        router = await start_router(_site(), browser)

        await router.navigate("about")

        assert browser.href == ORIGIN + "/about"
        assert _root(browser).inner_html == "<h1>About</h1>"

    async def test_relative_target_resolves_from_base_url(self) -> None:
        routes = sort_routes([define_route("/docs/intro", home), define_route("/docs/about", about)])
        browser = _browser("/docs/intro")
        router = await start_router(routes, browser, base_url=ORIGIN + "/docs/")

        await router.navigate("about")

        assert router.resolve_base == ORIGIN + "/docs/"
        assert browser.href == ORIGIN + "/docs/about"
        assert _root(browser).inner_html == "<h1>About</h1>"

    async def test_no_scroll(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)
        scrolls = browser.scroll_calls

        await router.navigate("/about", scroll=False)

        assert browser.scroll_calls == scrolls

    async def test_scrolls_to_hash_target(self) -> None:
        browser = _browser("/")
        team = browser.add_element("team")
        router = await start_router(_site(), browser)

        await router.navigate("/about#team")

        assert team.scrolled_into_view == 1

    async def test_head_replaced_on_navigation(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        await router.navigate("/about")

        assert browser.head is not None
        assert "<title>About</title>" in browser.head.inner_html
        assert "<title>Home</title>" not in browser.head.inner_html

    async def test_cross_origin_is_full_navigation(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        await router.navigate("https://elsewhere.test/page")

        assert browser.assigned == ["https://elsewhere.test/page"]
        assert browser.href == ORIGIN + "/"

    async def test_unknown_path_renders_not_found(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        await router.navigate("/no/such/page")

        assert _root(browser).inner_html == "<h1>Not found</h1>"

    async def test_no_match_without_fallback_is_full_navigation(self) -> None:
        browser = _browser("/")
        router = await start_router([define_route("/", home)], browser)

        await router.navigate("/missing")

        assert browser.assigned == [ORIGIN + "/missing"]

    async def test_loader_failure_falls_back_to_full_load(self) -> None:
        def failing(ctx: LoaderContext) -> None:
            raise RuntimeError("offline")

        routes = sort_routes([define_route("/", home), define_route("/blog/:slug", post, loader=failing)])
        browser = _browser("/")
        router = await start_router(routes, browser)

        await router.navigate("/blog/x")

        assert browser.assigned == [ORIGIN + "/blog/x"]
        assert _root(browser).inner_html == "<h1>Home</h1>"

    async def test_stale_navigation_is_discarded(self) -> None:
        release = asyncio.Event()

        async def slow_loader(ctx: LoaderContext) -> dict[str, str]:
            await release.wait()
            return {"title": "Slow"}

        routes = sort_routes(
            [
                define_route("/", home),
                define_route("/about", about),
                define_route("/blog/:slug", post, loader=slow_loader),
            ]
        )
        browser = _browser("/")
        router = await start_router(routes, browser)

        slow = asyncio.create_task(router.navigate("/blog/slow"))
        await asyncio.sleep(0)
        await router.navigate("/about")
        release.set()
        await slow

        assert _root(browser).inner_html == "<h1>About</h1>"
        assert browser.head is not None
        assert "<title>Slow</title>" not in browser.head.inner_html


# ---------------------------------------------------------------------------
# Link interception
# ---------------------------------------------------------------------------


class TestClickInterception:
    async def test_plain_click_navigates(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        event = browser.click("/about")
        await router.settle()

        assert event.default_prevented is True
        assert browser.href == ORIGIN + "/about"
        assert _root(browser).inner_html == "<h1>About</h1>"

    async def test_modifier_and_non_left_clicks_ignored(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        clicks = [
            browser.click("/about", meta_key=True),
            browser.click("/about", ctrl_key=True),
            browser.click("/about", shift_key=True),
            browser.click("/about", alt_key=True),
            browser.click("/about", button=1),
        ]
        await router.settle()

        assert not any(e.default_prevented for e in clicks)
        assert browser.href == ORIGIN + "/"

    async def test_links_left_to_browser(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        clicks = [
            browser.click("/about", target="_blank"),
            browser.click("/about", download=True),
            browser.click("/about", rel="noopener external"),
            browser.click("/about", attributes={"data-wren-router": "false"}),
            browser.click("mailto:hi@example.com"),
            browser.click("tel:+15550100"),
            browser.click("https://elsewhere.test/about"),
            browser.click("#section"),
        ]
        await router.settle()

        assert not any(e.default_prevented for e in clicks)
        assert browser.href == ORIGIN + "/"

    async def test_explicit_self_target_navigates(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)

        event = browser.click("/about", target="_self")
        await router.settle()

        assert event.default_prevented is True


class TestLinkTarget:
    def test_relative_href_resolved(self) -> None:
        assert link_target(Anchor("post"), ORIGIN + "/blog/") == ORIGIN + "/blog/post"

    def test_hash_on_other_page_is_handled(self) -> None:
        assert link_target(Anchor("/about#team"), ORIGIN + "/") == ORIGIN + "/about#team"

    def test_hash_on_current_page_is_not(self) -> None:
        assert link_target(Anchor("/about#team"), ORIGIN + "/about") is None

    def test_missing_anchor(self) -> None:
        assert link_target(None, ORIGIN + "/") is None


# ---------------------------------------------------------------------------
# History and prefetch
# ---------------------------------------------------------------------------


class TestPopState:
    async def test_back_rerenders_without_scrolling(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)
        await router.navigate("/about")
        scrolls = browser.scroll_calls

        browser.back()
        await router.settle()

        assert browser.href == ORIGIN + "/"
        assert _root(browser).inner_html == "<h1>Home</h1>"
        assert browser.scroll_calls == scrolls


class TestPrefetch:
    async def test_hover_resolves_once(self) -> None:
        loads = []

        def load() -> RenderUnit:
            loads.append(1)
            return RenderUnit(component=about)

        routes = sort_routes([define_route("/", home), lazy_route("/about", load, source="about")])
        browser = _browser("/")
        router = await start_router(routes, browser)

        browser.hover("/about")
        browser.hover("/about", "focusin")
        browser.hover("/about", "touchstart")
        task = router.prefetch(ORIGIN + "/about")
        assert task is not None
        await task

        assert router.is_prefetched("about")
        assert loads == [1]

        await router.navigate("/about")
        assert loads == [1]
        assert _root(browser).inner_html == "<h1>About</h1>"

    async def test_navigation_joins_pending_prefetch(self) -> None:
        loads = []
        release = asyncio.Event()

        async def load() -> RenderUnit:
            loads.append(1)
            await release.wait()
            return RenderUnit(component=about)

        routes = sort_routes([define_route("/", home), lazy_route("/about", load, source="about")])
        browser = _browser("/")
        router = await start_router(routes, browser)

        browser.hover("/about")
        await asyncio.sleep(0)
        assert loads == [1]

        navigation = asyncio.create_task(router.navigate("/about"))
        await asyncio.sleep(0)
        assert not navigation.done()

        release.set()
        await navigation

        assert loads == [1]
        assert _root(browser).inner_html == "<h1>About</h1>"

    async def test_failed_prefetch_is_evicted(self) -> None:
        attempts = []

        def load() -> RenderUnit:
            attempts.append(1)
            if len(attempts) == 1:
                raise ImportError("chunk failed")
            return RenderUnit(component=about)

        routes = sort_routes([define_route("/", home), lazy_route("/about", load, source="about")])
        browser = _browser("/")
        router = await start_router(routes, browser)

        task = router.prefetch(ORIGIN + "/about")
        assert task is not None
        await asyncio.gather(task, return_exceptions=True)
        await asyncio.sleep(0)

        assert not router.is_prefetched("about")
        retry = router.prefetch(ORIGIN + "/about")
        assert retry is not None
        await retry
        assert len(attempts) == 2

    async def test_prefetch_disabled(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser, prefetch=False)

        browser.dispatch("mouseover", PointerEvent(Anchor("/about")))

        assert not router.is_prefetched("/about")
        assert "mouseover" not in browser.listeners or not browser.listeners["mouseover"]


class TestDispose:
    async def test_removes_listeners(self) -> None:
        browser = _browser("/")
        router = await start_router(_site(), browser)
        assert browser.listener_count() == 5

        router.dispose()

        assert browser.listener_count() == 0

    async def test_router_type(self) -> None:
        router = await start_router(_site(), _browser("/"))
        assert isinstance(router, Router)
