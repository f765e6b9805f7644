"""wren: file-system routed pages with server rendering, client navigation,
and static site generation.

Basic usage::

    from wren import PagesApp, WrenConfig, scan_routes

    config = WrenConfig(pages_dir="pages")
    app = PagesApp(scan_routes(config.pages_dir), config=config)

Pages are Python modules under ``pages/``::

    # pages/blog/[slug].py
    from wren.head import head

    async def loader(ctx):
        return {"title": ctx.params["slug"].replace("-", " ").title()}

    def component(data, params):
        head(f"<title>{data['title']}</title>")
        return f"<h1>{data['title']}</h1>"
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "HeadRegistry",
    "LoaderContext",
    "PagesApp",
    "RenderResult",
    "RouteDefinition",
    "RouteTable",
    "RouteTableRef",
    "Router",
    "WrenConfig",
    "WrenError",
    "define_route",
    "generate_html",
    "lazy_route",
    "match_route",
    "parse_route",
    "prerender",
    "render_page",
    "resolve_match",
    "run_ssg",
    "scan_routes",
    "serialize_data",
    "sort_routes",
    "start_router",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "WrenConfig":
        from wren.config import WrenConfig

        return WrenConfig

    if name in ("WrenError", "ConfigurationError"):
        from wren import errors

        return getattr(errors, name)

    if name in ("RouteDefinition",):
        from wren.routing.route import RouteDefinition

        return RouteDefinition

    if name in ("parse_route", "sort_routes"):
        from wren.routing import parser

        return getattr(parser, name)

    if name in ("match_route", "resolve_match"):
        from wren.routing import matcher

        return getattr(matcher, name)

    if name in ("RouteTable", "RouteTableRef"):
        from wren.routing import table

        return getattr(table, name)

    if name == "HeadRegistry":
        from wren.head.registry import HeadRegistry

        return HeadRegistry

    if name in ("render_page", "LoaderContext", "RenderResult"):
        from wren.render import pipeline

        return getattr(pipeline, name)

    if name in ("generate_html", "serialize_data"):
        from wren.render import document

        return getattr(document, name)

    if name in ("scan_routes",):
        from wren.pages.discovery import scan_routes

        return scan_routes

    if name in ("define_route", "lazy_route"):
        from wren.pages import routes

        return getattr(routes, name)

    if name in ("Router", "start_router"):
        from wren.client import router

        return getattr(router, name)

    if name in ("prerender", "run_ssg"):
        from wren import ssg

        return getattr(ssg, name)

    if name == "PagesApp":
        from wren.server.app import PagesApp

        return PagesApp

    raise AttributeError(f"module 'wren' has no attribute {name!r}")
