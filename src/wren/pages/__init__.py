"""Page discovery and render units.

Submodules are imported lazily; ``wren.routing`` depends on
``wren.pages.unit`` and must not pull in discovery.
"""


def __getattr__(name: str) -> object:
    if name in ("scan_routes", "load_render_unit"):
        from wren.pages import discovery

        return getattr(discovery, name)

    if name in ("define_route", "lazy_route"):
        from wren.pages import routes

        return getattr(routes, name)

    if name in ("LazyUnit", "RenderUnit"):
        from wren.pages import unit

        return getattr(unit, name)

    raise AttributeError(f"module 'wren.pages' has no attribute {name!r}")
