"""Route tables declared in code instead of discovered from files."""

from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

from wren.pages.unit import Component, LazyUnit, RenderUnit, UnitLoader, as_head_fragments
from wren.routing.parser import parse_pattern
from wren.routing.route import RouteDefinition


def define_route(
    path: str,
    component: Component,
    *,
    loader: Callable[..., Any] | None = None,
    layouts: Sequence[Component] = (),
    prerender: bool = False,
    client_only: bool = False,
    get_static_paths: Callable[[], Any] | None = None,
    head: str | Sequence[str] | None = None,
    source: str | None = None,
) -> RouteDefinition:
    """Build a route whose render unit is already resolved.

    Usage::

        routes = [
            define_route("/", home),
            define_route("/blog/:slug", post, loader=load_post, layouts=[shell]),
        ]
    """
    unit = RenderUnit(
        component=component,
        loader=loader,
        get_static_paths=get_static_paths,
        prerender=prerender,
        client_only=client_only,
        layouts=tuple(layouts),
        head=as_head_fragments(head),
    )
    route = parse_pattern(path, source=source)
    return replace(
        route,
        has_loader=loader is not None,
        has_static_paths=get_static_paths is not None,
        has_prerender=prerender,
        unit=LazyUnit.resolved(unit),
    )


def lazy_route(path: str, load: UnitLoader, *, source: str | None = None) -> RouteDefinition:
    """Build a route whose render unit is produced by *load* on first use.

    *load* may be sync or async and runs at most once per process
    unless it fails.
    """
    return replace(parse_pattern(path, source=source), unit=LazyUnit(load))
