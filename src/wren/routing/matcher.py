"""First-match-wins path matching over a pre-sorted route list.

Callers sort the list once (see ``sort_routes``); matching never
reorders it.  Parameters bind raw path segments verbatim, with no
decoding beyond what the transport already did.
"""

from collections.abc import Iterable, Sequence

from wren.routing.route import RouteDefinition, RouteMatch, Segment


def match_route(routes: Iterable[RouteDefinition], pathname: str) -> RouteMatch | None:
    """Return the first route that structurally matches *pathname*.

    Examples::

        /about        matches "/about" only (not "/about/")
        /blog/:slug   matches "/blog/hello-world" -> {"slug": "hello-world"}
        /docs/*       matches "/docs/a/b" -> {"path": "a/b"}, "/docs/" -> {"path": ""}
    """
    if not pathname:
        pathname = "/"
    parts = pathname[1:].split("/") if pathname.startswith("/") else pathname.split("/")

    for route in routes:
        if not route.params:
            if route.path == pathname:
                return RouteMatch(route=route, params={})
            continue

        if route.is_catch_all:
            params = _match_catch_all(route.segments, parts)
        else:
            params = _match_segments(route.segments, parts)
        if params is not None:
            return RouteMatch(route=route, params=params)

    return None


def resolve_match(
    routes: Sequence[RouteDefinition],
    pathname: str,
    not_found_path: str = "/404",
) -> RouteMatch | None:
    """Match *pathname*, falling back to the designated not-found route."""
    match = match_route(routes, pathname)
    if match is not None:
        return match
    for route in routes:
        if route.path == not_found_path:
            return RouteMatch(route=route, params={})
    return None


def _match_segments(segments: Sequence[Segment], parts: Sequence[str]) -> dict[str, str] | None:
    """Match equal-length segment lists; returns bound params or ``None``."""
    if len(segments) != len(parts):
        return None
    params: dict[str, str] = {}
    for segment, part in zip(segments, parts, strict=True):
        if segment.kind == "param":
            if not part:
                return None
            params[segment.param_name or ""] = part
        elif segment.value != part:
            return None
    return params


def _match_catch_all(segments: Sequence[Segment], parts: Sequence[str]) -> dict[str, str] | None:
    """Match the fixed prefix, then bind the remainder to the catch-all name."""
    base, tail = segments[:-1], segments[-1]
    if len(parts) < len(base):
        return None
    params = _match_segments(base, parts[: len(base)])
    if params is None:
        return None
    params[tail.param_name or ""] = "/".join(parts[len(base) :])
    return params
