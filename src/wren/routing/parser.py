"""Route parsing: file paths and URL patterns to route definitions.

File naming conventions (relative to the pages directory)::

    index.py                 -> /
    about.py                 -> /about
    blog/index.py            -> /blog
    blog/[slug].py           -> /blog/:slug
    docs/[...path].py        -> /docs/*
    (admin)/dashboard.py     -> /dashboard

Malformed segments are recorded as error strings and never raised, so
one bad file cannot abort a scan.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import PurePath

from wren.errors import ConfigurationError, DuplicatePathError, RouteParseError
from wren.routing.route import RouteDefinition, Segment

# Weight per segment kind; depth adds 100 per segment on top
_SEGMENT_WEIGHTS = {"static": 10, "param": 5, "catch_all": 1}

# Trailing file extension (".py", ".html"); "[...path]" has none
_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]+$")


@dataclass(frozen=True, slots=True)
class ParsedRoute:
    """A parsed route plus the non-fatal errors found while parsing it."""

    route: RouteDefinition
    errors: tuple[str, ...] = ()


def calculate_priority(segments: Sequence[Segment]) -> int:
    """Match-ordering weight: deeper and more static patterns sort first."""
    priority = 100 * len(segments)
    for segment in segments:
        priority += _SEGMENT_WEIGHTS[segment.kind]
    return priority


def build_path(segments: Sequence[Segment]) -> str:
    """Join segment values into a canonical pattern string."""
    return "/" + "/".join(s.value for s in segments)


def parse_route(file_path: str | PurePath, pages_dir: str | PurePath | None = None) -> ParsedRoute:
    """Parse one page file path into a route definition.

    Args:
        file_path: Path of the page file.  Relative paths are taken as
            relative to the pages directory already.
        pages_dir: The routing root; when given, *file_path* is made
            relative to it first.

    Returns:
        A :class:`ParsedRoute` with the route and any collected errors.
    """
    path = PurePath(file_path)
    relative = PurePath(os.path.relpath(path, pages_dir)) if pages_dir is not None else path
    parts = [p for p in relative.parts if p not in ("", ".")]
    if parts:
        parts[-1] = _EXTENSION_RE.sub("", parts[-1])
    source = str(file_path)

    errors: list[str] = []
    segments: list[Segment] = []
    is_index = False

    for i, part in enumerate(parts):
        # Route groups: (admin) -> no URL contribution
        if part.startswith("(") and part.endswith(")"):
            continue

        if part == "index":
            is_index = True
            continue

        if part.startswith("[...") and part.endswith("]"):
            name = part[4:-1]
            if not name:
                errors.append(str(RouteParseError(source, f"Invalid catch-all segment: {part}")))
                continue
            segments.append(Segment.catch_all(name))
            if i != len(parts) - 1:
                errors.append(
                    str(RouteParseError(source, "Catch-all parameter must be the last segment"))
                )
            continue

        if part.startswith("[") and part.endswith("]"):
            name = part[1:-1]
            if not name:
                errors.append(str(RouteParseError(source, f"Invalid parameter segment: {part}")))
                continue
            segments.append(Segment.param(name))
            continue

        segments.append(Segment.static(part))

    route = _make_route(segments, source=source, is_index=is_index)
    return ParsedRoute(route=route, errors=tuple(errors))


def parse_pattern(pattern: str, *, source: str | None = None) -> RouteDefinition:
    """Parse a URL pattern string into a route definition.

    Used for route tables built in code rather than discovered::

        "/"              -> no segments
        "/blog/:slug"    -> static("blog"), param("slug")
        "/docs/*path"    -> static("docs"), catch_all("path")
        "/docs/*"        -> same; a bare "*" binds "path"

    Raises:
        ConfigurationError: For empty parameter names, non-final
            catch-alls, or a pattern without a leading slash.
    """
    if not pattern.startswith("/"):
        msg = f"Route pattern must start with '/': {pattern!r}"
        raise ConfigurationError(msg)

    parts = pattern[1:].split("/") if pattern != "/" else []
    segments: list[Segment] = []
    for i, part in enumerate(parts):
        if part.startswith(":"):
            if len(part) == 1:
                msg = f"Empty parameter name in route pattern {pattern!r}"
                raise ConfigurationError(msg)
            segments.append(Segment.param(part[1:]))
        elif part.startswith("*"):
            if i != len(parts) - 1:
                msg = f"Catch-all must be the last segment in {pattern!r}"
                raise ConfigurationError(msg)
            segments.append(Segment.catch_all(part[1:] or "path"))
        else:
            segments.append(Segment.static(part))

    return _make_route(segments, source=source or pattern, is_index=False)


def _make_route(segments: Sequence[Segment], *, source: str, is_index: bool) -> RouteDefinition:
    params = tuple(s.param_name for s in segments if s.param_name is not None)
    return RouteDefinition(
        path=build_path(segments),
        segments=tuple(segments),
        params=params,
        is_catch_all=any(s.kind == "catch_all" for s in segments),
        is_index=is_index,
        priority=calculate_priority(segments),
        source=source,
    )


def sort_routes(routes: Iterable[RouteDefinition]) -> list[RouteDefinition]:
    """Sort routes for first-match-wins lookup.

    Higher priority first; equal priorities fall back to the pattern
    string so the order is stable across scans.
    """
    return sorted(routes, key=lambda r: (-r.priority, r.path))


def validate_routes(routes: Iterable[RouteDefinition]) -> list[str]:
    """Report patterns claimed by more than one source file."""
    errors: list[str] = []
    seen: dict[str, RouteDefinition] = {}
    for route in routes:
        existing = seen.get(route.path)
        if existing is not None:
            errors.append(str(DuplicatePathError(route.path, existing.source, route.source)))
        else:
            seen[route.path] = route
    return errors
