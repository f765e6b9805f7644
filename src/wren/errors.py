"""wren exception hierarchy.

Shared across the parser, render pipeline, client router, and static
site generator so every module raises and catches the same types.

Scan-time problems (``RouteParseError``, ``DuplicatePathError``) are
collected as messages rather than raised: a bad page file never aborts
the whole scan.  Request-time failures (``LoaderError``,
``RenderError``) are logged and converted to a generic 500 response.
Build-time failures (``MissingStaticPathsError``, ``StaticPathError``)
abort the static site generator.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when configuration, a route pattern, or a page module is unusable."""


@dataclass(frozen=True, slots=True)
class RouteParseError(WrenError):
    """A malformed route segment (empty parameter name, misplaced catch-all).

    Collected by the scanner, never raised by it.
    """

    source: str
    detail: str

    def __str__(self) -> str:
        return f"{self.source}: {self.detail}"


@dataclass(frozen=True, slots=True)
class DuplicatePathError(WrenError):
    """Two source files map to the same route pattern.

    Both routes stay in the table; the first in sort order wins matching.
    """

    path: str
    first: str
    second: str

    def __str__(self) -> str:
        return f"Duplicate route path: {self.path}\n  - {self.first}\n  - {self.second}"


@dataclass(frozen=True, slots=True)
class LoaderError(WrenError):
    """A page loader raised or returned an exception."""

    path: str
    cause: BaseException

    def __str__(self) -> str:
        return f"Loader error for {self.path}: {self.cause!r}"


@dataclass(frozen=True, slots=True)
class RenderError(WrenError):
    """Resolving or rendering a page's component tree failed."""

    path: str
    cause: BaseException

    def __str__(self) -> str:
        return f"Render error for {self.path}: {self.cause!r}"


class MissingStaticPathsError(WrenError):
    """A dynamic route is marked for prerendering without ``get_static_paths``."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Route {path} is dynamic but does not export get_static_paths")


class StaticPathError(WrenError):
    """A static path entry cannot be substituted into its route pattern."""
