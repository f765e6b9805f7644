"""Segment, RouteDefinition, and RouteMatch frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from wren.pages.unit import LazyUnit

if TYPE_CHECKING:
    from wren.pages.unit import RenderUnit

SegmentKind = Literal["static", "param", "catch_all"]


@dataclass(frozen=True, slots=True)
class Segment:
    """A parsed segment of a route pattern.

    Static:    ``blog``    (kind="static")
    Param:     ``:slug``   (kind="param", param_name="slug")
    Catch-all: ``*``       (kind="catch_all", param_name="path")
    """

    kind: SegmentKind
    value: str
    param_name: str | None = None

    @classmethod
    def static(cls, text: str) -> Segment:
        return cls("static", text)

    @classmethod
    def param(cls, name: str) -> Segment:
        return cls("param", f":{name}", name)

    @classmethod
    def catch_all(cls, name: str) -> Segment:
        return cls("catch_all", "*", name)


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A routable page.

    Created once when the route table is built.  Everything except the
    lazy render-unit cell is immutable; the cell resolves at most once
    per process and is shared by every caller.

    Attributes:
        path: Canonical pattern, e.g. ``/blog/:slug`` or ``/docs/*``.
        segments: Parsed segments; a catch-all can only be last.
        params: Parameter names in pattern order.
        is_catch_all: Whether the last segment is a catch-all.
        is_index: Whether the source file was an ``index`` page.
        priority: Match ordering weight, derived from ``segments``.
        source: Opaque source key (page file path or caller label).
        layouts: Layout source keys, root-first.
        has_loader: Scan-time hint: the module defines ``loader``.
        has_static_paths: Scan-time hint: the module defines ``get_static_paths``.
        has_prerender: Scan-time hint: the module defines ``prerender``.
        unit: Lazy render-unit cell.
    """

    path: str
    segments: tuple[Segment, ...]
    params: tuple[str, ...]
    is_catch_all: bool
    is_index: bool
    priority: int
    source: str
    layouts: tuple[str, ...] = ()
    has_loader: bool = False
    has_static_paths: bool = False
    has_prerender: bool = False
    unit: LazyUnit = field(default_factory=LazyUnit.missing, compare=False, repr=False)

    @property
    def is_dynamic(self) -> bool:
        """True when the pattern contains a parameter or catch-all."""
        return bool(self.params)

    @property
    def prerender(self) -> bool | None:
        """Prerender flag, or ``None`` until the render unit is resolved."""
        unit = self.unit.peek()
        return None if unit is None else unit.prerender

    @property
    def client_only(self) -> bool | None:
        """Client-only flag, or ``None`` until the render unit is resolved."""
        unit = self.unit.peek()
        return None if unit is None else unit.client_only

    async def resolve(self) -> RenderUnit:
        """Resolve (or return the cached) render unit for this route."""
        return await self.unit.resolve()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: RouteDefinition
    params: dict[str, str]
