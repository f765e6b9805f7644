"""Render units and their lazy, shared, at-most-once resolution.

A route's render unit (component, loader, layouts, flags) is loaded
the first time the route is rendered or prefetched.  Resolution is the
only shared mutable state per route, modeled as a tagged variant::

    Unresolved  ->  Resolving(future)  ->  Resolved(unit)
         ^                |
         +----- failure --+

The transition out of ``Unresolved`` happens under a lock, so exactly
one caller runs the load; everyone else awaits the same future.  The
future is a ``concurrent.futures.Future`` so callers on other threads
or event loops can share it through ``asyncio.wrap_future``.  A failed
load resets the cell so a later caller retries.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import threading
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from wren.errors import ConfigurationError

# Page component: called with ``data`` and ``params`` keywords, returns markup.
# Layout component: called with ``children`` markup, returns markup.
Component = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class RenderUnit:
    """The lazily loaded bundle behind a route.

    Attributes:
        component: Page component.
        loader: Optional data loader, called with a ``LoaderContext``.
        get_static_paths: Optional enumerator of parameter sets for
            prerendering dynamic routes.
        prerender: Whether the static site generator renders this page.
        client_only: Whether the page renders only in the browser.
        layouts: Layout components, root (outermost) first.
        head: Head fragments declared statically by the page module.
    """

    component: Component
    loader: Callable[..., Any] | None = None
    get_static_paths: Callable[[], Any] | None = None
    prerender: bool = False
    client_only: bool = False
    layouts: tuple[Component, ...] = ()
    head: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Unresolved:
    """No load has started (or the last one failed)."""


@dataclass(frozen=True, slots=True)
class Resolving:
    """A load is in flight; concurrent callers share ``future``."""

    future: concurrent.futures.Future[RenderUnit]


@dataclass(frozen=True, slots=True)
class Resolved:
    """The unit is loaded and cached for the process lifetime."""

    unit: RenderUnit


ResolutionState = Unresolved | Resolving | Resolved

UnitLoader = Callable[[], RenderUnit | Awaitable[RenderUnit]]


def _missing_unit() -> RenderUnit:
    msg = "Route has no render unit loader."
    raise ConfigurationError(msg)


class LazyUnit:
    """Resolution cell for one route's render unit.

    Usage::

        cell = LazyUnit(lambda: load_render_unit(page_file, layout_files))
        unit = await cell.resolve()   # loads once
        unit = await cell.resolve()   # cached
    """

    __slots__ = ("_load", "_lock", "_state")

    def __init__(self, load: UnitLoader) -> None:
        self._load = load
        self._lock = threading.Lock()
        self._state: ResolutionState = Unresolved()

    @classmethod
    def resolved(cls, unit: RenderUnit) -> LazyUnit:
        """Build a cell that is already resolved to *unit*."""
        cell = cls(lambda: unit)
        cell._state = Resolved(unit)
        return cell

    @classmethod
    def missing(cls) -> LazyUnit:
        """Build a cell whose resolution fails with ``ConfigurationError``."""
        return cls(_missing_unit)

    @property
    def state(self) -> ResolutionState:
        return self._state

    def peek(self) -> RenderUnit | None:
        """Return the resolved unit without loading, or ``None``."""
        state = self._state
        if isinstance(state, Resolved):
            return state.unit
        return None

    async def resolve(self) -> RenderUnit:
        """Return the render unit, loading it on first use."""
        with self._lock:
            state = self._state
            if isinstance(state, Resolved):
                return state.unit
            if isinstance(state, Resolving):
                future = state.future
                owner = False
            else:
                future = concurrent.futures.Future()
                # A running future can no longer be cancelled by a waiter.
                future.set_running_or_notify_cancel()
                self._state = Resolving(future)
                owner = True

        if not owner:
            return await asyncio.shield(asyncio.wrap_future(future))

        try:
            result = self._load()
            if inspect.isawaitable(result):
                result = await result
        except BaseException as exc:
            with self._lock:
                self._state = Unresolved()
            future.set_exception(exc)
            raise

        with self._lock:
            self._state = Resolved(result)
        future.set_result(result)
        return result


def as_head_fragments(value: str | Sequence[str] | None) -> tuple[str, ...]:
    """Normalize a module-level ``head`` declaration to a tuple of fragments."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)
