"""The browser surface the client router drives.

The router never touches a real DOM.  It talks to a :class:`Browser`
(location, history, scrolling, element lookup, event listeners) and a
:class:`MountAdapter` (hydrate or create a component mount on the root
element).  :mod:`wren.testing` provides in-memory implementations; a
browser runtime supplies its own.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final, Protocol

from wren.head.dom import HeadElement
from wren.render.tree import Node, render_to_markup


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()
"""Marker for "no initial data was injected" (distinct from ``None``)."""


class DomElement(Protocol):
    """An element the router renders into or scrolls to."""

    inner_html: str

    def scroll_into_view(self) -> None: ...


EventHandler = Callable[[Any], None]


class Browser(Protocol):
    """Location, history, and event plumbing of one document."""

    @property
    def href(self) -> str:
        """Absolute URL of the current location."""
        ...

    @property
    def initial_data(self) -> Any:
        """Data injected by the server render, or :data:`UNSET`."""
        ...

    @property
    def head(self) -> HeadElement | None: ...

    def push_state(self, url: str) -> None: ...

    def replace_state(self, url: str) -> None: ...

    def assign(self, url: str) -> None:
        """Full document navigation."""
        ...

    def scroll_to(self, x: int, y: int) -> None: ...

    def get_element_by_id(self, element_id: str) -> DomElement | None: ...

    def add_event_listener(self, event_type: str, handler: EventHandler) -> None: ...

    def remove_event_listener(self, event_type: str, handler: EventHandler) -> None: ...


class Mount(Protocol):
    """A live component root that can be re-rendered."""

    def render(self, tree: Node) -> None: ...


class MountAdapter(Protocol):
    """Creates mounts: hydrating server markup or rendering from scratch."""

    def hydrate(self, element: DomElement, tree: Node) -> Mount: ...

    def create(self, element: DomElement) -> Mount: ...


@dataclass(frozen=True, slots=True)
class Anchor:
    """The ``<a>`` element an event originated from."""

    href: str
    target: str = ""
    download: bool = False
    rel: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ClickEvent:
    """A click as the router sees it."""

    anchor: Anchor | None
    button: int = 0
    meta_key: bool = False
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """``mouseover``/``focusin``/``touchstart`` on a possible link."""

    anchor: Anchor | None


@dataclass(frozen=True, slots=True)
class PopStateEvent:
    """History traversal (back/forward)."""

    state: Any = None


class MarkupMount:
    """Mount that re-renders the tree to markup into the root element."""

    __slots__ = ("element",)

    def __init__(self, element: DomElement) -> None:
        self.element = element

    def render(self, tree: Node) -> None:
        self.element.inner_html = render_to_markup(tree)


class MarkupMountAdapter:
    """Mount adapter for plain markup components.

    Hydration renders the tree once so head fragments and the mount
    are attached; the server markup is replaced only if it differs.
    """

    def hydrate(self, element: DomElement, tree: Node) -> MarkupMount:
        html = render_to_markup(tree)
        if element.inner_html != html:
            element.inner_html = html
        return MarkupMount(element)

    def create(self, element: DomElement) -> MarkupMount:
        return MarkupMount(element)
