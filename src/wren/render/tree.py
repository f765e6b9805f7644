"""Component trees: page elements wrapped in their layout chain.

A tree is a chain of :class:`Element` nodes.  The page is the innermost
node; each layout wraps the node below it and receives the rendered
child as ``children`` markup.  :class:`HeadBoundary` nodes scope head
registration for the subtree they wrap.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from kida.template import Markup

from wren.head.registry import HeadRegistry, HeadSession, HeadToken, head_scope
from wren.pages.unit import Component, RenderUnit


@dataclass(frozen=True, slots=True)
class Element:
    """A component with its props and, for layouts, the wrapped child."""

    component: Component
    props: Mapping[str, Any] = field(default_factory=dict)
    child: Node | None = None


@dataclass(frozen=True, slots=True)
class HeadBoundary:
    """Renders *child* and commits its head fragments to a client session.

    *head* holds fragments declared statically by the page; they are
    registered ahead of anything the tree contributes.
    """

    session: HeadSession
    child: Node
    head: tuple[str, ...] = ()


Node = Element | HeadBoundary


def compose_layouts(page: Element, layouts: Sequence[Component]) -> Element:
    """Fold *layouts* (root first) around *page*, root layout outermost."""
    tree = page
    for layout in reversed(layouts):
        tree = Element(layout, child=tree)
    return tree


def create_page_element(unit: RenderUnit, data: Any, params: Mapping[str, str]) -> Element:
    """Build the full tree for a resolved page."""
    page = Element(unit.component, {"data": data, "params": dict(params)})
    return compose_layouts(page, unit.layouts)


def render_to_markup(node: Node) -> str:
    """Render a tree to markup, innermost node first."""
    if isinstance(node, HeadBoundary):
        staged = HeadRegistry.server()
        with head_scope(staged):
            for fragment in node.head:
                staged.register(HeadToken.new(), fragment)
            html = render_to_markup(node.child)
        node.session.commit(staged)
        return html

    if node.child is None:
        result = node.component(**node.props)
    else:
        children = Markup(render_to_markup(node.child))
        result = node.component(children=children, **node.props)
    return "" if result is None else str(result)
