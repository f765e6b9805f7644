"""Client-side head reconciliation.

The managed region of ``<head>`` sits between two marker tags::

    <meta data-wren-head="start">
    ...fragments...
    <meta data-wren-head="end">

Every notification recomputes the whole region from the registry
snapshot and replaces what sits between the markers.  Running it twice
with the same snapshot leaves the head unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Protocol

from wren.head.registry import HeadRegistry

HEAD_MARKER_ATTRIBUTE = "data-wren-head"
HEAD_MARKER_START = f'<meta {HEAD_MARKER_ATTRIBUTE}="start">'
HEAD_MARKER_END = f'<meta {HEAD_MARKER_ATTRIBUTE}="end">'

_START_RE = re.compile(rf'<meta\s+{HEAD_MARKER_ATTRIBUTE}="start"\s*/?>')
_END_RE = re.compile(rf'<meta\s+{HEAD_MARKER_ATTRIBUTE}="end"\s*/?>')


class HeadElement(Protocol):
    """The live ``<head>`` element, exposed as its inner markup."""

    inner_html: str


def reconcile_head(head_html: str, fragments: Sequence[str]) -> str:
    """Return *head_html* with the managed region replaced by *fragments*.

    Missing markers are appended; an end marker found before the start
    marker is dropped and re-created after it.
    """
    start = _START_RE.search(head_html)
    if start is None:
        head_html = _END_RE.sub("", head_html) + HEAD_MARKER_START + HEAD_MARKER_END
    elif _END_RE.search(head_html, start.end()) is None:
        prefix = _END_RE.sub("", head_html[: start.end()])
        head_html = prefix + HEAD_MARKER_END + head_html[start.end() :]

    start = _START_RE.search(head_html)
    assert start is not None
    end = _END_RE.search(head_html, start.end())
    assert end is not None
    return head_html[: start.end()] + "".join(fragments) + head_html[end.start() :]


def apply_head(element: HeadElement, fragments: Sequence[str]) -> None:
    """Reconcile the live head element against *fragments*."""
    updated = reconcile_head(element.inner_html, fragments)
    if updated != element.inner_html:
        element.inner_html = updated


class HeadSync:
    """Keeps a live head element in step with a client-mode registry."""

    __slots__ = ("_element", "_registry", "_unsubscribe")

    def __init__(self, registry: HeadRegistry, element: HeadElement) -> None:
        self._registry = registry
        self._element = element
        self.apply()
        self._unsubscribe: Callable[[], None] = registry.subscribe(self.apply)

    def apply(self) -> None:
        apply_head(self._element, self._registry.snapshot())

    def dispose(self) -> None:
        self._unsubscribe()
