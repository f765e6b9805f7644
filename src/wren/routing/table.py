"""Immutable route table snapshots behind a single swappable reference.

The table is rebuilt wholesale when the pages tree changes and
published atomically; readers grab ``ref.current`` once per request and
never observe a half-built table.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from wren.routing.parser import sort_routes
from wren.routing.route import RouteDefinition


@dataclass(frozen=True, slots=True)
class RouteTable:
    """A sorted, immutable set of routes plus the errors found building it."""

    routes: tuple[RouteDefinition, ...] = ()
    errors: tuple[str, ...] = ()

    @classmethod
    def build(cls, routes: Iterable[RouteDefinition], errors: Iterable[str] = ()) -> RouteTable:
        """Sort *routes* by priority and freeze them into a table."""
        return cls(routes=tuple(sort_routes(routes)), errors=tuple(errors))

    def __iter__(self) -> Iterator[RouteDefinition]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    def __getitem__(self, index: int) -> RouteDefinition:
        return self.routes[index]

    def find(self, path: str) -> RouteDefinition | None:
        """Return the first route whose pattern is exactly *path*."""
        for route in self.routes:
            if route.path == path:
                return route
        return None


class RouteTableRef:
    """The one mutable slot holding the active :class:`RouteTable`.

    Usage::

        ref = RouteTableRef(scan_routes("pages"))
        table = ref.current          # readers
        ref.swap(new_table)          # writer, after a rescan
    """

    __slots__ = ("_lock", "_table")

    def __init__(self, table: RouteTable | None = None) -> None:
        self._lock = threading.Lock()
        self._table = table if table is not None else RouteTable()

    @property
    def current(self) -> RouteTable:
        return self._table

    def swap(self, table: RouteTable) -> RouteTable:
        """Publish *table*; returns the table it replaced."""
        with self._lock:
            previous = self._table
            self._table = table
        return previous
