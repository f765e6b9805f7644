"""Document-head registry: ordered, token-keyed head fragments.

Two modes, chosen at creation:

- **server**: plain ordered accumulation, created per render and
  discarded.  ``subscribe()`` is a no-op.
- **client**: persistent; every mutation notifies subscribers
  synchronously, in the same call that mutated it.

Components contribute fragments by calling :func:`head` while they
render.  The active registry lives in a context variable set by
:func:`head_scope`, so concurrent server renders never share one.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Literal

from kida.template import Markup

HeadMode = Literal["server", "client"]

_token_counter = itertools.count(1)


@dataclass(frozen=True, slots=True, eq=False)
class HeadToken:
    """Opaque identity of one head registration site.

    Keyed tokens are equal whenever their keys match, so a second
    ``head(..., key="title")`` replaces the first in place instead of
    adding another entry.  Unkeyed tokens are unique per call.
    """

    id: int
    key: str | None = None

    @classmethod
    def new(cls, key: str | None = None) -> HeadToken:
        return cls(next(_token_counter), key)

    def _identity(self) -> tuple[str, int | str]:
        if self.key is not None:
            return ("key", self.key)
        return ("id", self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeadToken):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


class HeadRegistry:
    """Insertion-ordered mapping of :class:`HeadToken` to head fragment.

    Re-registering an existing token replaces its fragment in place;
    only a token that was unregistered and registered again moves to
    the end.  Fragments are opaque and reproduced verbatim.
    """

    __slots__ = ("_entries", "_listeners", "mode")

    def __init__(self, mode: HeadMode = "server") -> None:
        self.mode: HeadMode = mode
        self._entries: dict[Any, str] = {}
        self._listeners: list[Callable[[], None]] = []

    @classmethod
    def server(cls) -> HeadRegistry:
        return cls("server")

    @classmethod
    def client(cls) -> HeadRegistry:
        return cls("client")

    def register(self, token: Any, fragment: str) -> None:
        """Insert or replace the fragment for *token*."""
        self._entries[token] = fragment
        self._notify()

    def unregister(self, token: Any) -> None:
        """Remove *token*; unknown tokens are ignored."""
        if self._entries.pop(token, None) is not None:
            self._notify()

    def snapshot(self) -> list[str]:
        """Fragments in current insertion order."""
        return list(self._entries.values())

    def tokens(self) -> list[Any]:
        return list(self._entries)

    def render(self) -> str:
        """Concatenated snapshot markup."""
        return "".join(self._entries.values())

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Add a change listener; returns the matching unsubscribe callable."""
        if self.mode != "client":
            return _noop

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if self.mode != "client":
            return
        for listener in list(self._listeners):
            listener()

    def __len__(self) -> int:
        return len(self._entries)


def _noop() -> None:
    return None


# ---------------------------------------------------------------------------
# Render-time scope
# ---------------------------------------------------------------------------

_active_registry: ContextVar[HeadRegistry | None] = ContextVar("wren_head_registry", default=None)


@contextmanager
def head_scope(registry: HeadRegistry) -> Iterator[HeadRegistry]:
    """Make *registry* the target of :func:`head` calls for the block."""
    reset_token = _active_registry.set(registry)
    try:
        yield registry
    finally:
        _active_registry.reset(reset_token)


def head(*fragments: str, key: str | None = None) -> Markup:
    """Contribute head markup from inside a component or template.

    Returns empty markup so it can be called inline::

        def component(data, params):
            head(f"<title>{escape(data['title'])}</title>")
            return f"<h1>{escape(data['title'])}</h1>"

    In a kida template (``head`` is registered as a global)::

        {{ head("<title>Blog</title>") }}

    Outside an active scope the fragments are dropped.
    """
    registry = _active_registry.get()
    if registry is not None and fragments:
        registry.register(HeadToken.new(key), "".join(str(f) for f in fragments))
    return Markup("")


# ---------------------------------------------------------------------------
# Client session
# ---------------------------------------------------------------------------


class HeadSession:
    """Carries a persistent client registry across successive renders.

    Each render collects its fragments into a throwaway server-mode
    registry; :meth:`commit` then unregisters whatever the previous
    render contributed and did not contribute again, and registers the
    new entries.  Subscribers of the client registry see every change.
    """

    __slots__ = ("_committed", "registry")

    def __init__(self, registry: HeadRegistry) -> None:
        self.registry = registry
        self._committed: list[Any] = []

    def commit(self, staged: HeadRegistry) -> None:
        """Replace the previous render's entries with *staged*'s."""
        new_tokens = staged.tokens()
        keep = set(new_tokens)
        for token in self._committed:
            if token not in keep:
                self.registry.unregister(token)
        for token, fragment in zip(new_tokens, staged.snapshot(), strict=True):
            self.registry.register(token, fragment)
        self._committed = new_tokens
