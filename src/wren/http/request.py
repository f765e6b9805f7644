"""Immutable HTTP request built from an ASGI scope.

Only the metadata page rendering needs: method, path, headers, query,
and the absolute URL loaders receive.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any

from wren.http.headers import Headers
from wren.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata is frozen at creation; the body is never read because page
    rendering only serves ``GET``/``HEAD``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    scheme: str = "http"
    server: tuple[str, int] | None = None
    root_path: str = ""
    raw_path: str | None = None

    @property
    def host(self) -> str:
        """Host from the ``Host`` header, else the ASGI server address."""
        host = self.headers.get("host")
        if host:
            return host
        if self.server is not None:
            name, port = self.server
            default_port = 443 if self.scheme == "https" else 80
            return name if port == default_port else f"{name}:{port}"
        return "localhost"

    @property
    def url(self) -> str:
        """Absolute request URL including the query string.

        Built from the undecoded path when the server supplied one, so an
        escaped ``%3F`` or ``%23`` stays part of the path.
        """
        path = self.raw_path if self.raw_path is not None else self.path
        base = f"{self.scheme}://{self.host}{self.root_path}{path}"
        if self.query.raw:
            return f"{base}?{self.query.raw}"
        return base

    @classmethod
    def from_asgi(cls, scope: MutableMapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        server = scope.get("server")
        raw_path = scope.get("raw_path")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            scheme=scope.get("scheme", "http"),
            server=tuple(server) if server else None,
            root_path=scope.get("root_path", ""),
            raw_path=raw_path.partition(b"?")[0].decode("latin-1") if raw_path else None,
        )
