"""ASGI response sending: translates wren Responses to ASGI messages."""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from wren.http.response import Response

Send = Callable[[MutableMapping[str, Any]], Awaitable[None]]


def _body_allowed(status: int, method: str) -> bool:
    """Whether the response to *method* with *status* carries a body."""
    # 1xx, 204, 304 and HEAD responses have no message body.
    if method == "HEAD":
        return False
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    full_body = response.body_bytes
    body = full_body if _body_allowed(response.status, method) else b""

    # HEAD advertises the length a GET would have sent.
    length = len(full_body) if method == "HEAD" else len(body)
    raw_headers.append((b"content-length", str(length).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
