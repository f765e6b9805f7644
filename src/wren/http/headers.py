"""Request headers as a read-only, case-insensitive mapping.

Built once from the raw ASGI header pairs; names are folded to lower
case and values decoded as latin-1 up front.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only request headers.

    Lookups ignore case and return the first value sent for a name.

    Usage::

        headers = Headers([(b"Host", b"example.com")])
        headers["host"]          # "example.com"
        headers.get("accept")    # None
    """

    __slots__ = ("_values",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        values: dict[str, str] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"
