"""Case-insensitive HTTP request headers.

Built from the raw ASGI byte pairs. Names are lower-cased once, at
construction; lookups lower-case the key they are given.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeAlias

from switchyard._internal.multimap import MultiValueMapping

RawHeaders: TypeAlias = tuple[tuple[bytes, bytes], ...]


class Headers(MultiValueMapping):
    """Immutable, case-insensitive headers.

    ``headers["Accept"]`` is the first ``accept`` line;
    ``headers.get_list("accept")`` is every one of them.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: RawHeaders = ()) -> None:
        values: dict[str, list[str]] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._values = values
        self._raw = raw

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> Headers:
        """Build headers from a plain ``{name: value}`` mapping."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            )
        )

    def _key(self, key: str) -> str:
        return key.lower()

    @property
    def raw(self) -> RawHeaders:
        """Header byte pairs as received from ASGI."""
        return self._raw
