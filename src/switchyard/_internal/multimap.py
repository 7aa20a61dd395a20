"""Read-only multi-valued string mapping.

Shared base for ``Headers``, ``QueryParams`` and ``FormData``: each key
maps to one or more values, ``obj[key]`` gives the first one.
"""

from collections.abc import Iterator, Mapping


class MultiValueMapping(Mapping[str, str]):
    """Read-only mapping of ``key -> [value, ...]``.

    Subclasses fill ``_values`` once in ``__init__`` and may override
    ``_key`` to normalize lookups (headers lower-case theirs).
    """

    __slots__ = ("_values",)

    _values: dict[str, list[str]]

    def _key(self, key: str) -> str:
        return key

    def __getitem__(self, key: str) -> str:
        return self._values[self._key(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._key(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{key!r}: {self[key]!r}" for key in self)
        return f"{type(self).__name__}({{{pairs}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        found = self._values.get(self._key(key))
        return found[0] if found else default

    def get_list(self, key: str) -> list[str]:
        """Every value for *key*, in the order received."""
        return list(self._values.get(self._key(key), ()))
