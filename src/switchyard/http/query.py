"""Query string parameters.

Repeated keys keep every value (``get_list``); blank values such as
``?q=`` are kept as empty strings, so ``"q" in query`` is true.
"""

from urllib.parse import parse_qsl

from switchyard._internal.multimap import MultiValueMapping


class QueryParams(MultiValueMapping):
    """Immutable, parsed query string.

    ::

        query = QueryParams(b"tag=a&tag=b&page=2")
        query["tag"]            # "a"
        query.get_list("tag")   # ["a", "b"]
        query.raw               # b"tag=a&tag=b&page=2"
    """

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        values: dict[str, list[str]] = {}
        for key, value in parse_qsl(query_string.decode("latin-1"), keep_blank_values=True):
            values.setdefault(key, []).append(value)
        self._values = values
        self._raw = query_string

    @property
    def raw(self) -> bytes:
        """The query string as received, undecoded."""
        return self._raw
