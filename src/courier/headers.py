from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple


class Headers:
    """Case-insensitive collection of HTTP headers.

    Header names are stored lower-cased. Adding a value to a name that is
    already present appends to its values instead of replacing them, so
    repeated headers keep the order in which they were added.
    """

    __slots__ = ("_headers",)

    def __init__(self):
        self._headers: Dict[str, List[str]] = {}

    def add(self, name: str, value: str):
        """Add a header value.

        Args:
            name: Header name, matched case-insensitively.
            value: Header value.

        Raises:
            TypeError: if the name or value is None.
        """
        if name is None:
            raise TypeError("header name may not be None")
        if value is None:
            raise TypeError("header value may not be None")
        self._headers.setdefault(name.lower(), []).append(value)

    def get(self, name: str) -> Tuple[str, ...]:
        """Returns all the values of a header, in insertion order.

        An empty tuple is returned if the header is not present.
        """
        if name is None:
            raise TypeError("header name may not be None")
        return tuple(self._headers.get(name.lower(), ()))

    def get_last(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Returns the most recently added value of a header, or the default
        value if the header is not present."""
        values = self._headers.get(name.lower())
        if not values:
            return default
        return values[-1]

    def names(self) -> FrozenSet[str]:
        """Returns the (lower-cased) names of all headers."""
        return frozenset(self._headers)

    def items(self) -> Iterator[Tuple[str, Tuple[str, ...]]]:
        """Iterate over (name, values) pairs in the order the names were
        first added."""
        for name, values in self._headers.items():
            yield name, tuple(values)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._headers))

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self):
        return f"Headers({self._headers!r})"
