from __future__ import annotations

import threading
from typing import ClassVar, Dict


class ContentType:
    """MIME type of a request or response body.

    Instances are interned: ContentType.of returns the same object for
    strings that are equal once lower-cased. Equality and hashing only
    depend on the normalized string, so instances built any other way
    still compare equal.
    """

    __slots__ = ("_type",)

    _interned: ClassVar[Dict[str, ContentType]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    JSON: ClassVar[ContentType]
    XML: ClassVar[ContentType]
    DUMMY: ClassVar[ContentType]
    TEXT_UTF8: ClassVar[ContentType]

    def __init__(self, type: str):
        if type is None:
            raise TypeError("content type may not be None")
        self._type = type.lower()

    @classmethod
    def of(cls, type: str) -> ContentType:
        """Returns the content type for a MIME type string such as
        "application/json; charset=utf-8"."""
        if type is None:
            raise TypeError("content type may not be None")
        key = type.lower()
        with cls._lock:
            try:
                return cls._interned[key]
            except KeyError:
                content_type = cls._interned[key] = cls(key)
                return content_type

    @property
    def type(self) -> str:
        return self._type

    def __str__(self):
        return self._type

    def __repr__(self):
        return f"ContentType({self._type!r})"

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, ContentType):
            return NotImplemented
        return self._type == other._type

    def __hash__(self):
        return hash(self._type)


ContentType.JSON = ContentType.of("application/json")
ContentType.XML = ContentType.of("application/xml")
ContentType.DUMMY = ContentType.of("application/*")
ContentType.TEXT_UTF8 = ContentType.of("text/plain; charset=utf-8")
