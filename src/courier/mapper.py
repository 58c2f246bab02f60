"""Registry of entity serializers and deserializers.

An EntityMapper converts request entities to bytes and response bodies
back to application objects. Serializers are looked up by the runtime type
of the entity; deserializers by the type the caller asks for. Both are
registered explicitly, one per type, and the last registration wins.

Registration is not synchronized: register everything up front, then share
the mapper between any number of concurrent requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Optional,
    Protocol,
    Type,
    TypeVar,
    Union,
    runtime_checkable,
)

from courier.content_type import ContentType
from courier.error import type_name

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
T_contra = TypeVar("T_contra", contravariant=True)

FALLBACK_CHARSET = "ascii"


@runtime_checkable
class EntitySerializer(Protocol[T_contra]):
    """Serializer for request entities."""

    @property
    def content_type(self) -> ContentType:
        """Content type of the bytes produced by serialize."""
        ...

    def serialize(self, entity: T_contra) -> bytes: ...


class EntityDeserializer(Protocol[T_co]):
    """Deserializer for response bodies.

    The content type is the one declared by the response, or None when the
    response did not declare any.
    """

    def __call__(self, content_type: Optional[ContentType], body: bytes) -> T_co: ...


@dataclass(frozen=True)
class Serializer(Generic[T]):
    """Adapts a plain function into an EntitySerializer."""

    content_type: ContentType
    func: Callable[[T], bytes]

    def serialize(self, entity: T) -> bytes:
        return self.func(entity)


def charset_for(content_type: Optional[ContentType]) -> str:
    """Returns the character set used to decode a body of the given content
    type.

    The declared type is only searched for "utf-8" and "utf-16"; anything
    else, including a missing content type, falls back to ASCII.
    """
    if content_type is not None:
        declared = str(content_type).lower()
        if "utf-8" in declared:
            return "utf-8"
        if "utf-16" in declared:
            return "utf-16"
    return FALLBACK_CHARSET


def decode_text(content_type: Optional[ContentType], body: bytes) -> str:
    # Undecodable bytes become U+FFFD rather than failing the whole body.
    return body.decode(charset_for(content_type), errors="replace")


def encode_text(text: str) -> bytes:
    return text.encode("utf-8")


STRING_SERIALIZER: Serializer[str] = Serializer(ContentType.TEXT_UTF8, encode_text)


class EntityMapper:
    """Maps application types to serializers and deserializers."""

    __slots__ = ("_serializers", "_deserializers")

    def __init__(self):
        self._serializers: Dict[type, EntitySerializer[Any]] = {}
        self._deserializers: Dict[type, EntityDeserializer[Any]] = {}

    @classmethod
    def new_instance(cls) -> EntityMapper:
        """Returns a mapper that already knows how to map strings."""
        mapper = cls()
        mapper.register_serializer(str, STRING_SERIALIZER)
        mapper.register_deserializer(str, decode_text)
        return mapper

    def register_serializer(
        self,
        type: Type[T],
        serializer: Union[EntitySerializer[T], Serializer[T]],
    ) -> EntityMapper:
        """Register the serializer of a type, replacing any previous one.

        Args:
            type: Type of the entities handled by the serializer. The
                serializer also applies to subclasses that have no
                serializer of their own.
            serializer: Serializer producing the request body.

        Returns:
            The mapper, so registrations can be chained.
        """
        if type is None:
            raise TypeError("type may not be None")
        if serializer is None:
            raise TypeError("serializer may not be None")
        if type in self._serializers:
            logger.debug("replacing serializer for type %s", type_name(type))
        self._serializers[type] = serializer
        return self

    def register_deserializer(
        self, type: Type[T], deserializer: EntityDeserializer[T]
    ) -> EntityMapper:
        """Register the deserializer of a type, replacing any previous one.

        Args:
            type: Type produced by the deserializer.
            deserializer: Callable receiving the declared content type (or
                None) and the raw response body.

        Returns:
            The mapper, so registrations can be chained.
        """
        if type is None:
            raise TypeError("type may not be None")
        if deserializer is None:
            raise TypeError("deserializer may not be None")
        if type in self._deserializers:
            logger.debug("replacing deserializer for type %s", type_name(type))
        self._deserializers[type] = deserializer
        return self

    def get_serializer(self, type: Type[T]) -> Optional[EntitySerializer[T]]:
        """Returns the serializer for a type, or None if there is none."""
        for cls in getattr(type, "__mro__", (type,)):
            try:
                return self._serializers[cls]
            except KeyError:
                pass
        return None

    def get_deserializer(self, type: Type[T]) -> Optional[EntityDeserializer[T]]:
        """Returns the deserializer for a type, or None if there is none."""
        return self._deserializers.get(type)
