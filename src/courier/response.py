from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Type, TypeVar

from courier.content_type import ContentType
from courier.error import NoDeserializerError
from courier.headers import Headers
from courier.mapper import EntityMapper

T = TypeVar("T")


@dataclass(frozen=True)
class HttpResponse:
    """Response to an HTTP request.

    The body is kept as the bytes received: a compressed body, sent when the
    request asked for one with Accept-Encoding, is not decompressed. It is
    mapped to an application object on demand by entity(), using the mapper
    of the request; the result is not cached.
    """

    status_code: int
    status: str
    headers: Headers
    mapper: EntityMapper = field(repr=False)
    raw_body: bytes = b""

    @property
    def content_type(self) -> Optional[ContentType]:
        """Content type declared by the response, if any."""
        declared = self.headers.get_last("Content-Type")
        if declared is None:
            return None
        return ContentType.of(declared)

    def entity(self, type: Type[T]) -> T:
        """Map the response body to an object of the given type.

        Args:
            type: Type of the entity; a deserializer must be registered for
                it in the mapper of the request.

        Returns:
            The deserialized entity.

        Raises:
            NoDeserializerError: if no deserializer is registered for the type.
        """
        deserializer = self.mapper.get_deserializer(type)
        if deserializer is None:
            raise NoDeserializerError(type)
        return deserializer(self.content_type, self.raw_body)
