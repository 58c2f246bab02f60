"""HTTP client mapping request and response bodies to application objects."""

from courier.client import (
    ClientBuilder,
    ClientSettings,
    HttpClient,
    WrappedRequestBuilder,
)
from courier.content_type import ContentType
from courier.error import (
    CourierError,
    InvalidURLError,
    MappingError,
    MissingFieldError,
    NoDeserializerError,
    NoSerializerError,
    TransportError,
)
from courier.headers import Headers
from courier.mapper import (
    EntityDeserializer,
    EntityMapper,
    EntitySerializer,
    Serializer,
)
from courier.method import HttpMethod
from courier.response import HttpResponse

__all__ = [
    "ClientBuilder",
    "ClientSettings",
    "ContentType",
    "CourierError",
    "EntityDeserializer",
    "EntityMapper",
    "EntitySerializer",
    "Headers",
    "HttpClient",
    "HttpMethod",
    "HttpResponse",
    "InvalidURLError",
    "MappingError",
    "MissingFieldError",
    "NoDeserializerError",
    "NoSerializerError",
    "Serializer",
    "TransportError",
    "WrappedRequestBuilder",
]
