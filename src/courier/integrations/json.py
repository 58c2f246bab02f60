"""JSON entities, encoded with the standard json module.

Example::

    mapper = EntityMapper.new_instance()
    courier.integrations.json.register(mapper, dict)
"""

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, Type, TypeVar

from courier.content_type import ContentType
from courier.mapper import EntityMapper, decode_text

T = TypeVar("T")

JSON_UTF8 = ContentType.of("application/json; charset=utf-8")

# Types that json.loads produces directly, which are returned as-is.
_NATIVE_TYPES = (object, dict, list, str, int, float, bool)


@dataclass(frozen=True)
class JsonSerializer(Generic[T]):
    """Serializes entities to UTF-8 encoded JSON. Dataclass instances are
    encoded as objects."""

    default: Optional[Callable[[Any], Any]] = field(default=None)

    @property
    def content_type(self) -> ContentType:
        return JSON_UTF8

    def serialize(self, entity: T) -> bytes:
        if dataclasses.is_dataclass(entity) and not isinstance(entity, type):
            return json.dumps(dataclasses.asdict(entity), default=self.default).encode(
                "utf-8"
            )
        return json.dumps(entity, default=self.default).encode("utf-8")


@dataclass(frozen=True)
class JsonDeserializer(Generic[T]):
    """Deserializes JSON response bodies.

    Objects are converted to the target type by passing their members as
    keyword arguments, unless the target is one of the types json produces
    natively.
    """

    type: Type[T]

    def __call__(self, content_type: Optional[ContentType], body: bytes) -> T:
        payload = json.loads(decode_text(content_type, body))
        if self.type in _NATIVE_TYPES:
            if self.type is not object and not isinstance(payload, self.type):
                raise TypeError(
                    f"expected JSON {self.type.__name__}, got {type(payload).__name__}"
                )
            return payload
        if not isinstance(payload, dict):
            raise TypeError(
                f"cannot build {self.type.__name__} from JSON {type(payload).__name__}"
            )
        return self.type(**payload)


def serializer(cls: Type[T], default: Optional[Callable[[Any], Any]] = None):
    """Returns a JSON serializer for entities of the given type.

    Args:
        cls: Type of the entities, only used for typing.
        default: Passed to json.dumps to encode objects it does not support.
    """
    return JsonSerializer(default=default)


def deserializer(cls: Type[T]) -> JsonDeserializer[T]:
    """Returns a JSON deserializer producing objects of the given type."""
    return JsonDeserializer(cls)


def register(
    mapper: EntityMapper, cls: Type[T], default: Optional[Callable[[Any], Any]] = None
) -> EntityMapper:
    """Register a JSON serializer and deserializer for a type."""
    mapper.register_serializer(cls, serializer(cls, default))
    return mapper.register_deserializer(cls, deserializer(cls))
