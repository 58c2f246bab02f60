from typing import Any, Type


def type_name(cls: Type[Any]) -> str:
    """Returns the fully qualified name of a type, omitting the module for
    builtins."""
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", repr(cls))
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


class CourierError(Exception):
    """Base class for courier exceptions."""


class InvalidURLError(CourierError, ValueError):
    """The URL of a request could not be resolved."""


class MissingFieldError(CourierError, ValueError):
    """A request was built without one of its required fields."""


class MappingError(CourierError):
    """Base class for errors mapping entities to and from bytes."""

    type: Type[Any]

    def __init__(self, type: Type[Any], message: str):
        self.type = type
        super().__init__(message)


class NoSerializerError(MappingError, TypeError):
    """No serializer is registered for the type of a request entity."""

    def __init__(self, type: Type[Any]):
        super().__init__(
            type, f"There is no registered serializer for type '{type_name(type)}'"
        )


class NoDeserializerError(MappingError, TypeError):
    """No deserializer is registered for the requested entity type."""

    def __init__(self, type: Type[Any]):
        super().__init__(
            type, f"Could not deserialize response into type '{type_name(type)}'"
        )


class TransportError(CourierError, ConnectionError):
    """The network exchange failed. The underlying transport error is
    available as __cause__."""
