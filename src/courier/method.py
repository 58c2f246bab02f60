import enum


@enum.unique
class HttpMethod(str, enum.Enum):
    """HTTP methods supported by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    HEAD = "HEAD"
    DELETE = "DELETE"

    def __repr__(self):
        return self.name

    def __str__(self):
        return self.name

    @property
    def has_body(self) -> bool:
        """Whether a response to this method carries an entity."""
        return self is not HttpMethod.HEAD


HttpMethod.GET.__doc__ = "Retrieve a resource"
HttpMethod.POST.__doc__ = "Submit data to be processed"
HttpMethod.PUT.__doc__ = "Store data on a remote resource"
HttpMethod.PATCH.__doc__ = "Partially modify a remote resource"
HttpMethod.HEAD.__doc__ = "Retrieve the headers of a resource, without its entity"
HttpMethod.DELETE.__doc__ = "Delete a remote resource"
