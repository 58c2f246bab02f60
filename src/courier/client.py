from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit

import httpx
from typing_extensions import TypeAlias

from courier.config import BASE_URL_ENVVAR, NamedValueFromEnvironment
from courier.config import read_timeout as read_timeout_setting
from courier.error import InvalidURLError
from courier.mapper import EntityMapper
from courier.method import HttpMethod
from courier.request import ExceptionHandler, HttpRequest, InputSupplier
from courier.response import HttpResponse

logger = logging.getLogger(__name__)

ResponseHandler: TypeAlias = Callable[[HttpResponse], None]

Decorator: TypeAlias = Callable[["WrappedRequestBuilder"], None]
"""A decorator is invoked with every request builder of a client before the
request executes. It may add headers or otherwise change the request.
"""


def _ignore(response: HttpResponse):
    pass


class ClientSettings:
    """Settings that change the behaviour of an HttpClient."""

    __slots__ = ("base_url", "mapper", "read_timeout", "transport", "_decorators")

    def __init__(
        self,
        base_url: Optional[str] = None,
        mapper: Optional[EntityMapper] = None,
        decorators: Iterable[Decorator] = (),
        read_timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        url = NamedValueFromEnvironment(BASE_URL_ENVVAR, "base_url", base_url)
        self.base_url = url.value[:-1] if url.value.endswith("/") else url.value
        self.mapper = mapper
        self.read_timeout = read_timeout_setting(read_timeout)
        self.transport = transport
        self._decorators: List[Decorator] = []
        for decorator in decorators:
            self.add_decorator(decorator)

    @property
    def decorators(self) -> Tuple[Decorator, ...]:
        return tuple(self._decorators)

    def add_decorator(self, decorator: Decorator):
        if decorator is None:
            raise TypeError("decorator may not be None")
        self._decorators.append(decorator)

    def resolve(self, path: str) -> str:
        """Returns the URL of a path relative to the base URL.

        Raises:
            InvalidURLError: if the resulting URL is not an absolute http(s) URL.
        """
        if path.startswith("/"):
            path = path[1:]
        url = self.base_url + "/" + path
        result = urlsplit(url)
        if result.scheme not in ("http", "https"):
            raise InvalidURLError(f"invalid URL scheme: '{url}'")
        if not result.netloc:
            raise InvalidURLError(f"missing host in URL: '{url}'")
        return url


class HttpClient:
    """HTTP client mapping request and response bodies to application objects.

    Example::

        client = HttpClient(base_url="https://example.com")
        response = (
            client.post("/echo")
            .with_input(lambda: "hello")
            .on_status(200, lambda r: print(r.entity(str)))
            .execute()
        )
    """

    __slots__ = ("settings", "_mapper")

    def __init__(
        self,
        base_url: Optional[str] = None,
        mapper: Optional[EntityMapper] = None,
        decorators: Iterable[Decorator] = (),
        read_timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Create a new client.

        Args:
            base_url: URL prepended to the path of every request. Uses the value
                of the COURIER_BASE_URL environment variable by default.

            mapper: Entity mapper used by all requests unless overridden per
                request. Defaults to the client's own mapper, which maps
                strings.

            decorators: Callables invoked with every request builder before
                the request executes, in order.

            read_timeout: Read timeout of every exchange, in seconds. Uses the
                value of the COURIER_READ_TIMEOUT environment variable if set,
                otherwise one hour.

            transport: httpx transport used for the exchanges.

        Raises:
            ValueError: if the read timeout is invalid.
        """
        self.settings = ClientSettings(
            base_url=base_url,
            mapper=mapper,
            decorators=decorators,
            read_timeout=read_timeout,
            transport=transport,
        )
        self._mapper = EntityMapper.new_instance()
        logger.debug(
            "initializing client with base URL '%s' and %.1fs read timeout",
            self.settings.base_url,
            self.settings.read_timeout,
        )

    @staticmethod
    def builder() -> ClientBuilder:
        return ClientBuilder()

    @property
    def mapper(self) -> EntityMapper:
        """Mapper used by requests that do not specify one."""
        if self.settings.mapper is not None:
            return self.settings.mapper
        return self._mapper

    def request(self, method: HttpMethod, url: str) -> WrappedRequestBuilder:
        return WrappedRequestBuilder(self, HttpMethod(method), url)

    def get(self, url: str) -> WrappedRequestBuilder:
        return self.request(HttpMethod.GET, url)

    def post(self, url: str) -> WrappedRequestBuilder:
        return self.request(HttpMethod.POST, url)

    def put(self, url: str) -> WrappedRequestBuilder:
        return self.request(HttpMethod.PUT, url)

    def patch(self, url: str) -> WrappedRequestBuilder:
        return self.request(HttpMethod.PATCH, url)

    def head(self, url: str) -> WrappedRequestBuilder:
        return self.request(HttpMethod.HEAD, url)

    def delete(self, url: str) -> WrappedRequestBuilder:
        return self.request(HttpMethod.DELETE, url)


class ClientBuilder:
    """Fluent construction of an HttpClient."""

    __slots__ = ("_base_url", "_mapper", "_decorators", "_read_timeout", "_transport")

    def __init__(self):
        self._base_url: Optional[str] = None
        self._mapper: Optional[EntityMapper] = None
        self._decorators: List[Decorator] = []
        self._read_timeout: Optional[float] = None
        self._transport: Optional[httpx.BaseTransport] = None

    def with_base_url(self, base_url: str) -> ClientBuilder:
        if base_url is None:
            raise TypeError("base URL may not be None")
        self._base_url = base_url
        return self

    def with_entity_mapper(self, mapper: Optional[EntityMapper]) -> ClientBuilder:
        self._mapper = mapper
        return self

    def with_decorator(self, decorator: Decorator) -> ClientBuilder:
        if decorator is None:
            raise TypeError("decorator may not be None")
        self._decorators.append(decorator)
        return self

    def with_read_timeout(self, timeout: float) -> ClientBuilder:
        self._read_timeout = timeout
        return self

    def with_transport(self, transport: httpx.BaseTransport) -> ClientBuilder:
        self._transport = transport
        return self

    def build(self) -> HttpClient:
        return HttpClient(
            base_url=self._base_url,
            mapper=self._mapper,
            decorators=self._decorators,
            read_timeout=self._read_timeout,
            transport=self._transport,
        )


class WrappedRequestBuilder:
    """Request under construction, created by the HttpClient methods.

    Besides the request itself, the builder holds the handlers that the
    response is dispatched to: the handler registered for its exact status
    code if there is one, otherwise the remaining handler.
    """

    def __init__(self, client: HttpClient, method: HttpMethod, url: str):
        if url is None:
            raise TypeError("URL may not be None")
        self._client = client
        self._builder = (
            HttpRequest.builder()
            .with_method(method)
            .with_url(client.settings.resolve(url))
            .with_mapper(client.mapper)
            .with_read_timeout(client.settings.read_timeout)
            .with_transport(client.settings.transport)
        )
        self._handlers: Dict[int, ResponseHandler] = {}
        self._remaining: ResponseHandler = _ignore
        self._exception_handler: Optional[ExceptionHandler] = None

    @property
    def method(self) -> HttpMethod:
        assert self._builder.method is not None
        return self._builder.method

    @property
    def url(self) -> str:
        assert self._builder.url is not None
        return self._builder.url

    def with_input(self, supplier: InputSupplier) -> WrappedRequestBuilder:
        """Set the supplier of the request entity.

        The supplier is called when the request executes. A serializer must
        be registered for the type of the object it returns; if it returns
        None, no body is sent.
        """
        self._builder.with_input(supplier)
        return self

    def with_mapper(self, mapper: EntityMapper) -> WrappedRequestBuilder:
        self._builder.with_mapper(mapper)
        return self

    def with_header(self, name: str, value: str) -> WrappedRequestBuilder:
        self._builder.with_header(name, value)
        return self

    def on_status(self, code: int, handler: ResponseHandler) -> WrappedRequestBuilder:
        """Handle responses with a specific status code."""
        if handler is None:
            raise TypeError("handler may not be None")
        self._handlers[code] = handler
        return self

    def on_remaining(self, handler: ResponseHandler) -> WrappedRequestBuilder:
        """Handle responses whose status code has no handler of its own."""
        if handler is None:
            raise TypeError("handler may not be None")
        self._remaining = handler
        return self

    def on_exception(self, handler: ExceptionHandler) -> WrappedRequestBuilder:
        """Handle failures of the exchange and of the response handlers.

        Without an exception handler, failures are raised by execute().
        """
        if handler is None:
            raise TypeError("exception handler may not be None")
        self._exception_handler = handler
        return self

    def execute(self) -> Optional[HttpResponse]:
        """Perform the request and dispatch the response to its handler.

        Returns:
            The response, or None if a failure was passed to the exception
            handler.

        Raises:
            Exception: any failure of the exchange or of a response handler,
                unchanged, when no exception handler was registered.
        """
        for decorator in self._client.settings.decorators:
            decorator(self)

        failures: List[Exception] = []
        self._builder.on_exception(self._exception_handler or failures.append)
        response = self._builder.build().execute()

        if response is not None:
            handler = self._handlers.get(response.status_code, self._remaining)
            try:
                handler(response)
            except Exception as e:
                if self._exception_handler is None:
                    raise
                self._exception_handler(e)
                return None

        if failures:
            raise failures[0]
        return response
