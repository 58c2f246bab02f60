"""Execution of a single HTTP exchange.

HttpRequest is not meant to be used directly: courier.client builds one per
call from a WrappedRequestBuilder. Failures are never raised by execute();
they are handed to the exception handler of the request, which lets the
caller decide whether they should be raised or absorbed.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
from typing_extensions import TypeAlias

from courier.config import DEFAULT_READ_TIMEOUT
from courier.error import (
    InvalidURLError,
    MissingFieldError,
    NoSerializerError,
    TransportError,
)
from courier.headers import Headers
from courier.mapper import EntityMapper
from courier.method import HttpMethod
from courier.response import HttpResponse

logger = logging.getLogger(__name__)

InputSupplier: TypeAlias = Callable[[], Any]
ExceptionHandler: TypeAlias = Callable[[Exception], None]


def raise_exception(error: Exception):
    raise error


class HttpRequest:
    """A fully resolved HTTP request."""

    __slots__ = (
        "method",
        "url",
        "headers",
        "mapper",
        "input_supplier",
        "exception_handler",
        "read_timeout",
        "transport",
    )

    def __init__(
        self,
        method: HttpMethod,
        url: str,
        headers: Headers,
        mapper: EntityMapper,
        input_supplier: Optional[InputSupplier] = None,
        exception_handler: ExceptionHandler = raise_exception,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.method = method
        self.url = url
        self.headers = headers
        self.mapper = mapper
        self.input_supplier = input_supplier
        self.exception_handler = exception_handler
        self.read_timeout = read_timeout
        self.transport = transport

    @staticmethod
    def builder() -> RequestBuilder:
        return RequestBuilder()

    def execute(self) -> Optional[HttpResponse]:
        """Perform the exchange.

        Returns:
            The response, or None if the exchange failed and the failure was
            passed to the exception handler.
        """
        try:
            return self._exchange()
        except Exception as e:
            logger.debug("%s %s failed: %s", self.method, self.url, e)
            self.exception_handler(e)
        return None

    def _wire_headers(self) -> Dict[str, str]:
        # Repeated headers are sent as a single comma separated line.
        return {name: ",".join(values) for name, values in self.headers.items()}

    def _entity(self) -> Tuple[Optional[bytes], Dict[str, str]]:
        if self.input_supplier is None:
            return None, {}
        entity = self.input_supplier()
        if entity is None:
            return None, {}
        serializer = self.mapper.get_serializer(type(entity))
        if serializer is None:
            raise NoSerializerError(type(entity))
        extra = {}
        if "content-type" not in self.headers:
            extra["content-type"] = str(serializer.content_type)
        content = serializer.serialize(entity)
        extra["content-length"] = str(len(content))
        return content, extra

    def _exchange(self) -> HttpResponse:
        headers = self._wire_headers()
        content, extra = self._entity()
        headers.update(extra)

        logger.debug("%s %s", self.method, self.url)
        timeout = httpx.Timeout(None, read=self.read_timeout)
        try:
            with httpx.Client(transport=self.transport, timeout=timeout) as client:
                # Bodies are kept as received, so compression is only negotiated
                # when the caller asks for it.
                client.headers.pop("Accept-Encoding", None)
                with client.stream(
                    self.method.value, self.url, headers=headers, content=content
                ) as response:
                    if self.method.has_body:
                        body = b"".join(response.iter_raw())
                    else:
                        body = b""
                    result = HttpResponse(
                        status_code=response.status_code,
                        status=response.reason_phrase,
                        headers=_response_headers(response),
                        mapper=self.mapper,
                        raw_body=body,
                    )
        except httpx.InvalidURL as e:
            raise InvalidURLError(f"invalid URL '{self.url}': {e}") from e
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise TransportError(f"{self.method} {self.url}: {e}") from e

        logger.debug(
            "%s %s: %d %s (%d bytes)",
            self.method,
            self.url,
            result.status_code,
            result.status,
            len(result.raw_body),
        )
        return result


def _response_headers(response: httpx.Response) -> Headers:
    headers = Headers()
    for name, value in response.headers.multi_items():
        if not name:
            continue
        headers.add(name, value)
    return headers


class RequestBuilder:
    """Accumulates the fields of an HttpRequest."""

    __slots__ = (
        "headers",
        "method",
        "url",
        "mapper",
        "input_supplier",
        "exception_handler",
        "read_timeout",
        "transport",
    )

    def __init__(self):
        self.headers = Headers()
        self.method: Optional[HttpMethod] = None
        self.url: Optional[str] = None
        self.mapper: Optional[EntityMapper] = None
        self.input_supplier: Optional[InputSupplier] = None
        self.exception_handler: ExceptionHandler = raise_exception
        self.read_timeout = DEFAULT_READ_TIMEOUT
        self.transport: Optional[httpx.BaseTransport] = None

    def with_method(self, method: HttpMethod) -> RequestBuilder:
        if method is None:
            raise TypeError("method may not be None")
        self.method = HttpMethod(method)
        return self

    def with_url(self, url: str) -> RequestBuilder:
        if url is None:
            raise TypeError("URL may not be None")
        self.url = url
        return self

    def with_header(self, name: str, value: str) -> RequestBuilder:
        self.headers.add(name, value)
        return self

    def with_mapper(self, mapper: EntityMapper) -> RequestBuilder:
        if mapper is None:
            raise TypeError("mapper may not be None")
        self.mapper = mapper
        return self

    def with_input(self, supplier: InputSupplier) -> RequestBuilder:
        if supplier is None:
            raise TypeError("input supplier may not be None")
        self.input_supplier = supplier
        return self

    def with_read_timeout(self, timeout: float) -> RequestBuilder:
        self.read_timeout = timeout
        return self

    def with_transport(
        self, transport: Optional[httpx.BaseTransport]
    ) -> RequestBuilder:
        self.transport = transport
        return self

    def on_exception(self, handler: ExceptionHandler) -> RequestBuilder:
        if handler is None:
            raise TypeError("exception handler may not be None")
        self.exception_handler = handler
        return self

    def build(self) -> HttpRequest:
        """Returns the request.

        Raises:
            MissingFieldError: if the method, URL or mapper was not set.
        """
        if self.method is None:
            raise MissingFieldError("no method was supplied")
        if self.url is None:
            raise MissingFieldError("no URL was supplied")
        if self.mapper is None:
            raise MissingFieldError("no mapper was supplied")
        return HttpRequest(
            method=self.method,
            url=self.url,
            headers=self.headers,
            mapper=self.mapper,
            input_supplier=self.input_supplier,
            exception_handler=self.exception_handler,
            read_timeout=self.read_timeout,
            transport=self.transport,
        )
