import gzip

import httpx
import pytest

from courier.content_type import ContentType
from courier.error import (
    InvalidURLError,
    MissingFieldError,
    NoSerializerError,
    TransportError,
)
from courier.mapper import EntityMapper, Serializer
from courier.method import HttpMethod
from courier.request import HttpRequest


class ExplodingStream(httpx.SyncByteStream):
    def __init__(self):
        self.closed = False

    def __iter__(self):
        raise AssertionError("response body must not be read")

    def close(self):
        self.closed = True


class Recorder:
    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def build(method, recorder, mapper=None, **fields):
    builder = (
        HttpRequest.builder()
        .with_method(method)
        .with_url("http://example.com/path")
        .with_mapper(mapper or EntityMapper.new_instance())
        .with_transport(httpx.MockTransport(recorder))
    )
    for name, value in fields.pop("headers", []):
        builder.with_header(name, value)
    if "supplier" in fields:
        builder.with_input(fields.pop("supplier"))
    if "handler" in fields:
        builder.on_exception(fields.pop("handler"))
    return builder.build()


def test_get_reads_body_and_headers():
    recorder = Recorder(
        httpx.Response(
            200,
            headers=[("X-Test", "yay"), ("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
            content=b"hello",
        )
    )
    response = build(HttpMethod.GET, recorder).execute()
    assert response is not None
    assert response.status_code == 200
    assert response.status == "OK"
    assert response.raw_body == b"hello"
    assert response.headers.get_last("x-test", "") == "yay"
    assert response.headers.get("set-cookie") == ("a=1", "b=2")
    assert response.entity(str) == "hello"

    [request] = recorder.requests
    assert request.method == "GET"
    assert str(request.url) == "http://example.com/path"
    assert "content-type" not in request.headers


def test_error_status_reads_body():
    recorder = Recorder(httpx.Response(500, content=b"boom"))
    response = build(HttpMethod.DELETE, recorder).execute()
    assert response is not None
    assert response.status_code == 500
    assert response.status == "Internal Server Error"
    assert response.raw_body == b"boom"


def test_head_never_reads_body():
    stream = ExplodingStream()
    recorder = Recorder(
        httpx.Response(200, headers={"Content-Length": "42"}, stream=stream)
    )
    response = build(HttpMethod.HEAD, recorder).execute()
    assert response is not None
    assert response.raw_body == b""
    assert response.headers.get_last("content-length") == "42"
    assert stream.closed


def test_multi_valued_headers_are_joined():
    recorder = Recorder(httpx.Response(204))
    build(
        HttpMethod.GET,
        recorder,
        headers=[("Accept", "text/plain"), ("X-Multi", "a"), ("x-multi", "b")],
    ).execute()
    [request] = recorder.requests
    assert request.headers.get_list("x-multi") == ["a,b"]
    assert request.headers["accept"] == "text/plain"


def test_body_is_serialized():
    recorder = Recorder(httpx.Response(200))
    build(HttpMethod.POST, recorder, supplier=lambda: "abc").execute()
    [request] = recorder.requests
    assert request.content == b"abc"
    assert request.headers["content-type"] == str(ContentType.TEXT_UTF8)
    assert request.headers["content-length"] == "3"


def test_explicit_content_type_is_kept():
    recorder = Recorder(httpx.Response(200))
    build(
        HttpMethod.PUT,
        recorder,
        supplier=lambda: "{}",
        headers=[("Content-Type", "application/json")],
    ).execute()
    [request] = recorder.requests
    assert request.headers.get_list("content-type") == ["application/json"]


def test_serializer_content_type_tags_request():
    csv = ContentType.of("text/csv")
    mapper = EntityMapper().register_serializer(
        list, Serializer(csv, lambda rows: ",".join(rows).encode())
    )
    recorder = Recorder(httpx.Response(200))
    build(HttpMethod.POST, recorder, mapper, supplier=lambda: ["a", "b"]).execute()
    [request] = recorder.requests
    assert ContentType.of(request.headers["content-type"]) == csv
    assert request.content == b"a,b"


def test_none_entity_sends_no_body():
    recorder = Recorder(httpx.Response(200))
    build(HttpMethod.POST, recorder, supplier=lambda: None).execute()
    [request] = recorder.requests
    assert request.content == b""
    assert "content-type" not in request.headers


def test_missing_serializer_is_reported_before_sending():
    class Widget:
        pass

    errors = []
    recorder = Recorder(httpx.Response(200))
    response = build(
        HttpMethod.POST, recorder, supplier=Widget, handler=errors.append
    ).execute()
    assert response is None
    assert recorder.requests == []
    [error] = errors
    assert isinstance(error, NoSerializerError)
    assert error.type is Widget
    assert "Widget" in str(error)


def test_transport_error_is_wrapped():
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    errors = []
    response = build(HttpMethod.GET, fail, handler=errors.append).execute()
    assert response is None
    [error] = errors
    assert isinstance(error, TransportError)
    assert isinstance(error, ConnectionError)
    assert isinstance(error.__cause__, httpx.ConnectError)


def test_failures_are_raised_by_default():
    def fail(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(TransportError):
        build(HttpMethod.GET, fail).execute()


def test_invalid_url():
    errors = []
    request = (
        HttpRequest.builder()
        .with_method(HttpMethod.GET)
        .with_url("http://example.com:port/")
        .with_mapper(EntityMapper())
        .on_exception(errors.append)
        .build()
    )
    assert request.execute() is None
    [error] = errors
    assert isinstance(error, InvalidURLError)


@pytest.mark.parametrize("missing", ["method", "url", "mapper"])
def test_build_requires_fields(missing):
    builder = HttpRequest.builder()
    if missing != "method":
        builder.with_method(HttpMethod.GET)
    if missing != "url":
        builder.with_url("http://example.com")
    if missing != "mapper":
        builder.with_mapper(EntityMapper())
    with pytest.raises(MissingFieldError, match=f"(?i)no {missing}"):
        builder.build()


def test_empty_content_type_is_kept():
    recorder = Recorder(httpx.Response(200))
    build(
        HttpMethod.POST,
        recorder,
        supplier=lambda: "abc",
        headers=[("Content-Type", "")],
    ).execute()
    [request] = recorder.requests
    assert request.headers.get_list("content-type") == [""]


def test_raw_body_is_not_decoded():
    compressed = gzip.compress(b"hello")
    recorder = Recorder(
        httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=compressed)
    )
    response = build(HttpMethod.GET, recorder).execute()
    assert response is not None
    assert response.raw_body == compressed
    assert response.headers.get_last("content-length") == str(len(compressed))

    [request] = recorder.requests
    assert "accept-encoding" not in request.headers


def test_explicit_accept_encoding_is_sent():
    recorder = Recorder(httpx.Response(200))
    build(HttpMethod.GET, recorder, headers=[("Accept-Encoding", "gzip")]).execute()
    [request] = recorder.requests
    assert request.headers["accept-encoding"] == "gzip"
