import pytest

from courier.headers import Headers


def test_add_then_get_preserves_order():
    headers = Headers()
    headers.add("X-Test", "a")
    headers.add("x-test", "b")
    headers.add("X-TEST", "c")
    assert headers.get("x-Test") == ("a", "b", "c")


def test_get_missing_is_empty():
    assert Headers().get("Accept") == ()


def test_get_returns_a_copy():
    headers = Headers()
    headers.add("Accept", "text/plain")
    values = headers.get("accept")
    assert isinstance(values, tuple)
    headers.add("Accept", "application/json")
    assert values == ("text/plain",)
    assert headers.get("accept") == ("text/plain", "application/json")


def test_get_last():
    headers = Headers()
    assert headers.get_last("X-Test", "") == ""
    assert headers.get_last("X-Test") is None
    headers.add("X-Test", "first")
    headers.add("X-Test", "second")
    assert headers.get_last("x-test", "") == "second"


def test_names_are_lower_cased():
    headers = Headers()
    headers.add("Content-Type", "text/plain")
    headers.add("X-Test", "yay")
    headers.add("x-test", "yay")
    assert headers.names() == {"content-type", "x-test"}
    assert len(headers) == 2
    assert "CONTENT-TYPE" in headers
    assert "accept" not in headers


def test_items_in_insertion_order():
    headers = Headers()
    headers.add("B", "1")
    headers.add("A", "2")
    headers.add("b", "3")
    assert list(headers.items()) == [("b", ("1", "3")), ("a", ("2",))]


def test_none_is_rejected():
    headers = Headers()
    with pytest.raises(TypeError):
        headers.add(None, "value")  # type: ignore
    with pytest.raises(TypeError):
        headers.add("name", None)  # type: ignore
