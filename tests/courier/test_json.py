from dataclasses import dataclass

import pytest

import courier.integrations.json
from courier.content_type import ContentType
from courier.mapper import EntityMapper


@dataclass
class User:
    name: str
    admin: bool = False


def test_serialize_dict():
    serializer = courier.integrations.json.serializer(dict)
    encoded = serializer.serialize({"hello": "wörld"})
    assert encoded == b'{"hello": "w\\u00f6rld"}'
    assert serializer.content_type == ContentType.of("application/json; charset=UTF-8")


def test_serialize_dataclass():
    serializer = courier.integrations.json.serializer(User)
    assert serializer.serialize(User("ada", True)) == b'{"name": "ada", "admin": true}'


def test_deserialize_dict():
    deserializer = courier.integrations.json.deserializer(dict)
    assert deserializer(ContentType.JSON, b'{"hello": "world"}') == {"hello": "world"}


def test_deserialize_into_type():
    deserializer = courier.integrations.json.deserializer(User)
    user = deserializer(
        ContentType.of("application/json; charset=utf-16"),
        '{"name": "grace"}'.encode("utf-16"),
    )
    assert user == User("grace")


def test_deserialize_wrong_shape():
    with pytest.raises(TypeError):
        courier.integrations.json.deserializer(list)(None, b"{}")
    with pytest.raises(TypeError):
        courier.integrations.json.deserializer(User)(None, b"[]")


def test_register():
    mapper = courier.integrations.json.register(EntityMapper.new_instance(), User)
    assert mapper.get_serializer(User) is not None
    assert mapper.get_deserializer(User)(None, b'{"name": "x"}') == User("x")
    assert mapper.get_deserializer(str) is not None
