from unittest.mock import MagicMock

import httpx
import pytest
import requests

from tinify_client import AsyncClient, Client, ClientError, Tinify


def test_get_client():
    session = MagicMock(spec=requests.Session)
    client = Tinify().set_key("test_key").get_client(session=session)

    assert isinstance(client, Client)
    assert client.key == "test_key"
    assert client.session is session
    assert client.timeout == 300
    assert client.base_url == "https://api.tinify.com"


def test_get_client_without_key():
    with pytest.raises(ClientError, match="set_key"):
        Tinify().get_client()


def test_settings_are_passed_to_client():
    tinify = Tinify(
        "test_key",
        base_url="http://localhost:8080/",
        timeout=10,
        strict_transform=False,
    )
    client = tinify.get_client(session=MagicMock(spec=requests.Session))

    assert client.base_url == "http://localhost:8080"
    assert client.timeout == 10
    assert client.strict_transform is False
    assert client._source().shrink_url == "http://localhost:8080/shrink"


@pytest.mark.asyncio
async def test_get_async_client():
    transport = httpx.MockTransport(lambda request: httpx.Response(201, content=b"ok"))
    async with Tinify("test_key").get_async_client(transport=transport) as client:
        assert isinstance(client, AsyncClient)
        source = await client.from_buffer(b"image")
        assert await source.to_buffer() == b"ok"


def test_get_async_client_without_key():
    with pytest.raises(ClientError):
        Tinify().get_async_client()
