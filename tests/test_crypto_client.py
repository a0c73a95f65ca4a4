"""Tests for the cryptography service client."""

import json

import httpx
import pytest

from notifier.exceptions import InternalException
from notifier.services.crypto_client import CryptographyServiceClient


def make_client(handler) -> CryptographyServiceClient:
    return CryptographyServiceClient(
        base_url="http://crypto.test",
        transport=httpx.MockTransport(handler),
    )


async def test_encrypt_posts_plaintext():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ciphertext": "c1ph3r"})

    client = make_client(handler)
    assert await client.encrypt("s3cret") == "c1ph3r"
    await client.aclose()

    assert requests[0].url.path == "/encrypt"
    assert json.loads(requests[0].content) == {"plaintext": "s3cret"}


async def test_decrypt_posts_ciphertext():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/decrypt"
        assert json.loads(request.content) == {"ciphertext": "c1ph3r"}
        return httpx.Response(200, json={"plaintext": "s3cret"})

    client = make_client(handler)
    assert await client.decrypt("c1ph3r") == "s3cret"
    await client.aclose()


async def test_error_status_is_internal():
    client = make_client(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(InternalException):
        await client.decrypt("c1ph3r")
    await client.aclose()


async def test_transport_failure_is_internal():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(InternalException):
        await client.encrypt("s3cret")
    await client.aclose()


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"unexpected": "field"}),
        httpx.Response(200, json={"plaintext": 42}),
    ],
)
async def test_malformed_reply_is_internal(response):
    client = make_client(lambda request: response)

    with pytest.raises(InternalException):
        await client.decrypt("c1ph3r")
    await client.aclose()
