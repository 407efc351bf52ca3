import asyncio
import json

import httpx
import pytest

from shoplist.clients.share_a_cart import ShareACartClient
from shoplist.common.errors import (
    CartFetchError,
    CartNetworkError,
    CartNotFoundError,
    CartSchemaError,
    MalformedCartError,
)

from conftest import sample_payload


def make_client(settings, handler, strict=False):
    return ShareACartClient(settings, transport=httpx.MockTransport(handler), strict=strict)


def fetch(client, cart_id="T4GEU"):
    return asyncio.run(client.fetch_cart(cart_id))


def respond(status_code=200, content=None, json_body=None):
    def handler(request):
        if json_body is not None:
            return httpx.Response(status_code, json=json_body)
        return httpx.Response(status_code, content=content or b"")
    return handler


def test_requests_cart_url(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=sample_payload())

    cart = fetch(make_client(settings, handler))

    assert str(seen[0].url) == "https://share-a-cart.test/api/get/r/cart/T4GEU"
    assert seen[0].headers["accept"] == "application/json"
    assert cart.id == "T4GEU"
    assert cart.vendor_display_name == "Amazon Fresh"
    assert [item.asin for item in cart.items] == ["B001", "B002", "B003", "B004"]
    assert cart.items[0].new_vendor_item_url == "https://example.com/b001"


def test_cart_url_trims_trailing_slash(settings):
    client = ShareACartClient(settings.model_copy(update={"share_a_cart_api_base": "https://x.test/cart/"}))
    assert client.cart_url("AB12") == "https://x.test/cart/AB12"


@pytest.mark.parametrize(
    "handler, error",
    [
        (respond(404), CartNotFoundError),
        (respond(200, content=b""), CartNotFoundError),
        (respond(200, content=b"null"), CartNotFoundError),
        (respond(500), CartNetworkError),
        (respond(503, content=b"maintenance"), CartNetworkError),
        (respond(200, content=b"<html>oops</html>"), MalformedCartError),
        (respond(200, json_body={"items": []}), CartSchemaError),
        (respond(200, json_body={"id": "T4GEU", "items": [{"asin": "B1", "title": "x"}]}), CartSchemaError),
    ],
)
def test_error_mapping(settings, handler, error):
    with pytest.raises(error) as exc_info:
        fetch(make_client(settings, handler))
    assert isinstance(exc_info.value, CartFetchError)
    assert exc_info.value.cart_id == "T4GEU"


def test_schema_error_is_malformed(settings):
    with pytest.raises(MalformedCartError) as exc_info:
        fetch(make_client(settings, respond(200, json_body={"id": 5})))
    assert isinstance(exc_info.value, CartSchemaError)
    assert exc_info.value.errors


def test_timeout_is_network_error(settings):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(CartNetworkError):
        fetch(make_client(settings, handler))


def test_connection_error_is_network_error(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CartNetworkError):
        fetch(make_client(settings, handler))


class TestStrictMode:
    def payload_with_string_quantity(self):
        payload = sample_payload()
        payload["items"][0]["quantity"] = "2"
        return payload

    def test_lenient_coerces(self, settings):
        handler = respond(200, content=json.dumps(self.payload_with_string_quantity()).encode())
        cart = fetch(make_client(settings, handler))
        assert cart.items[0].quantity == 2

    def test_strict_refuses_coercion(self, settings):
        handler = respond(200, content=json.dumps(self.payload_with_string_quantity()).encode())
        with pytest.raises(CartSchemaError):
            fetch(make_client(settings, handler, strict=True))

    def test_strict_accepts_clean_payload(self, settings):
        cart = fetch(make_client(settings, respond(200, json_body=sample_payload()), strict=True))
        assert cart.cart_total_qty == 4


def test_strict_mode_follows_settings(settings):
    handler = respond(200, content=json.dumps(TestStrictMode().payload_with_string_quantity()).encode())
    strict_settings = settings.model_copy(update={"strict_validation": True})
    client = ShareACartClient(strict_settings, transport=httpx.MockTransport(handler))

    assert client.strict is True
    with pytest.raises(CartSchemaError):
        fetch(client)
    # an explicit argument still wins
    assert ShareACartClient(strict_settings, strict=False).strict is False
