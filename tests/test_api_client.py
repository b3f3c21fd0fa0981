import asyncio

import httpx
import pytest

from app.client.api_client import CatalogClient, CatalogClientError
from app.client.variant_switcher import VariantSwitcher

PRODUCT = {
    "key_name": "s23-128-red",
    "name": "Samsung Galaxy S23 (128GB, Red)",
    "vertical_id": 1,
    "storage": "128GB",
    "ram": None,
    "colour": "Red",
}

VARIANTS = [
    {"key_name": "s23-128-red", "storage": "128GB", "ram": None, "colour": "Red"},
    {"key_name": "s23-256-red", "storage": "256GB", "ram": None, "colour": "Red"},
    {"key_name": "s23-128-blue", "storage": "128GB", "ram": None, "colour": "Blue"},
]


def make_client(handler):
    transport = httpx.MockTransport(handler)
    return CatalogClient(client=httpx.AsyncClient(transport=transport, base_url="http://catalog.test"))


def test_search_sends_query_params():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=[])

    async def scenario():
        async with make_client(handler) as client:
            await client.search("galaxy", page=2, limit=20)
            await client.search("ignored", entity_id=11)
            await client.search("")

    asyncio.run(scenario())
    assert requests[0].url.path == "/api/products/search"
    assert dict(requests[0].url.params) == {"q": "galaxy", "page": "2", "limit": "20"}
    assert dict(requests[1].url.params) == {"entityid": "11", "page": "1", "limit": "20"}
    assert "q" not in requests[2].url.params


def test_none_params_are_dropped():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=[])

    asyncio.run(make_client(handler).stores("s23-128-red"))
    assert requests[0].url.path == "/api/stores/for-product/s23-128-red"
    assert "lat" not in requests[0].url.params


def test_error_status_raises():
    def handler(request):
        return httpx.Response(404, json={"detail": "Product not found"})

    with pytest.raises(CatalogClientError) as exc_info:
        asyncio.run(make_client(handler).product("nope"))
    assert exc_info.value.status_code == 404
    assert "Product not found" in str(exc_info.value)


def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CatalogClientError) as exc_info:
        asyncio.run(make_client(handler).popular_pills())
    assert exc_info.value.status_code is None


def test_non_json_body_raises():
    def handler(request):
        return httpx.Response(200, text="<html>gateway error</html>", headers={"content-type": "text/html"})

    with pytest.raises(CatalogClientError) as exc_info:
        asyncio.run(make_client(handler).search("galaxy"))
    assert exc_info.value.status_code == 200


def test_error_with_list_body_raises():
    def handler(request):
        return httpx.Response(502, json=["bad gateway"])

    with pytest.raises(CatalogClientError) as exc_info:
        asyncio.run(make_client(handler).popular_pills())
    assert exc_info.value.status_code == 502


def _catalog_handler(request):
    if request.url.path == "/api/products/s23-128-red":
        return httpx.Response(200, json=PRODUCT)
    if request.url.path == "/api/products/product-variants":
        return httpx.Response(200, json=VARIANTS)
    return httpx.Response(404, json={"detail": "Not Found"})


def test_variant_switcher():
    switcher = VariantSwitcher(make_client(_catalog_handler))
    asyncio.run(switcher.load("s23-128-red"))

    assert [s.attribute for s in switcher.selectors()] == ["storage", "colour"]
    assert switcher.switch("storage", "256GB") == "/product/s23-256-red"
    assert switcher.switch("colour", "Blue") == "/product/s23-128-blue"
    assert switcher.switch("storage", "1TB") is None


def test_variant_switcher_survives_variant_fetch_failure():
    def handler(request):
        if request.url.path == "/api/products/product-variants":
            return httpx.Response(500, json={"detail": "boom"})
        return _catalog_handler(request)

    switcher = VariantSwitcher(make_client(handler))
    asyncio.run(switcher.load("s23-128-red"))

    assert switcher.variants == []
    assert switcher.switch("storage", "256GB") is None


def test_variant_switcher_before_load():
    switcher = VariantSwitcher(make_client(_catalog_handler))
    assert switcher.selectors() == []
    assert switcher.switch("storage", "256GB") is None
