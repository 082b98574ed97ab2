"""
Shopify Admin client against a local GraphQL endpoint
"""

import asyncio

import pytest
import pytest_asyncio
from aiohttp import web

from app.shopify.client import ShopifyAdminClient

GET_KREATION = """
    query GetKreation($id: ID!) {
        metaobject(id: $id) {
            id
        }
    }
"""

@pytest_asyncio.fixture
async def slow_graphql_server():
    """aiohttp server answering every GraphQL request after 0.2s"""
    seen = []

    async def graphql(request):
        body = await request.json()
        seen.append((request.headers.get("X-Shopify-Access-Token"), body["variables"]))
        await asyncio.sleep(0.2)
        return web.json_response({"data": {"metaobject": {"id": body["variables"]["id"]}}})

    app = web.Application()
    app.router.add_post("/admin/api/2023-10/graphql.json", graphql)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    try:
        yield f"http://{host}:{port}/admin/api/2023-10", seen
    finally:
        await runner.cleanup()

@pytest.mark.asyncio
async def test_concurrent_graphql_calls_do_not_share_a_connection(slow_graphql_server):
    base_url, seen = slow_graphql_server
    client = ShopifyAdminClient(access_token="shpat_test", timeout=5, base_url=base_url)

    first, second = await asyncio.gather(
        client.graphql(GET_KREATION, {"id": "gid://shopify/Metaobject/1"}),
        client.graphql(GET_KREATION, {"id": "gid://shopify/Metaobject/2"}),
    )

    assert first == {"metaobject": {"id": "gid://shopify/Metaobject/1"}}
    assert second == {"metaobject": {"id": "gid://shopify/Metaobject/2"}}
    assert [token for token, _ in seen] == ["shpat_test", "shpat_test"]

def test_fractional_timeout_is_kept():
    client = ShopifyAdminClient(store_domain="test-shop.myshopify.com", timeout=0.5)

    gql_client = client.gql_client()

    assert gql_client.transport.timeout == 0.5
    assert gql_client.execute_timeout == 0.5

def test_each_call_gets_its_own_transport():
    client = ShopifyAdminClient(store_domain="test-shop.myshopify.com")

    assert client.gql_client().transport is not client.gql_client().transport
    assert client.gql_client().transport.url == "https://test-shop.myshopify.com/admin/api/2023-10/graphql.json"
