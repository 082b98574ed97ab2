"""
Shopify Admin API Client
Thin transport for the Admin REST and GraphQL endpoints
"""
from typing import Any, Dict, Optional, Tuple
import asyncio
import logging

import aiohttp
import httpx
from gql import gql, Client
from gql.transport.aiohttp import AIOHTTPTransport
from gql.transport import exceptions as gql_exceptions

from app.config import settings
from app.errors import RemoteRejection, TransportError

logger = logging.getLogger(__name__)

GID_PREFIX = "gid://shopify/"

def to_gid(resource: str, value: Any) -> str:
    """gid://shopify/<resource>/<id> for a numeric id, GIDs pass through"""
    value = str(value)
    if value.startswith(GID_PREFIX):
        return value
    return f"{GID_PREFIX}{resource}/{value}"

def numeric_id(value: Any) -> str:
    """Trailing numeric part of a GID, plain ids pass through"""
    value = str(value)
    if value.startswith(GID_PREFIX):
        return value.rsplit("/", 1)[-1]
    return value

class ShopifyAdminClient:
    """Shopify Admin API client (REST via httpx, GraphQL via gql)"""

    def __init__(
        self,
        store_domain: Optional[str] = None,
        access_token: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        base_url: Optional[str] = None
    ):
        self.store_domain = store_domain or settings.SHOPIFY_STORE_DOMAIN
        self.access_token = access_token if access_token is not None else settings.SHOPIFY_TOKEN
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self.base_url = base_url or f"https://{self.store_domain}/admin/api/{self.api_version}"
        # Only set in tests (httpx.MockTransport)
        self._http_transport = transport

    def gql_client(self) -> Client:
        """
        Fresh GraphQL client for a single call
        A gql transport holds one connection at a time, so concurrent
        requests must not share it.
        """
        gql_transport = AIOHTTPTransport(
            url=f"{self.base_url}/graphql.json",
            headers=self.headers,
            timeout=self.timeout
        )
        # Avoid schema fetching to keep startup fast.
        return Client(
            transport=gql_transport,
            fetch_schema_from_transport=False,
            execute_timeout=self.timeout
        )

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.access_token or "",
            "Content-Type": "application/json"
        }

    async def rest(
        self,
        method: str,
        path: str,
        json: Optional[Dict] = None,
        params: Optional[Dict] = None
    ) -> Tuple[int, Any]:
        """
        Call an Admin REST endpoint

        Args:
            method: HTTP method
            path: Path below /admin/api/<version>/, e.g. "customers.json"
            json: Optional JSON body
            params: Optional query parameters

        Returns:
            (status code, parsed JSON body) - the status is not checked here
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._http_transport) as client:
                response = await client.request(
                    method,
                    url,
                    headers=self.headers,
                    json=json,
                    params=params
                )
        except httpx.RequestError as e:
            logger.error(f"Shopify REST {method} {path} failed: {e}")
            raise TransportError(f"{method} {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {"errors": response.text}
        return response.status_code, body

    async def rest_checked(
        self,
        method: str,
        path: str,
        json: Optional[Dict] = None,
        params: Optional[Dict] = None
    ) -> Any:
        """Like rest(), but raises RemoteRejection for 4xx/5xx and returns only the body"""
        status, body = await self.rest(method, path, json=json, params=params)
        if status >= 400:
            errors = body.get("errors") if isinstance(body, dict) else body
            logger.error(f"Shopify REST {method} {path} rejected with {status}: {errors}")
            raise RemoteRejection(
                f"{method} {path} rejected with status {status}",
                remote_status=status,
                errors=errors
            )
        return body

    async def graphql(self, query: str, variables: Optional[Dict] = None) -> Dict:
        """
        Execute an Admin GraphQL document

        Raises:
            RemoteRejection: GraphQL errors list or HTTP error status
            TransportError: connection problems or timeout
        """
        try:
            return await self.gql_client().execute_async(gql(query), variable_values=variables or {})
        except gql_exceptions.TransportQueryError as e:
            logger.error(f"Shopify GraphQL returned errors: {e.errors}")
            raise RemoteRejection("GraphQL query returned errors", errors=e.errors) from e
        except gql_exceptions.TransportServerError as e:
            logger.error(f"Shopify GraphQL rejected with {e.code}: {e}")
            raise RemoteRejection(
                f"GraphQL request rejected with status {e.code}",
                remote_status=e.code,
                errors=str(e)
            ) from e
        except (gql_exceptions.TransportError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Shopify GraphQL request failed: {e!r}")
            raise TransportError(f"GraphQL request failed: {e!r}") from e

    async def mutate(self, query: str, variables: Dict, mutation: str) -> Dict:
        """Execute a mutation and raise RemoteRejection on its userErrors"""
        result = await self.graphql(query, variables)
        payload = result.get(mutation) or {}
        user_errors = payload.get("userErrors") or []
        if user_errors:
            logger.error(f"Shopify {mutation} userErrors: {user_errors}")
            raise RemoteRejection(f"{mutation} failed", errors=user_errors)
        return payload

# Singleton instance
_shopify_client = None

def get_shopify_client() -> ShopifyAdminClient:
    """Get or create Shopify Admin client instance"""
    global _shopify_client
    if _shopify_client is None:
        _shopify_client = ShopifyAdminClient()
    return _shopify_client
