"""
Shopify Commerce Backend Implementation
Implements CommerceBackend interface for the Shopify Admin API
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

from app.config import settings
from app.commerce.interface import CommerceBackend
from app.errors import RemoteRejection
from app.kreation.fields import FieldSpec, FieldType
from app.kreation.slots import handle_key
from app.shopify.client import ShopifyAdminClient, get_shopify_client, numeric_id, to_gid

logger = logging.getLogger(__name__)

KREATION_SELECTION = """
    id
    handle
    type
    fields {
        key
        value
    }
"""

CREATE_KREATION = """
    mutation CreateKreation($metaobject: MetaobjectCreateInput!) {
        metaobjectCreate(metaobject: $metaobject) {
            metaobject {%s}
            userErrors {
                field
                message
                code
            }
        }
    }
""" % KREATION_SELECTION

UPDATE_KREATION = """
    mutation UpdateKreation($id: ID!, $metaobject: MetaobjectUpdateInput!) {
        metaobjectUpdate(id: $id, metaobject: $metaobject) {
            metaobject {%s}
            userErrors {
                field
                message
                code
            }
        }
    }
""" % KREATION_SELECTION

GET_KREATION = """
    query GetKreation($id: ID!) {
        metaobject(id: $id) {%s}
    }
""" % KREATION_SELECTION

GET_KREATION_BY_HANDLE = """
    query GetKreationByHandle($handle: MetaobjectHandleInput!) {
        metaobjectByHandle(handle: $handle) {%s}
    }
""" % KREATION_SELECTION

SET_SLOT = """
    mutation SetKreationSlot($metafields: [MetafieldsSetInput!]!) {
        metafieldsSet(metafields: $metafields) {
            metafields {
                key
                value
            }
            userErrors {
                field
                message
                code
            }
        }
    }
"""

class ShopifyBackend(CommerceBackend):
    """Shopify implementation of CommerceBackend"""

    def __init__(self, client: Optional[ShopifyAdminClient] = None):
        self.client = client or get_shopify_client()
        self.metaobject_type = settings.METAOBJECT_TYPE
        self.namespace = settings.METAFIELD_NAMESPACE

    async def create_customer(self, customer: Dict[str, Any]) -> Tuple[int, Dict]:
        """Create customer via Admin REST"""
        return await self.client.rest("POST", "customers.json", json={"customer": customer})

    async def search_customers(self, query: str = "") -> Tuple[int, Dict]:
        """Search customers via Admin REST"""
        return await self.client.rest("GET", "customers/search.json", params={"query": query})

    async def create_kreation(self, fields: List[FieldSpec]) -> Dict:
        """
        Create the Kreation metaobject
        Tries the REST endpoint first; when the store does not expose it (404)
        the GraphQL metaobjectCreate mutation is used instead.
        """
        status, body = await self.client.rest(
            "POST",
            "metaobjects.json",
            json={
                "metaobject": {
                    "type": self.metaobject_type,
                    "fields": [spec.as_rest() for spec in fields]
                }
            }
        )

        if status == 404:
            logger.info("REST metaobjects endpoint not available, creating Kreation via GraphQL")
            payload = await self.client.mutate(
                CREATE_KREATION,
                {
                    "metaobject": {
                        "type": self.metaobject_type,
                        "fields": [spec.as_input() for spec in fields]
                    }
                },
                "metaobjectCreate"
            )
            raw = payload.get("metaobject")
        elif status >= 400:
            raise RemoteRejection(
                "Fehler beim Metaobject",
                remote_status=status,
                errors=body.get("errors") if isinstance(body, dict) else body
            )
        else:
            raw = body.get("metaobject") if isinstance(body, dict) else None

        if not raw or not raw.get("id"):
            raise RemoteRejection("Fehler beim Metaobject", remote_status=status)
        return self.normalize_kreation(raw)

    async def update_kreation(self, kreation_id: str, fields: List[FieldSpec]) -> Dict:
        """Update the Kreation metaobject via GraphQL metaobjectUpdate"""
        payload = await self.client.mutate(
            UPDATE_KREATION,
            {
                "id": to_gid("Metaobject", kreation_id),
                "metaobject": {"fields": [spec.as_input() for spec in fields]}
            },
            "metaobjectUpdate"
        )
        raw = payload.get("metaobject")
        if not raw:
            raise RemoteRejection(f"Kreation {kreation_id} could not be updated")
        return self.normalize_kreation(raw)

    async def get_slot_metafields(self, customer_id: str) -> Dict[str, str]:
        """Read the customer's metafields in the Kreation namespace via Admin REST"""
        body = await self.client.rest_checked(
            "GET",
            f"customers/{numeric_id(customer_id)}/metafields.json",
            params={"namespace": self.namespace}
        )
        metafields = {}
        for metafield in body.get("metafields", []):
            if metafield.get("namespace", self.namespace) != self.namespace:
                continue
            value = metafield.get("value")
            if value:
                metafields[metafield["key"]] = str(value)
        return metafields

    async def set_slot(
        self,
        customer_id: str,
        slot: str,
        kreation_id: str,
        handle: Optional[str] = None
    ) -> None:
        """Write the slot reference (and legacy handle) via GraphQL metafieldsSet"""
        owner_id = to_gid("Customer", customer_id)
        metafields = [
            {
                "ownerId": owner_id,
                "namespace": self.namespace,
                "key": slot,
                "type": "metaobject_reference",
                "value": to_gid("Metaobject", kreation_id)
            }
        ]
        if handle:
            metafields.append({
                "ownerId": owner_id,
                "namespace": self.namespace,
                "key": handle_key(slot),
                "type": FieldType.SINGLE_LINE.value,
                "value": handle
            })
        await self.client.mutate(SET_SLOT, {"metafields": metafields}, "metafieldsSet")

    async def fetch_kreation_rest(self, kreation_id: str) -> Optional[Dict]:
        """Read Kreation via Admin REST"""
        path = f"metaobjects/{numeric_id(kreation_id)}.json"
        status, body = await self.client.rest("GET", path)
        if status == 404:
            return None
        if status >= 400:
            raise RemoteRejection(f"GET {path} rejected with status {status}", remote_status=status)
        raw = body.get("metaobject") if isinstance(body, dict) else None
        return self.normalize_kreation(raw) if raw else None

    async def fetch_kreation_graphql(self, kreation_id: str) -> Optional[Dict]:
        """Read Kreation via GraphQL metaobject(id:)"""
        result = await self.client.graphql(GET_KREATION, {"id": to_gid("Metaobject", kreation_id)})
        raw = result.get("metaobject")
        return self.normalize_kreation(raw) if raw else None

    async def fetch_kreation_by_handle(self, handle: str) -> Optional[Dict]:
        """Read Kreation via GraphQL metaobjectByHandle"""
        result = await self.client.graphql(
            GET_KREATION_BY_HANDLE,
            {"handle": {"type": self.metaobject_type, "handle": handle}}
        )
        raw = result.get("metaobjectByHandle")
        return self.normalize_kreation(raw) if raw else None

    def normalize_kreation(self, kreation: Dict) -> Dict:
        """
        Normalize a Shopify metaobject to standard format
        REST answers carry fields either as a list of {key, value} or as a dict
        """
        raw_fields = kreation.get("fields") or []
        if isinstance(raw_fields, dict):
            fields = {key: value for key, value in raw_fields.items()}
        else:
            fields = {field["key"]: field.get("value") for field in raw_fields}

        return {
            "id": to_gid("Metaobject", kreation.get("id", "")),
            "handle": kreation.get("handle"),
            "type": kreation.get("type", self.metaobject_type),
            "fields": fields
        }
