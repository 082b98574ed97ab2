"""
Shared fixtures: an in-memory commerce backend and a TestClient wired to it
"""
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from app.commerce import factory
from app.commerce.interface import CommerceBackend
from app.errors import TransportError
from app.kreation.fields import FieldSpec

class FakeCommerceBackend(CommerceBackend):
    """Keeps customers, Kreationen and slot metafields in dictionaries"""

    def __init__(self):
        self.kreationen: Dict[str, Dict] = {}
        self.metafields: Dict[str, Dict[str, str]] = {}
        self.customers: List[Dict] = []
        self.calls: List[Tuple[str, Any]] = []
        self.rest_available = True
        self.graphql_available = True
        self.fail_set_slot = False
        self.fail_transport = False
        self._next_id = 1

    def _check_transport(self):
        if self.fail_transport:
            raise TransportError("connection refused")

    async def create_customer(self, customer: Dict[str, Any]) -> Tuple[int, Dict]:
        self._check_transport()
        self.calls.append(("create_customer", customer))
        if not customer.get("email"):
            return 422, {"errors": {"email": ["can't be blank"]}}
        created = dict(customer, id=len(self.customers) + 100)
        self.customers.append(created)
        return 201, {"customer": created}

    async def search_customers(self, query: str = "") -> Tuple[int, Dict]:
        self._check_transport()
        self.calls.append(("search_customers", query))
        found = [c for c in self.customers if query.lower() in str(c.get("email", "")).lower()]
        return 200, {"customers": found}

    async def create_kreation(self, fields: List[FieldSpec]) -> Dict:
        self._check_transport()
        self.calls.append(("create_kreation", fields))
        kreation_id = f"gid://shopify/Metaobject/{self._next_id}"
        handle = f"parfumkreation-{self._next_id}"
        self._next_id += 1
        self.kreationen[kreation_id] = {
            "id": kreation_id,
            "handle": handle,
            "type": "parfumkreation",
            "fields": [spec.as_input() for spec in fields]
        }
        return self.normalize_kreation(self.kreationen[kreation_id])

    async def update_kreation(self, kreation_id: str, fields: List[FieldSpec]) -> Dict:
        self._check_transport()
        self.calls.append(("update_kreation", (kreation_id, fields)))
        stored = self.kreationen.setdefault(
            kreation_id,
            {"id": kreation_id, "handle": None, "type": "parfumkreation", "fields": []}
        )
        stored["fields"] = [spec.as_input() for spec in fields if spec.value != ""]
        return self.normalize_kreation(stored)

    async def get_slot_metafields(self, customer_id: str) -> Dict[str, str]:
        self._check_transport()
        self.calls.append(("get_slot_metafields", customer_id))
        return dict(self.metafields.get(customer_id, {}))

    async def set_slot(
        self,
        customer_id: str,
        slot: str,
        kreation_id: str,
        handle: Optional[str] = None
    ) -> None:
        self.calls.append(("set_slot", (customer_id, slot, kreation_id, handle)))
        if self.fail_set_slot:
            raise TransportError("timeout while writing metafield")
        slots = self.metafields.setdefault(customer_id, {})
        slots[slot] = kreation_id
        if handle:
            slots[f"{slot}_handle"] = handle

    async def fetch_kreation_rest(self, kreation_id: str) -> Optional[Dict]:
        self.calls.append(("fetch_kreation_rest", kreation_id))
        if not self.rest_available:
            return None
        raw = self.kreationen.get(kreation_id)
        return self.normalize_kreation(raw) if raw else None

    async def fetch_kreation_graphql(self, kreation_id: str) -> Optional[Dict]:
        self.calls.append(("fetch_kreation_graphql", kreation_id))
        if not self.graphql_available:
            raise TransportError("graphql unreachable")
        raw = self.kreationen.get(kreation_id)
        return self.normalize_kreation(raw) if raw else None

    async def fetch_kreation_by_handle(self, handle: str) -> Optional[Dict]:
        self.calls.append(("fetch_kreation_by_handle", handle))
        for raw in self.kreationen.values():
            if raw["handle"] == handle:
                return self.normalize_kreation(raw)
        return None

    def normalize_kreation(self, kreation: Dict) -> Dict:
        return {
            "id": kreation["id"],
            "handle": kreation.get("handle"),
            "type": kreation.get("type"),
            "fields": {field["key"]: field["value"] for field in kreation.get("fields", [])}
        }

    def called(self, name: str) -> List[Any]:
        return [args for call, args in self.calls if call == name]

@pytest.fixture
def backend():
    return FakeCommerceBackend()

@pytest.fixture
def client(backend, monkeypatch):
    monkeypatch.setattr(factory, "_commerce_backend", backend)
    from app.main import app
    return TestClient(app)
