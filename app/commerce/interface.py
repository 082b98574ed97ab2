"""
Commerce Backend Interface
Abstract base class for the remote platform holding customers and Kreationen
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from app.kreation.fields import FieldSpec

class CommerceBackend(ABC):
    """Abstract interface for commerce backends"""

    @abstractmethod
    async def create_customer(self, customer: Dict[str, Any]) -> Tuple[int, Dict]:
        """
        Create a customer

        Args:
            customer: Customer fields as sent by the frontend

        Returns:
            (remote status code, remote body) to be relayed unchanged
        """
        pass

    @abstractmethod
    async def search_customers(self, query: str = "") -> Tuple[int, Dict]:
        """
        Search customers by query string

        Returns:
            (remote status code, remote body) to be relayed unchanged
        """
        pass

    @abstractmethod
    async def create_kreation(self, fields: List[FieldSpec]) -> Dict:
        """
        Create a Kreation object

        Returns:
            Normalized Kreation dictionary, at least "id" and "handle"
        """
        pass

    @abstractmethod
    async def update_kreation(self, kreation_id: str, fields: List[FieldSpec]) -> Dict:
        """
        Update an existing Kreation object with the given fields

        Returns:
            Normalized Kreation dictionary
        """
        pass

    @abstractmethod
    async def get_slot_metafields(self, customer_id: str) -> Dict[str, str]:
        """
        Read the customer's Kreation metafields

        Returns:
            Metafield key to value for every non-empty metafield in the
            Kreation namespace (slot references and legacy handle fields)
        """
        pass

    @abstractmethod
    async def set_slot(
        self,
        customer_id: str,
        slot: str,
        kreation_id: str,
        handle: Optional[str] = None
    ) -> None:
        """
        Point a slot metafield at a Kreation

        Args:
            customer_id: Customer owning the slot
            slot: Slot name, e.g. "kreation_1"
            kreation_id: Referenced Kreation
            handle: When given, also written to the legacy handle metafield
        """
        pass

    @abstractmethod
    async def fetch_kreation_rest(self, kreation_id: str) -> Optional[Dict]:
        """Read a Kreation through the REST API. None when not found."""
        pass

    @abstractmethod
    async def fetch_kreation_graphql(self, kreation_id: str) -> Optional[Dict]:
        """Read a Kreation through the GraphQL API. None when not found."""
        pass

    @abstractmethod
    async def fetch_kreation_by_handle(self, handle: str) -> Optional[Dict]:
        """Read a Kreation by its handle. None when not found."""
        pass

    @abstractmethod
    def normalize_kreation(self, kreation: Dict) -> Dict:
        """
        Normalize a Kreation object to standard format

        Standard format:
        {
            "id": str,
            "handle": Optional[str],
            "type": Optional[str],
            "fields": Dict[str, str]
        }
        """
        pass
