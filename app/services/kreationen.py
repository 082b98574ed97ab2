"""
Kreation service
Saves Kreationen into customer slots and reads them back
"""
from typing import Any, Dict, List, Optional
import logging
import re

from app.config import settings, SlotExhaustionPolicy
from app.commerce.interface import CommerceBackend
from app.errors import ForeignKreation, KreationNotFound, MiddlewareError, ValidationError
from app.kreation.fields import cleared_fields, map_fields
from app.kreation.slots import SLOT_NAMES, choose_slot, handle_key, slot_holding
from app.utils.fallback import Strategy, first_successful

logger = logging.getLogger(__name__)

CUSTOMER_ID = re.compile(r"^(gid://shopify/Customer/)?\d+$")

def customer_key(value: Any) -> str:
    """
    Customer id as string: numeric id or Customer GID

    Raises:
        ValidationError: missing, or not a whole number / Customer GID
    """
    if value is None or str(value).strip() == "":
        raise ValidationError("customerId fehlt")
    if isinstance(value, bool):
        raise ValidationError("customerId ungültig")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError("customerId ungültig")
        value = int(value)
    value = str(value).strip()
    if not CUSTOMER_ID.match(value):
        raise ValidationError("customerId ungültig")
    return value

def placeholder_kreation(slot: str, kreation_id: str, handle: Optional[str] = None) -> Dict:
    """Stand-in entry for a reference no strategy could resolve"""
    return {
        "slot": slot,
        "id": kreation_id,
        "handle": handle,
        "type": None,
        "fields": {},
        "placeholder": True
    }

class KreationService:
    def __init__(
        self,
        backend: CommerceBackend,
        placeholder: Optional[str] = None,
        exhaustion_policy: Optional[SlotExhaustionPolicy] = None,
        legacy_handles: Optional[bool] = None,
        read_placeholder: Optional[bool] = None
    ):
        self.backend = backend
        if placeholder is None:
            placeholder = settings.EMPTY_FIELD_PLACEHOLDER
        # Empty placeholder setting means empty values are dropped
        self.placeholder = placeholder or None
        self.exhaustion_policy = exhaustion_policy or settings.SLOT_EXHAUSTION_POLICY
        self.legacy_handles = settings.LEGACY_HANDLE_FIELDS if legacy_handles is None else legacy_handles
        self.read_placeholder = settings.KREATION_READ_PLACEHOLDER if read_placeholder is None else read_placeholder

    async def save_kreation(
        self,
        customer_id: Any,
        kreation: Any,
        metaobject_id: Any = None
    ) -> Dict:
        """
        Save a Kreation for a customer

        With metaobject_id the existing Kreation is replaced and no slot is
        touched; it must occupy one of the customer's slots. Otherwise a new
        Kreation is created and linked into the first free slot.

        Returns:
            {"success": True, "slot": ..., "id": ...}

        Raises:
            ValidationError: customerId or kreation missing or malformed
            ForeignKreation: metaobject_id is not linked to the customer
            SlotsExhausted: no free slot; payload carries the created id
            UpstreamError: Shopify failure; payload carries the created id
                when the Kreation already exists remotely
        """
        customer_id = customer_key(customer_id)
        if not isinstance(kreation, dict) or not kreation:
            raise ValidationError("kreation fehlt")
        if metaobject_id is not None and (isinstance(metaobject_id, bool) or not isinstance(metaobject_id, (str, int))):
            raise ValidationError("metaobjectId ungültig")

        fields = map_fields(kreation, placeholder=self.placeholder)

        if metaobject_id not in (None, ""):
            existing = await self.backend.get_slot_metafields(customer_id)
            slot = slot_holding(existing, str(metaobject_id))
            if slot is None:
                raise ForeignKreation(
                    "Kreation gehört nicht zu diesem Kunden",
                    {"id": str(metaobject_id)}
                )
            fields = fields + cleared_fields(fields)
            updated = await self.backend.update_kreation(str(metaobject_id), fields)
            logger.info(f"Updated Kreation {updated['id']} in {slot} for customer {customer_id}")
            return {"success": True, "slot": slot, "id": updated["id"]}

        created = await self.backend.create_kreation(fields)
        kreation_id = created["id"]

        # The Kreation exists remotely from here on; failures report its id
        try:
            existing = await self.backend.get_slot_metafields(customer_id)
            slot = choose_slot(existing.keys(), self.exhaustion_policy)
            # An overwritten slot may still carry the previous Kreation's handle
            if self.legacy_handles or existing.get(handle_key(slot)):
                handle = created.get("handle")
            else:
                handle = None
            await self.backend.set_slot(customer_id, slot, kreation_id, handle=handle)
        except MiddlewareError as e:
            logger.error(f"Kreation {kreation_id} created but not linked to customer {customer_id}: {e}")
            e.payload.setdefault("id", kreation_id)
            raise

        logger.info(f"Saved Kreation {kreation_id} for customer {customer_id} in {slot}")
        return {"success": True, "slot": slot, "id": kreation_id}

    async def get_kreationen(self, customer_id: Any) -> Dict[str, List[Dict]]:
        """
        Read all Kreationen linked to a customer, in slot order

        Returns:
            {"kreationen": [{"slot", "id", "handle", "type", "fields"}, ...]}
        """
        customer_id = customer_key(customer_id)

        metafields = await self.backend.get_slot_metafields(customer_id)
        kreationen = []
        for slot in SLOT_NAMES:
            reference = metafields.get(slot)
            if not reference:
                continue
            kreationen.append(await self.resolve(slot, reference, metafields.get(handle_key(slot))))
        return {"kreationen": kreationen}

    async def resolve(self, slot: str, reference: str, handle: Optional[str] = None) -> Dict:
        """Resolve one slot reference: REST, GraphQL, handle, then placeholder"""
        strategies: List[Strategy] = [
            ("rest", lambda: self.backend.fetch_kreation_rest(reference)),
            ("graphql", lambda: self.backend.fetch_kreation_graphql(reference)),
        ]
        if handle:
            strategies.append(("handle", lambda: self.backend.fetch_kreation_by_handle(handle)))
        if self.read_placeholder:
            strategies.append(("placeholder", lambda: _as_coroutine(placeholder_kreation(slot, reference, handle))))

        found = await first_successful(strategies)
        if found is None:
            raise KreationNotFound(
                f"Kreation {reference} nicht gefunden",
                {"slot": slot, "id": reference}
            )
        return {"slot": slot, **found}

async def _as_coroutine(value: Any) -> Any:
    return value
