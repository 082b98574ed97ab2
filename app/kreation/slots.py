"""
Kreation Slot Allocation
A customer links up to five Kreationen through the metafields kreation_1..kreation_5
"""
from typing import Iterable, Mapping, Optional, Tuple

from app.config import SlotExhaustionPolicy
from app.errors import SlotsExhausted

SLOT_NAMES: Tuple[str, ...] = (
    "kreation_1",
    "kreation_2",
    "kreation_3",
    "kreation_4",
    "kreation_5",
)

HANDLE_SUFFIX = "_handle"

def handle_key(slot: str) -> str:
    """Key of the legacy text metafield mirroring the slot's Kreation handle"""
    return f"{slot}{HANDLE_SUFFIX}"

def find_free_slot(existing_keys: Iterable[str]) -> Optional[str]:
    """
    First slot name not in existing_keys

    Returns:
        Slot name, or None when all five are occupied
    """
    taken = set(existing_keys)
    for slot in SLOT_NAMES:
        if slot not in taken:
            return slot
    return None

def choose_slot(
    existing_keys: Iterable[str],
    policy: SlotExhaustionPolicy = SlotExhaustionPolicy.REJECT
) -> str:
    """Free slot for a new Kreation, applying the exhaustion policy when none is left"""
    slot = find_free_slot(existing_keys)
    if slot is not None:
        return slot
    if policy == SlotExhaustionPolicy.OVERWRITE_LAST:
        return SLOT_NAMES[-1]
    raise SlotsExhausted()

def same_reference(left: str, right: str) -> bool:
    """Compare Kreation references, GIDs and plain numeric ids alike"""
    return str(left).rsplit("/", 1)[-1] == str(right).rsplit("/", 1)[-1]

def slot_holding(metafields: Mapping[str, str], kreation_id: str) -> Optional[str]:
    """Slot whose reference points at kreation_id, or None"""
    for slot in SLOT_NAMES:
        reference = metafields.get(slot)
        if reference and same_reference(reference, kreation_id):
            return slot
    return None
