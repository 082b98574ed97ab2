"""
Kreation API Endpoints
Saves perfume Kreationen into customer slots and lists them
"""
from fastapi import APIRouter
from pydantic import BaseModel
from typing import Any, Optional
import logging

from app.commerce.factory import get_commerce_backend
from app.errors import UpstreamError
from app.services.kreationen import KreationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["kreationen"])

class SaveKreationRequest(BaseModel):
    """Body of /save-kreation, loosely typed: the service answers 400 for malformed values"""
    customerId: Any = None
    kreation: Any = None
    metaobjectId: Any = None  # Update this Kreation instead of creating one

@router.post("/save-kreation")
async def save_kreation(request: SaveKreationRequest):
    """
    Save a Kreation and link it into the customer's first free slot
    Returns {success, slot, id}; with metaobjectId the Kreation is updated instead
    """
    service = KreationService(get_commerce_backend())
    try:
        return await service.save_kreation(
            request.customerId,
            request.kreation,
            metaobject_id=request.metaobjectId
        )
    except UpstreamError as e:
        logger.error(f"save-kreation failed for customer {request.customerId}: {e}")
        return e.to_response("Fehler beim Speichern")

@router.get("/get-kreationen")
async def get_kreationen(customerId: Optional[str] = None):
    """List the Kreationen linked to a customer"""
    service = KreationService(get_commerce_backend())
    try:
        return await service.get_kreationen(customerId)
    except UpstreamError as e:
        logger.error(f"get-kreationen failed for customer {customerId}: {e}")
        return e.to_response("Fehler beim Laden")
