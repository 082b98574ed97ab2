"""
Customer API Endpoints
Relays customer creation and search to the commerce backend
"""
from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from typing import Any, Dict
import logging

from app.commerce.factory import get_commerce_backend
from app.errors import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["customers"])

@router.post("/create-customer")
async def create_customer(customer: Dict[str, Any] = Body(...)):
    """
    Create a customer in Shopify
    The remote status code and body are passed through unchanged
    """
    commerce_backend = get_commerce_backend()
    try:
        status, body = await commerce_backend.create_customer(customer)
    except UpstreamError as e:
        logger.error(f"create-customer failed: {e}")
        return e.to_response("Fehler bei Kundenanlage")
    return JSONResponse(status_code=status, content=body)

@router.get("/search-customer")
async def search_customer(query: str = ""):
    """Search customers in Shopify by query string"""
    commerce_backend = get_commerce_backend()
    try:
        status, body = await commerce_backend.search_customers(query)
    except UpstreamError as e:
        logger.error(f"search-customer failed: {e}")
        return e.to_response("Fehler bei Suche")
    return JSONResponse(status_code=status, content=body)
