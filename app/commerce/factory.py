"""
Commerce Backend Factory
Provides the commerce backend used by the routes
"""
from typing import Optional

from app.commerce.interface import CommerceBackend
from app.commerce.shopify_backend import ShopifyBackend

# Singleton instance
_commerce_backend: Optional[CommerceBackend] = None

def get_commerce_backend() -> CommerceBackend:
    """
    Get or create commerce backend instance
    This is the main entry point for remote operations
    """
    global _commerce_backend
    if _commerce_backend is None:
        _commerce_backend = ShopifyBackend()
    return _commerce_backend
