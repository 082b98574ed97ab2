"""
Middleware Configuration
Central place to configure the Shopify connection and Kreation behaviour
Change policies here without modifying service code
"""
from enum import Enum
from pydantic_settings import BaseSettings
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class SlotExhaustionPolicy(str, Enum):
    """What to do when all five Kreation slots of a customer are taken"""
    REJECT = "reject"                    # Answer 400 "Alle Slots belegt"
    OVERWRITE_LAST = "overwrite_last"    # Reuse kreation_5 (older revisions did this)

class Settings(BaseSettings):
    """Application Settings"""

    # ============================================
    # SHOPIFY CONFIGURATION
    # ============================================

    SHOPIFY_STORE_DOMAIN: str = "la-profumoteca-gmbh.myshopify.com"
    # Admin API access token. Missing token is logged, not fatal.
    SHOPIFY_TOKEN: Optional[str] = None
    SHOPIFY_API_VERSION: str = "2023-10"

    # Timeout for every outbound call (seconds)
    HTTP_TIMEOUT: float = 30.0

    # ============================================
    # KREATION SETTINGS
    # ============================================

    # Metaobject definition type holding the perfume creations
    METAOBJECT_TYPE: str = "parfumkreation"

    # Namespace of the kreation_1..kreation_5 customer metafields
    METAFIELD_NAMESPACE: str = "custom"

    # Also write kreation_N_handle text metafields next to the references
    LEGACY_HANDLE_FIELDS: bool = True

    # Replacement for empty field values. Empty string means: omit the field.
    EMPTY_FIELD_PLACEHOLDER: str = "keine"

    SLOT_EXHAUSTION_POLICY: SlotExhaustionPolicy = SlotExhaustionPolicy.REJECT

    # Return a stand-in entry for references that cannot be resolved,
    # otherwise answer 404
    KREATION_READ_PLACEHOLDER: bool = True

    # ============================================
    # APPLICATION SETTINGS
    # ============================================

    APP_NAME: str = "Kreation Middleware"
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True

# Global settings instance
settings = Settings()

def get_shopify_info() -> dict:
    """Get current Shopify connection info (never includes the token)"""
    return {
        "store": settings.SHOPIFY_STORE_DOMAIN,
        "api_version": settings.SHOPIFY_API_VERSION,
        "connected": bool(settings.SHOPIFY_TOKEN),
        "metaobject_type": settings.METAOBJECT_TYPE,
    }

def warn_if_unconfigured() -> bool:
    """Log a warning when no access token is configured. Returns True if configured."""
    if not settings.SHOPIFY_TOKEN:
        logger.warning(
            "SHOPIFY_TOKEN is not set; requests to %s will fail with an authentication error",
            settings.SHOPIFY_STORE_DOMAIN,
        )
        return False
    return True
