"""
Kreation Middleware - FastAPI Backend
Forwards storefront requests to the Shopify Admin API
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.config import settings, get_shopify_info, warn_if_unconfigured
from app.errors import MiddlewareError, ValidationError
from app.api.customers import router as customers_router
from app.api.kreationen import router as kreationen_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

warn_if_unconfigured()

app = FastAPI(
    title="Kreation Middleware API",
    description="Customer and perfume Kreation middleware for the Shopify Admin API",
    version="1.0.0"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include API routers
app.include_router(customers_router)
app.include_router(kreationen_router)

@app.exception_handler(MiddlewareError)
async def middleware_error_handler(request: Request, exc: MiddlewareError):
    """Render middleware errors as {"error": ...} with their status code"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return exc.to_response()

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies answer 400 like every other validation error"""
    problems = [
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.info(f"{request.method} {request.url.path} rejected: {problems}")
    return ValidationError("Ungültige Anfrage", {"details": problems}).to_response()

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "status": "ready",
        "routes": [
            "POST /create-customer",
            "GET /search-customer",
            "POST /save-kreation",
            "GET /get-kreationen"
        ],
        "shopify": get_shopify_info()
    }

@app.get("/health")
async def health_check():
    """Health check endpoint - simple and fast"""
    return {
        "status": "healthy",
        "shopify": {
            "store": settings.SHOPIFY_STORE_DOMAIN,
            "connected": bool(settings.SHOPIFY_TOKEN)
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
