"""
Storefront API - Main FastAPI Application

Single entry point for the cart, favorites and checkout endpoints used by
the storefront SPA.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from core import config
from core.logging import get_logger
from core.routers.storefront import router as storefront_router

logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


app = FastAPI(
    title="Storefront API",
    description="Cart, favorites and checkout API for the storefront SPA",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    # Browsers reject credentials with a wildcard origin
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


app.include_router(storefront_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront", "storage": config.STORAGE_BACKEND}
