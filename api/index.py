"""
Coffee Cart - Main FastAPI Application

Single entry point for the storefront cart API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logging import get_logger
from core.routers import webapp_router
from core.services.database import init_database

logger = get_logger(__name__)


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    try:
        await init_database()
    except ValueError as e:
        # Catalog settings missing: cart reads still work, adds will fail
        logger.warning(f"Catalog database not initialized: {e}")
    yield


app = FastAPI(
    title="Coffee Cart",
    description="Per-user shopping cart and pricing API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(webapp_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "coffee-cart"}
