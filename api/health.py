"""
Health Check and Utility Endpoints
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cache import cache_manager
from sources import source_manager
from registry import registry
from config import config

health_router = APIRouter()

VERSION = "1.0.0"


@health_router.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return JSONResponse({
        "status": "healthy",
        "version": VERSION
    })


@health_router.get("/api/status")
async def api_status():
    """Detailed API status: configuration, sources, cache and catalog."""
    return JSONResponse({
        "status": "healthy",
        "version": VERSION,
        "config": {
            "fred_api_configured": bool(config.fred_api_key),
            "formula_max_depth": config.formula_max_depth,
            "data_cache_ttl": config.data_cache_ttl,
        },
        "data_sources": source_manager.available_sources(),
        "cache": cache_manager.stats(),
        "catalog": {
            "loaded": registry.loaded,
            "indicators": len(registry.list_indicators(limit=100000)),
            "calculations": len(registry.list_calculations(limit=100000)),
        },
    })


@health_router.post("/api/cache/clear")
async def clear_cache():
    """Clear all caches (admin endpoint)."""
    cache_manager.clear_all()
    return JSONResponse({
        "status": "success",
        "message": "All caches cleared"
    })


@health_router.get("/api/sources")
async def list_sources():
    """List all available data sources."""
    return JSONResponse({
        "sources": source_manager.available_sources()
    })
