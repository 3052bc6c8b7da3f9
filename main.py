"""
Derived Series Service - Formula-driven indicators over economic data

Features:
- Formula engine: SUM, AVG, MIN, MAX, COUNT, ROC, MA, RSI, MOMENTUM,
  CORRELATION, REGRESSION over indicator series
- 6 data sources: FRED, World Bank, DBnomics, Eurostat, CSV, manual
- Catalog of indicators and saved calculations
- Cached fetches with stampede protection
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

# Import modules
from config import config
from registry import registry
from sources import source_manager
from api import formula_router, health_router

logging.basicConfig(
    level=config.log_level,
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
)
logger = logging.getLogger(__name__)


# =============================================================================
# STARTUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the application."""
    logger.info("=" * 60)
    logger.info("Derived Series Starting Up")
    logger.info("=" * 60)

    # Load catalog (indicators, calculations)
    registry.load()

    logger.info(f"FRED API key: {'SET' if config.fred_api_key else 'NOT SET'}")
    logger.info(f"Formula max depth: {config.formula_max_depth}")
    logger.info(f"Data cache TTL: {config.data_cache_ttl}s")
    for source_type, available in source_manager.available_sources().items():
        logger.info(f"  {source_type}: {'available' if available else 'unavailable'}")

    logger.info("Ready to serve requests")
    yield
    logger.info("Derived Series shutting down")


# =============================================================================
# APP INITIALIZATION
# =============================================================================

app = FastAPI(
    title="Derived Series",
    description="Calculated economic indicators from formulas",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS for development (formula builder runs on different port)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(formula_router)
app.include_router(health_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


# =============================================================================
# RUN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
