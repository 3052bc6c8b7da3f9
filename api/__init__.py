"""API module - FastAPI routers and endpoints."""

from .formula import formula_router
from .health import health_router

__all__ = ['formula_router', 'health_router']
