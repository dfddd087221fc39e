"""
API Routers package.

Each module contains a FastAPI router for a specific domain.
"""

from .stock import router as stock_router

__all__ = [
    "stock_router",
]
