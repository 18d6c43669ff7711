"""API Routers Package.

Usage in main.py:
    from api.routers import analysis_router, action_base_router, databases_router, notes_router

    app.include_router(analysis_router, prefix="/analysis", tags=["analysis"])
"""

from .action_base import router as action_base_router
from .analysis import router as analysis_router
from .databases import router as databases_router
from .notes import router as notes_router

__all__ = [
    "action_base_router",
    "analysis_router",
    "databases_router",
    "notes_router",
]
