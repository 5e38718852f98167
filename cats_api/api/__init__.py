"""
API Router
"""

from fastapi import APIRouter

from cats_api.api import cats

router = APIRouter()

# Include all endpoint routers
router.include_router(cats.router)

__all__ = ["router"]
