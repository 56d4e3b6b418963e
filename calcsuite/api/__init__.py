"""
API routes for the calculator suite.
"""

from fastapi import APIRouter

from calcsuite.api import calculations, scores

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(scores.router, prefix="/scores", tags=["scores"])
