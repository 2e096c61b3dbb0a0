"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from liverisk.api.v1.endpoints import risk, stream

router = APIRouter()

# Include all endpoint routers
router.include_router(risk.router, prefix="/risk", tags=["Risk Engine"])
router.include_router(stream.router, prefix="/stream", tags=["Real-Time Streaming"])
