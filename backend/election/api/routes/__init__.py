"""API Routes module"""
from fastapi import APIRouter

from .election import router as election_router
from .voters import router as voters_router
from .proposals import router as proposals_router
from .votes import router as votes_router
from .events import router as events_router

# Main API router
api_router = APIRouter()

api_router.include_router(election_router, prefix="/election", tags=["Election"])
api_router.include_router(voters_router, prefix="/voters", tags=["Voters"])
api_router.include_router(proposals_router, prefix="/proposals", tags=["Proposals"])
api_router.include_router(votes_router, tags=["Votes"])
api_router.include_router(events_router, prefix="/events", tags=["Events"])

__all__ = ["api_router"]
