"""
API Router
"""

from fastapi import APIRouter

from friendgraph.api.health import router as health_router
from friendgraph.relationships.router import router as friends_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(friends_router)
