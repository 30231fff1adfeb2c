"""
Health check endpoints
"""

from fastapi import APIRouter

from friendgraph.core.deps import SessionDep
from friendgraph.infra.db import check_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: SessionDep):
    """
    Check health of the API and its database
    """
    return {
        "api": "ok",
        "db": await check_db(db),
    }
