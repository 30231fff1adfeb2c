"""
Dependency Injection

FastAPI dependencies for routes.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from friendgraph.infra.db import get_db
from friendgraph.relationships.engine import RelationshipEngine
from friendgraph.relationships.store import RelationshipStore


def get_relationship_store(db: AsyncSession = Depends(get_db)) -> RelationshipStore:
    return RelationshipStore(db)


def get_relationship_engine(
    store: RelationshipStore = Depends(get_relationship_store),
) -> RelationshipEngine:
    return RelationshipEngine(store)


# Type aliases for common dependencies
SessionDep = Annotated[AsyncSession, Depends(get_db)]
EngineDep = Annotated[RelationshipEngine, Depends(get_relationship_engine)]
