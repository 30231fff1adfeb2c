"""
Data access for the relationships edge table.

The store holds no business rules. Every backend failure is rolled back and
re-raised as StoreError; nothing is retried. Failures are logged once, by the
HTTP error handlers, not here.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Sequence

from sqlalchemy import Select, and_, delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from friendgraph.core.logging import LatencyLogger, get_logger
from friendgraph.models.relationship import Relationship
from friendgraph.relationships.errors import EdgeConflictError, StoreError
from friendgraph.relationships.schemas import Edge, EdgeStatus

logger = get_logger(__name__)


def _friends_of_query(user: str) -> Select:
    """Targets of user's friend edges that point back at user with a friend edge"""
    outgoing = aliased(Relationship)
    incoming = aliased(Relationship)
    return (
        select(outgoing.target.label("friend"))
        .join(
            incoming,
            and_(
                incoming.requestor == outgoing.target,
                incoming.target == outgoing.requestor,
                incoming.status == EdgeStatus.FRIEND.value,
            ),
        )
        .where(
            outgoing.requestor == user,
            outgoing.status == EdgeStatus.FRIEND.value,
        )
    )


class RelationshipStore:
    """CRUD operations for Relationship edges"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str, **context) -> AsyncIterator[None]:
        with LatencyLogger(f"store.{operation}", logger, **context):
            try:
                yield
            except IntegrityError as e:
                await self.db.rollback()
                raise EdgeConflictError(
                    f"{operation} violates a relationships constraint",
                    details={"operation": operation, "cause": str(e.orig)},
                ) from e
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise StoreError(
                    f"failed to {operation.replace('_', ' ')}: {e}",
                    details={"operation": operation},
                ) from e

    # ============ Writes ============

    async def insert_edge(self, edge: Edge) -> None:
        """Insert a single edge"""
        await self.insert_edges([edge])

    async def insert_edges(self, edges: Sequence[Edge]) -> None:
        """Insert all edges in one transaction, or none of them"""
        async with self._guard("insert_edges", edges=len(edges)):
            self.db.add_all(
                Relationship(
                    requestor=edge.requestor,
                    target=edge.target,
                    status=edge.status.value,
                    created_at=edge.created_at,
                    updated_at=edge.updated_at,
                )
                for edge in edges
            )
            await self.db.commit()

    async def block(self, requestor: str, target: str) -> Edge:
        """Record that requestor blocks target (one direction only)"""
        edge = Edge.new(requestor, target, EdgeStatus.BLOCKED)
        await self.insert_edge(edge)
        logger.info("block.created", requestor=requestor, target=target)
        return edge

    async def delete_edge(self, requestor: str, target: str, status: EdgeStatus) -> int:
        """Delete one directed edge; returns the number of rows removed"""
        async with self._guard(
            "delete_edge", requestor=requestor, target=target, status=status.value
        ):
            result = await self.db.execute(
                delete(Relationship).where(
                    Relationship.requestor == requestor,
                    Relationship.target == target,
                    Relationship.status == status.value,
                )
            )
            await self.db.commit()
            return result.rowcount

    async def delete_all_edges(self) -> int:
        """Empty the table (test fixtures and local resets)"""
        async with self._guard("delete_all_edges"):
            result = await self.db.execute(delete(Relationship))
            await self.db.commit()
            return result.rowcount

    # ============ Reads ============

    async def find_edges_between(self, a: str, b: str) -> List[Edge]:
        """Every edge between a and b, in either direction"""
        async with self._guard("find_edges_between", users=[a, b]):
            result = await self.db.execute(
                select(Relationship).where(
                    or_(
                        and_(Relationship.requestor == a, Relationship.target == b),
                        and_(Relationship.requestor == b, Relationship.target == a),
                    )
                )
            )
            return [Edge.model_validate(row) for row in result.scalars().all()]

    async def edge_exists(self, requestor: str, target: str, status: EdgeStatus) -> bool:
        async with self._guard(
            "edge_exists", requestor=requestor, target=target, status=status.value
        ):
            result = await self.db.execute(
                select(Relationship.id)
                .where(
                    Relationship.requestor == requestor,
                    Relationship.target == target,
                    Relationship.status == status.value,
                )
                .limit(1)
            )
            return result.scalar_one_or_none() is not None

    async def find_friends_of(self, user: str) -> List[str]:
        """Users with friend edges in both directions with user"""
        friends = _friends_of_query(user).subquery()
        async with self._guard("find_friends_of", user=user):
            result = await self.db.execute(
                select(friends.c.friend).distinct().order_by(friends.c.friend)
            )
            return list(result.scalars().all())

    async def find_common_friends_of(self, a: str, b: str) -> List[str]:
        """Mutual friends of both a and b, never including a or b"""
        friends_a = _friends_of_query(a).subquery()
        friends_b = _friends_of_query(b).subquery()
        async with self._guard("find_common_friends_of", users=[a, b]):
            result = await self.db.execute(
                select(friends_a.c.friend)
                .join(friends_b, friends_b.c.friend == friends_a.c.friend)
                .where(friends_a.c.friend.not_in([a, b]))
                .distinct()
                .order_by(friends_a.c.friend)
            )
            return list(result.scalars().all())
