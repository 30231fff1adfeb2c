"""
Relationship engine

Business rules of the relationship graph: forming friendships, listing friends
and common friends, recording subscriptions. All state lives in the store
handed to the constructor.
"""

from typing import List, Sequence

from friendgraph.core.logging import get_logger
from friendgraph.core.validation import is_valid_identifier
from friendgraph.relationships.errors import (
    AlreadyFriends,
    EdgeConflictError,
    InvalidArgumentCount,
    InvalidIdentifier,
    MissingArgument,
    NoCommonFriends,
    NoFriends,
    RelationshipBlocked,
    SelfFriendshipNotAllowed,
    SelfSubscriptionNotAllowed,
)
from friendgraph.relationships.schemas import Edge, EdgeStatus, FriendsList
from friendgraph.relationships.store import RelationshipStore

logger = get_logger(__name__)


def _require_pair(users: Sequence[str], message: str) -> None:
    if users is None or len(users) != 2:
        raise InvalidArgumentCount(message, got=0 if users is None else len(users))


def _describe(edges: List[Edge], status: EdgeStatus, verb: str) -> str:
    return ",".join(f"{e.requestor} {verb} {e.target}" for e in edges if e.status == status)


class RelationshipEngine:
    def __init__(self, store: RelationshipStore):
        self.store = store

    async def create_friendship(self, users: Sequence[str]) -> None:
        """
        Make users[0] and users[1] friends.

        Both directed friend edges are written in one transaction, so a
        failure never leaves half a friendship behind.
        """
        _require_pair(users, "incorrect number of friends")
        for user in users:
            if not is_valid_identifier(user):
                raise InvalidIdentifier(identifier=user)

        requestor, target = users
        if requestor == target:
            raise SelfFriendshipNotAllowed()

        edges = await self.store.find_edges_between(requestor, target)
        if any(e.status == EdgeStatus.BLOCKED for e in edges):
            raise RelationshipBlocked(_describe(edges, EdgeStatus.BLOCKED, "has blocked"))
        if any(e.status == EdgeStatus.FRIEND for e in edges):
            raise AlreadyFriends(_describe(edges, EdgeStatus.FRIEND, "is already a friend of"))

        forward = Edge.new(requestor, target, EdgeStatus.FRIEND)
        backward = forward.model_copy(update={"requestor": target, "target": requestor})
        try:
            await self.store.insert_edges([forward, backward])
        except EdgeConflictError as e:
            # A concurrent request committed the same pair first
            raise AlreadyFriends(f"{requestor} is already a friend of {target}") from e

        logger.info("friendship.created", requestor=requestor, target=target)

    async def list_friends(self, user: str) -> FriendsList:
        if not is_valid_identifier(user):
            raise InvalidIdentifier("invalid user", identifier=user)

        friends = await self.store.find_friends_of(user)
        if not friends:
            raise NoFriends()
        return FriendsList.of(friends)

    async def list_common_friends(self, users: Sequence[str]) -> FriendsList:
        """Friends shared by exactly two users; the order of the two is irrelevant."""
        _require_pair(users, "exactly two users are required")
        for user in users:
            if not is_valid_identifier(user):
                raise InvalidIdentifier(identifier=user)

        a, b = users
        friends = await self.store.find_common_friends_of(a, b)
        if not friends:
            raise NoCommonFriends()
        return FriendsList.of(friends)

    async def subscribe(self, requestor: str, target: str) -> None:
        """
        Record that requestor wants updates about target.
        Subscribing again is a no-op.
        """
        missing = []
        if not requestor:
            missing.append("no requestor was provided")
        if not target:
            missing.append("no target was provided")
        if missing:
            raise MissingArgument(",".join(missing))

        for user in (requestor, target):
            if not is_valid_identifier(user):
                raise InvalidIdentifier(identifier=user)
        if requestor == target:
            raise SelfSubscriptionNotAllowed()

        if await self.store.edge_exists(requestor, target, EdgeStatus.SUBSCRIBED):
            return
        try:
            await self.store.insert_edge(Edge.new(requestor, target, EdgeStatus.SUBSCRIBED))
        except EdgeConflictError:
            # Lost a race with an identical subscription
            return

        logger.info("subscription.created", requestor=requestor, target=target)
