"""
Pydantic schemas for the relationship graph.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from friendgraph.core.time import utcnow


class EdgeStatus(str, Enum):
    FRIEND = "friend"
    BLOCKED = "blocked"
    SUBSCRIBED = "subscribed"


# ============ Domain ============

class Edge(BaseModel):
    """One directed relationship record"""
    requestor: str
    target: str
    status: EdgeStatus
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @classmethod
    def new(cls, requestor: str, target: str, status: EdgeStatus) -> "Edge":
        """Edge stamped with a single 'now' for both timestamps"""
        now = utcnow()
        return cls(requestor=requestor, target=target, status=status, created_at=now, updated_at=now)


class FriendsList(BaseModel):
    """Result of a friends or common-friends query"""
    friends: List[str]
    count: int

    @classmethod
    def of(cls, friends: List[str]) -> "FriendsList":
        return cls(friends=friends, count=len(friends))


# ============ Requests ============

class CreateFriendshipRequest(BaseModel):
    """Body of POST /api/friends"""
    friends: List[str] = Field(..., description="Exactly two email addresses")


class SubscribeRequest(BaseModel):
    """Body of POST /api/friends/subscribe"""
    requestor: str = Field("", description="Subscriber email")
    target: str = Field("", description="Email of the user to receive updates about")


# ============ Responses ============

class ApiResponse(BaseModel):
    """Envelope returned by every friends endpoint"""
    success: bool
    errors: Optional[str] = None
    code: Optional[str] = None
    friends: Optional[List[str]] = None
    count: Optional[int] = None
