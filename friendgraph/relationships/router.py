"""
API router for the friends graph.
"""

from typing import List

from fastapi import APIRouter, Query, status

from friendgraph.core.deps import EngineDep
from friendgraph.relationships.schemas import (
    ApiResponse,
    CreateFriendshipRequest,
    SubscribeRequest,
)

router = APIRouter(prefix="/api/friends", tags=["friends"])


@router.post(
    "",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Create a friendship",
)
async def create_friendship(body: CreateFriendshipRequest, engine: EngineDep):
    """
    Make two users friends:
    - **friends**: exactly two email addresses

    Fails if either user has blocked the other or they are already friends.
    """
    await engine.create_friendship(body.friends)
    return ApiResponse(success=True)


@router.get(
    "",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="List a user's friends",
)
async def list_friends(
    engine: EngineDep,
    email: str = Query(..., min_length=1, description="Email of the user"),
):
    result = await engine.list_friends(email)
    return ApiResponse(success=True, friends=result.friends, count=result.count)


@router.get(
    "/common",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="List common friends of two users",
)
async def list_common_friends(
    engine: EngineDep,
    friends: List[str] = Query(..., description="Exactly two email addresses"),
):
    result = await engine.list_common_friends(friends)
    return ApiResponse(success=True, friends=result.friends, count=result.count)


@router.post(
    "/subscribe",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="Subscribe to updates from a user",
)
async def subscribe(body: SubscribeRequest, engine: EngineDep):
    """Record that **requestor** wants updates about **target**."""
    await engine.subscribe(body.requestor, body.target)
    return ApiResponse(success=True)
