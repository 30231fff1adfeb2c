"""
Errors raised by the relationship engine and store.
"""

from typing import Dict, Optional

from fastapi import status

from friendgraph.core.errors import AppError, ConflictError, NotFoundError, ValidationError


# ============ Input validation ============

class InvalidArgumentCount(ValidationError):
    def __init__(self, message: str = "incorrect number of friends", expected: int = 2, got: int = 0):
        super().__init__(
            message=message,
            code="INVALID_ARGUMENT_COUNT",
            details={"expected": expected, "got": got},
        )


class InvalidIdentifier(ValidationError):
    def __init__(self, message: str = "invalid email being submitted", identifier: Optional[str] = None):
        super().__init__(
            message=message,
            code="INVALID_IDENTIFIER",
            details={"identifier": identifier} if identifier is not None else None,
        )


class MissingArgument(ValidationError):
    def __init__(self, message: str):
        super().__init__(message=message, code="MISSING_ARGUMENT")


class SelfFriendshipNotAllowed(ValidationError):
    def __init__(self, message: str = "cannot be friends with oneself"):
        super().__init__(message=message, code="SELF_FRIENDSHIP_NOT_ALLOWED")


class SelfSubscriptionNotAllowed(ValidationError):
    def __init__(self, message: str = "cannot subscribe to oneself"):
        super().__init__(message=message, code="SELF_SUBSCRIPTION_NOT_ALLOWED")


# ============ Business rules ============

class RelationshipBlocked(ConflictError):
    def __init__(self, message: str):
        super().__init__(message=message, code="RELATIONSHIP_BLOCKED")


class AlreadyFriends(ConflictError):
    def __init__(self, message: str):
        super().__init__(message=message, code="ALREADY_FRIENDS")


class NoFriends(NotFoundError):
    def __init__(self, message: str = "user doesn't have any friends"):
        super().__init__(message=message, code="NO_FRIENDS")


class NoCommonFriends(NotFoundError):
    def __init__(self, message: str = "users don't have any common friends"):
        super().__init__(message=message, code="NO_COMMON_FRIENDS")


# ============ Store ============

class StoreError(AppError):
    """The relational backend failed; never retried"""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            code="STORE_ERROR",
            details=details,
        )


class EdgeConflictError(StoreError):
    """An insert violated a table constraint (duplicate edge or self edge)"""
