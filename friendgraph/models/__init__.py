from friendgraph.models.base import Base
from friendgraph.models.relationship import Relationship

__all__ = [
    "Base",
    "Relationship",
]
