from uuid import uuid4

from sqlalchemy import CheckConstraint, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from friendgraph.models.base import Base, TimestampMixin


class Relationship(Base, TimestampMixin):
    """One directed edge of the relationship graph.

    A friendship is the pair (a, b, 'friend') + (b, a, 'friend'); blocks and
    subscriptions are single edges.
    """

    __tablename__ = "relationships"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: str(uuid4()))

    requestor: Mapped[str] = mapped_column(String(255), nullable=False)
    target: Mapped[str] = mapped_column(String(255), nullable=False)

    # status: 'friend' | 'blocked' | 'subscribed'
    status: Mapped[str] = mapped_column(String(16), nullable=False)

    __table_args__ = (
        CheckConstraint("requestor <> target", name="chk_relationships_not_self"),
        # One edge of each kind per direction
        UniqueConstraint("requestor", "target", "status", name="uq_relationships_pair_status"),
        Index("idx_relationships_requestor", "requestor", "status"),
        Index("idx_relationships_target", "target", "status"),
    )

    def __repr__(self) -> str:
        return f"<Relationship {self.requestor} -[{self.status}]-> {self.target}>"
