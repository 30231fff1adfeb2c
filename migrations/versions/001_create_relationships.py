"""create relationships table

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- relationships ---
    op.create_table(
        'relationships',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('requestor', sa.String(length=255), nullable=False),
        sa.Column('target', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('requestor <> target', name='chk_relationships_not_self'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('requestor', 'target', 'status', name='uq_relationships_pair_status')
    )
    op.create_index('idx_relationships_requestor', 'relationships', ['requestor', 'status'], unique=False)
    op.create_index('idx_relationships_target', 'relationships', ['target', 'status'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_relationships_target', table_name='relationships')
    op.drop_index('idx_relationships_requestor', table_name='relationships')
    op.drop_table('relationships')
