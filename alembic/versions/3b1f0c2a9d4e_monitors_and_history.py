"""Monitors and history tables

Revision ID: 3b1f0c2a9d4e
Revises: 
Create Date: 2026-10-18 09:12:44.218307

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f0c2a9d4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'monitors',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('endpoint', sa.String(length=2048), nullable=False),
        sa.Column('status', sa.Integer(), nullable=True),
        sa.Column('latency_ms', sa.Integer(), nullable=True),
        sa.Column('last_checked_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('monitor_id', sa.String(length=64), nullable=False),
        sa.Column('status', sa.Integer(), nullable=False),
        sa.Column('latency_ms', sa.Integer(), nullable=False),
        sa.Column('checked_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['monitor_id'], ['monitors.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_history_monitor_id_checked_at',
        'history',
        ['monitor_id', 'checked_at'],
        unique=False
    )


def downgrade() -> None:
    op.drop_index('ix_history_monitor_id_checked_at', table_name='history')
    op.drop_table('history')
    op.drop_table('monitors')
