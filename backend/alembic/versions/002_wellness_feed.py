"""Wellness check-ins and feed messages

Revision ID: 002_wellness_feed
Revises: 001_initial
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '002_wellness_feed'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'wellness_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('sleep_hours', sa.Float(), nullable=False),
        sa.Column('mood', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_wellness_logs_owner_id', 'wellness_logs', ['owner_id'])
    op.create_index('ix_wellness_logs_created_at', 'wellness_logs', ['created_at'])

    op.create_table(
        'feed_messages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_feed_messages_owner_id', 'feed_messages', ['owner_id'])
    op.create_index('ix_feed_messages_created_at', 'feed_messages', ['created_at'])


def downgrade() -> None:
    op.drop_table('feed_messages')
    op.drop_table('wellness_logs')
