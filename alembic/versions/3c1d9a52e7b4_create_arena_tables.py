"""create arena tables

Revision ID: 3c1d9a52e7b4
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3c1d9a52e7b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('contests',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('name', sa.String(), nullable=False),
                    sa.Column('time_limit_minutes', sa.Integer(), nullable=False),
                    sa.Column('questions_json', sa.Text(), nullable=False),
                    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
                    sa.PrimaryKeyConstraint('id', name=op.f('pk_contests'))
                    )
    op.create_index(op.f('ix_contests_id'), 'contests', ['id'], unique=False)
    op.create_table('participations',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('contest_id', sa.String(), nullable=False),
                    sa.Column('wallet_address', sa.String(), nullable=False),
                    sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
                    sa.PrimaryKeyConstraint('id', name=op.f('pk_participations')),
                    sa.UniqueConstraint('contest_id', 'wallet_address', name='uq_participations_contest_wallet')
                    )
    op.create_index(op.f('ix_participations_contest_id'), 'participations', ['contest_id'], unique=False)
    op.create_index(op.f('ix_participations_id'), 'participations', ['id'], unique=False)
    op.create_table('contest_sessions',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('contest_id', sa.String(), nullable=False),
                    sa.Column('wallet_address', sa.String(), nullable=False),
                    sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
                    sa.PrimaryKeyConstraint('id', name=op.f('pk_contest_sessions')),
                    sa.UniqueConstraint('contest_id', 'wallet_address', name='uq_contest_sessions_contest_wallet')
                    )
    op.create_index(op.f('ix_contest_sessions_contest_id'), 'contest_sessions', ['contest_id'], unique=False)
    op.create_index(op.f('ix_contest_sessions_id'), 'contest_sessions', ['id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_contest_sessions_id'), table_name='contest_sessions')
    op.drop_index(op.f('ix_contest_sessions_contest_id'), table_name='contest_sessions')
    op.drop_table('contest_sessions')
    op.drop_index(op.f('ix_participations_id'), table_name='participations')
    op.drop_index(op.f('ix_participations_contest_id'), table_name='participations')
    op.drop_table('participations')
    op.drop_index(op.f('ix_contests_id'), table_name='contests')
    op.drop_table('contests')
