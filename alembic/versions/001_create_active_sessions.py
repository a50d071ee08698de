"""Create active_sessions table

Revision ID: 001_active_sessions
Revises:
Create Date: 2026-10-19

One row per logged-in client user; the row is replaced on every login.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_active_sessions'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'active_sessions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(36), nullable=False),
        sa.Column('browser_id', sa.Text(), nullable=False, server_default='default-browser'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('last_active', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.Text(), nullable=True),
        sa.UniqueConstraint('session_id', name='uq_active_sessions_session_id'),
    )
    op.create_index('ix_active_sessions_user_id', 'active_sessions', ['user_id'])


def downgrade():
    op.drop_index('ix_active_sessions_user_id', table_name='active_sessions')
    op.drop_table('active_sessions')
