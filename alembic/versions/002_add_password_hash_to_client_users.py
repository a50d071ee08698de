"""Add password_hash to client_users

Revision ID: 002_client_password_hash
Revises: 001_active_sessions
Create Date: 2026-10-19

Portal password login replaces the hosted auth provider. Existing users
have no hash until they go through password reset.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_client_password_hash'
down_revision = '001_active_sessions'
branch_labels = None
depends_on = None


def upgrade():
    op.add_column('client_users', sa.Column('password_hash', sa.Text(), nullable=True))


def downgrade():
    op.drop_column('client_users', 'password_hash')
