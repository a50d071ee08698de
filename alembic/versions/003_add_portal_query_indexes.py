"""add_portal_query_indexes

Revision ID: 003_portal_indexes
Revises: 002_client_password_hash
Create Date: 2026-10-19

Indexes for the dashboard queries:
- business_posts(business_id, last_update_time) for listings and charts
- business_topics(business_id, topic) for topic drill-down
- business_topics(business_id, topic_type) for topic statistics
"""
from alembic import op


# revision identifiers, used by Alembic.
revision = '003_portal_indexes'
down_revision = '002_client_password_hash'
branch_labels = None
depends_on = None


def upgrade():
    op.create_index(
        'idx_business_posts_business_update',
        'business_posts',
        ['business_id', 'last_update_time'],
        unique=False
    )
    op.create_index(
        'idx_business_topics_business_topic',
        'business_topics',
        ['business_id', 'topic'],
        unique=False
    )
    op.create_index(
        'idx_business_topics_business_type',
        'business_topics',
        ['business_id', 'topic_type'],
        unique=False
    )


def downgrade():
    op.drop_index('idx_business_topics_business_type', table_name='business_topics')
    op.drop_index('idx_business_topics_business_topic', table_name='business_topics')
    op.drop_index('idx_business_posts_business_update', table_name='business_posts')
