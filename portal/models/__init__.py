"""
SQLAlchemy models
"""
from portal.models.business import Business
from portal.models.business_post import BusinessPost
from portal.models.business_topic import BusinessTopic
from portal.models.client import Client, ClientUser
from portal.models.active_session import ActiveSession

__all__ = [
    "Business",
    "BusinessPost",
    "BusinessTopic",
    "Client",
    "ClientUser",
    "ActiveSession",
]

# Import Base for Alembic
from portal.core.database import Base
