"""
Business topic model - maps (business, topic, topic_type) to post note ids
"""
from sqlalchemy import Column, Integer, Text, DateTime, Uuid, Index
from sqlalchemy.sql import func

from portal.core.database import Base


class BusinessTopic(Base):
    """One topic assignment of one post"""

    __tablename__ = "business_topics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(Uuid(as_uuid=True), nullable=False)
    topic_type = Column(Text, nullable=False)
    topic = Column(Text, nullable=False)
    note_id = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_business_topics_business_topic", "business_id", "topic"),
        Index("idx_business_topics_business_type", "business_id", "topic_type"),
    )

    def __repr__(self):
        return f"<BusinessTopic(business_id={self.business_id}, topic={self.topic}, note_id={self.note_id})>"
