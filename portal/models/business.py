"""
Business model - a monitored social-media business and its competitors
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, JSON, Uuid
from sqlalchemy.dialects.postgresql import ARRAY

from portal.core.database import Base


# Postgres text[]; JSON list elsewhere (SQLite in tests)
TextArray = ARRAY(Text).with_variant(JSON(), "sqlite")


class Business(Base):
    """Business model - one monitored entity, owned by one or more clients"""

    __tablename__ = "business"

    business_id = Column(Uuid(as_uuid=True), primary_key=True)
    business_name = Column(String(50), nullable=False)
    search_keywords = Column(TextArray, nullable=False, default=list)
    report_frequency = Column(String(10), nullable=True)
    business_city = Column(String(255), nullable=True)
    business_type = Column(String(255), nullable=True)
    similar_businesses = Column(TextArray, nullable=True)  # competitor business ids
    total_relevant_posts = Column(Integer, nullable=True, default=0)
    last_crawled_time = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Business(id={self.business_id}, name={self.business_name})>"
