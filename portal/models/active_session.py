"""
Active session model - at most one row per user
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from portal.core.database import Base


class ActiveSession(Base):
    """The single live session of a client user; replaced on every login"""

    __tablename__ = "active_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    session_id = Column(String(36), nullable=False, unique=True)
    browser_id = Column(Text, nullable=False, default="default-browser")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_active = Column(DateTime(timezone=True), server_default=func.now())
    user_agent = Column(Text, nullable=True)
    ip_address = Column(Text, nullable=True)

    def __repr__(self):
        return f"<ActiveSession(user_id={self.user_id}, session_id={self.session_id})>"
