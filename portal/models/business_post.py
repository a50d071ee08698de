"""
Business post model - scraped social posts, written by the ingestion pipeline
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Uuid, Index

from portal.core.database import Base


class BusinessPost(Base):
    """One scraped post with its English translation and analysis fields"""

    __tablename__ = "business_posts"

    note_id = Column(Text, primary_key=True)
    platform = Column(Text, nullable=False)  # xhs, wb, dy
    business_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    original_note_id = Column(Uuid(as_uuid=True), nullable=True)
    type = Column(Text, nullable=True)  # video, normal, note
    title = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    video_url = Column(Text, nullable=True)
    create_time = Column(DateTime(timezone=True), nullable=True)
    last_update_time = Column(DateTime(timezone=True), nullable=True)
    user_id = Column(Text, nullable=True)
    nickname = Column(Text, nullable=True)
    avatar = Column(Text, nullable=True)
    liked_count = Column(Integer, nullable=True, default=0)
    collected_count = Column(Integer, nullable=True, default=0)
    comment_count = Column(Integer, nullable=True, default=0)
    share_count = Column(Integer, nullable=True, default=0)
    ip_location = Column(Text, nullable=True)
    tag_list = Column(Text, nullable=True)
    note_url = Column(Text, nullable=True)
    source_keyword = Column(Text, nullable=True)
    post_language = Column(Text, nullable=True)

    # Translation / analysis
    english_title = Column(Text, nullable=True)
    english_desc = Column(Text, nullable=True)
    english_preview_text = Column(Text, nullable=True)
    english_ip_location = Column(Text, nullable=True)
    english_summary = Column(Text, nullable=True)
    english_sentiment = Column(String(10), nullable=True)
    english_tag_list = Column(Text, nullable=True)  # JSON array or comma list
    is_relevant = Column(Boolean, nullable=True)
    relevance_percentage = Column(Integer, nullable=True)
    has_negative_or_criticism = Column(Boolean, nullable=True)
    negative_feedback_summary = Column(Text, nullable=True)  # text or JSON array
    post_category = Column(Text, nullable=True)
    is_official_post = Column(Boolean, nullable=True)

    __table_args__ = (
        Index("idx_business_posts_business_update", "business_id", "last_update_time"),
    )

    def __repr__(self):
        return f"<BusinessPost(note_id={self.note_id}, platform={self.platform}, business_id={self.business_id})>"
