"""
Topic Service - topic distribution and topic trend for a business
"""
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from portal.models.business_post import BusinessPost
from portal.models.business_topic import BusinessTopic


def topics_to_tree(topics: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Root node "Topics" with one leaf per topic, for circle packing"""
    return {
        "type": "node",
        "name": "Topics",
        "count": sum(t["count"] for t in topics),
        "percentage": 1,
        "children": [
            {
                "type": "leaf",
                "name": t["topic"],
                "count": t["count"],
                "percentage": t["percentage"],
            }
            for t in topics
        ],
    }


class TopicService:
    """Topic analysis scoped to one business"""

    def __init__(self, db: Session, business_id: UUID):
        self.db = db
        self.business_id = business_id

    def topic_stats(self, topic_type: str) -> Dict[str, Any]:
        """
        Count of posts per topic of one topic type, largest first.

        Returns:
            {"topics": [{"topic", "count", "percentage"}], "total", "tree"}
            where percentage is a fraction of total
        """
        count = func.count(BusinessTopic.id).label("count")
        rows = self.db.query(BusinessTopic.topic, count).filter(
            BusinessTopic.business_id == self.business_id,
            BusinessTopic.topic_type == topic_type,
        ).group_by(BusinessTopic.topic).order_by(count.desc(), BusinessTopic.topic).all()

        total = sum(row.count for row in rows)
        topics = [
            {
                "topic": row.topic,
                "count": row.count,
                "percentage": row.count / total if total else 0,
            }
            for row in rows
        ]
        return {"topics": topics, "total": total, "tree": topics_to_tree(topics)}

    def posts_trend(self, topic: str) -> List[Dict[str, Any]]:
        """Update times of every post mapped to a topic, oldest first"""
        note_ids = self.db.query(BusinessTopic.note_id).filter(
            BusinessTopic.business_id == self.business_id,
            BusinessTopic.topic == topic,
        )
        rows = self.db.query(BusinessPost.note_id, BusinessPost.last_update_time).filter(
            BusinessPost.note_id.in_(note_ids.scalar_subquery())
        ).order_by(BusinessPost.last_update_time.asc()).all()

        return [
            {
                "note_id": row.note_id,
                "last_update_time": row.last_update_time.isoformat() if row.last_update_time else None,
            }
            for row in rows
        ]
