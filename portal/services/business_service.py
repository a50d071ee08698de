"""
Business Service - business lookups, post statistics and client details
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.exceptions import NotFoundError
from portal.core.redis import cache, business_cache_key
from portal.models.business import Business
from portal.models.business_post import BusinessPost
from portal.models.client import Client, ClientUser
from portal.schemas.business import BusinessDetail, BusinessSummary, ClientDetails
from portal.utils.text_lists import as_list, flatten_id_list, parse_summaries

logger = logging.getLogger(__name__)


def parse_uuid_list(values: List[Any]) -> List[UUID]:
    """Keep the values that are valid UUIDs"""
    ids = []
    for value in values:
        try:
            ids.append(UUID(str(value)))
        except ValueError:
            logger.warning(f"Ignoring malformed business id: {value!r}")
    return ids


class BusinessService:
    """Read-only access to businesses and their post aggregates"""

    def __init__(self, db: Session):
        self.db = db

    def get_business(self, business_id: UUID) -> Optional[Business]:
        return self.db.query(Business).filter(Business.business_id == business_id).first()

    def get_summary(self, business_id: UUID) -> Dict[str, Any]:
        """
        Business summary, served from Redis when available.

        Raises:
            NotFoundError: If the business does not exist
        """
        key = business_cache_key(str(business_id))
        cached = cache.get(key)
        if cached is not None:
            return cached

        business = self.get_business(business_id)
        if not business:
            raise NotFoundError("Business not found")

        summary = BusinessSummary.model_validate(business).model_dump(mode="json")
        cache.set(key, summary, ttl=settings.BUSINESS_CACHE_TTL)
        return summary

    def get_summaries(self, business_ids: List[Any]) -> List[Dict[str, Any]]:
        ids = parse_uuid_list(business_ids)
        if not ids:
            return []
        businesses = self.db.query(Business).filter(Business.business_id.in_(ids)).all()
        return [BusinessSummary.model_validate(b).model_dump(mode="json") for b in businesses]

    def get_business_name(self, business_id: UUID) -> str:
        business = self.get_business(business_id)
        if business and business.business_name:
            return business.business_name
        return f"Business {business_id}"

    def post_stats(self, business_id: UUID, start: datetime, end: datetime) -> Dict[str, Any]:
        """Total relevant posts in range and their count per platform code"""
        rows = self.db.query(
            BusinessPost.platform,
            func.count(BusinessPost.note_id).label("count"),
        ).filter(
            BusinessPost.business_id == business_id,
            BusinessPost.is_relevant.is_(True),
            BusinessPost.last_update_time.between(start, end),
        ).group_by(BusinessPost.platform).all()

        breakdown = {row.platform: row.count for row in rows if row.platform}
        return {
            "totalPosts": sum(row.count for row in rows),
            "platformBreakdown": breakdown,
        }

    def negative_feedback(self, business_id: UUID, start: datetime, end: datetime) -> List[str]:
        """Unique criticism summaries in range, first occurrence order"""
        rows = self.db.query(BusinessPost.negative_feedback_summary).filter(
            BusinessPost.business_id == business_id,
            BusinessPost.is_relevant.is_(True),
            BusinessPost.has_negative_or_criticism.is_(True),
            BusinessPost.last_update_time.between(start, end),
            BusinessPost.negative_feedback_summary.isnot(None),
            BusinessPost.negative_feedback_summary != "",
        ).all()

        summaries: Dict[str, None] = {}
        for row in rows:
            for summary in parse_summaries(row.negative_feedback_summary):
                summaries.setdefault(summary, None)
        return list(summaries)

    def client_details(self, email: str) -> Dict[str, Any]:
        """
        Client of a login email with every business it owns.

        Raises:
            NotFoundError: If the user or its client does not exist
        """
        user = self.db.query(ClientUser).filter(ClientUser.registered_email == email).first()
        if not user:
            raise NotFoundError("User not found")

        client = self.db.query(Client).filter(Client.id == user.client_id).first()
        if not client:
            raise NotFoundError("Client not found")

        business_ids = parse_uuid_list(flatten_id_list(client.business_mapping))
        businesses = []
        if business_ids:
            rows = self.db.query(Business).filter(Business.business_id.in_(business_ids)).all()
            for row in rows:
                detail = BusinessDetail(
                    business_id=row.business_id,
                    business_name=row.business_name,
                    business_city=row.business_city,
                    business_type=row.business_type,
                    last_crawled_time=row.last_crawled_time,
                    search_keywords=[str(k) for k in as_list(row.search_keywords)],
                    similar_businesses=[str(s) for s in as_list(row.similar_businesses)],
                )
                businesses.append(detail.model_dump(mode="json"))

        return ClientDetails(
            id=client.id,
            client_name=client.client_name,
            registered_email=client.registered_email,
            businesses=businesses,
        ).model_dump(mode="json")
