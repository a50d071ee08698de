"""
Post Query Service - filtered, paginated post listings

Translates the UI filter state (date window, platform, sentiment, relevance
threshold, criticism flag, free-text search, sort order, page) into ORM
predicates on business_posts.
"""
import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from portal.core.exceptions import BadRequestError
from portal.models.business_post import BusinessPost
from portal.models.business_topic import BusinessTopic
from portal.schemas.post import Pagination, PostFilters
from portal.utils.dates import DateWindow, format_display_date, resolve_window
from portal.utils.platforms import to_db_platform, to_display_platform

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

SEARCH_COLUMNS = (
    BusinessPost.description,
    BusinessPost.english_desc,
    BusinessPost.title,
    BusinessPost.english_title,
    BusinessPost.tag_list,
    BusinessPost.english_tag_list,
    BusinessPost.nickname,
    BusinessPost.post_category,
)

CRITICISM_TRUE_VALUES = ("true", "Has Criticism")


def parse_relevance(relevance: str):
    """
    "<40%" means below 40; "40%" or ">=40%" means at least 40.

    Returns:
        (operator, threshold) with operator "lt" or "gte"
    """
    digits = relevance.replace("%", "").replace("<", "").replace(">", "").replace("=", "").strip()
    try:
        threshold = int(digits)
    except ValueError:
        raise BadRequestError(f"Invalid relevance filter: {relevance}")
    return ("lt" if "<" in relevance else "gte"), threshold


def search_condition(search: str):
    """Every whitespace-separated keyword must match at least one text column"""
    keywords = search.split()
    if not keywords:
        return None
    return and_(*[
        or_(*[column.ilike(f"%{keyword}%") for column in SEARCH_COLUMNS])
        for keyword in keywords
    ])


def build_conditions(filters: PostFilters, window: DateWindow) -> List[Any]:
    """Filter predicates shared by every post listing (business scope excluded)"""
    conditions = [
        BusinessPost.is_relevant.is_(True),
        BusinessPost.description != "nan",
        BusinessPost.last_update_time.between(window.start, window.end),
    ]

    if filters.platform:
        conditions.append(BusinessPost.platform == to_db_platform(filters.platform))

    if filters.sentiment:
        conditions.append(BusinessPost.english_sentiment == filters.sentiment)

    if filters.relevance:
        op, threshold = parse_relevance(filters.relevance)
        if op == "lt":
            conditions.append(BusinessPost.relevance_percentage < threshold)
        else:
            conditions.append(BusinessPost.relevance_percentage >= threshold)

    if filters.hasCriticism:
        conditions.append(
            BusinessPost.has_negative_or_criticism.is_(filters.hasCriticism in CRITICISM_TRUE_VALUES)
        )

    if filters.postCategory:
        conditions.append(BusinessPost.post_category == filters.postCategory)

    if filters.search:
        condition = search_condition(filters.search)
        if condition is not None:
            conditions.append(condition)

    return conditions


def paginate(total_count: int, page: int, page_size: int) -> Pagination:
    """Serve the last page when the requested one is past the end"""
    total_pages = math.ceil(total_count / page_size)
    current_page = total_pages if page > total_pages > 0 else page
    return Pagination(
        totalCount=total_count,
        totalPages=total_pages,
        currentPage=current_page,
        pageSize=page_size,
    )


def serialize_post(post: BusinessPost) -> Dict[str, Any]:
    """Shape a post row for the listing UI"""
    return {
        "id": post.note_id,
        "businessId": str(post.business_id) if post.business_id else None,
        "description": post.description,
        "englishDesc": post.english_desc,
        "post": post.english_preview_text or post.english_desc or post.description,
        "title": post.title,
        "englishTitle": post.english_title,
        "displayTitle": post.english_title or post.title,
        "tagList": post.tag_list,
        "englishTagList": post.english_tag_list,
        "taglist": post.english_tag_list or post.tag_list,
        "date": post.last_update_time.isoformat() if post.last_update_time else None,
        "showDate": format_display_date(post.last_update_time),
        "sentiment": post.english_sentiment,
        "nickname": post.nickname,
        "relevance": post.relevance_percentage,
        "platform": to_display_platform(post.platform),
        "dbPlatform": post.platform,
        "hasCriticism": post.has_negative_or_criticism,
        "criticismSummary": post.negative_feedback_summary,
        "url": post.note_url,
        "postCategory": post.post_category,
    }


class PostQueryService:
    """
    Post listings for one business.
    Stateless apart from the database session.
    """

    def __init__(self, db: Session, today: Optional[date] = None):
        self.db = db
        self.today = today

    def _normalize(self, filters: PostFilters) -> PostFilters:
        return filters.model_copy(update={
            "page": max(filters.page, 1),
            "pageSize": min(max(filters.pageSize, 1), MAX_PAGE_SIZE),
            "sortOrder": "asc" if filters.sortOrder.lower() == "asc" else "desc",
        })

    def _applied_filters(self, filters: PostFilters, window: DateWindow) -> Dict[str, Any]:
        start_date, end_date = window.as_strings()
        applied = filters.model_dump(exclude={"page", "pageSize"})
        applied.update(startDate=start_date, endDate=end_date)
        return applied

    def _run(self, scope: Sequence[Any], filters: PostFilters, window: DateWindow) -> Dict[str, Any]:
        conditions = list(scope) + build_conditions(filters, window)

        total_count = self.db.query(BusinessPost).filter(*conditions).count()
        pagination = paginate(total_count, filters.page, filters.pageSize)
        offset = (pagination.currentPage - 1) * filters.pageSize

        order = BusinessPost.last_update_time.asc() if filters.sortOrder == "asc" \
            else BusinessPost.last_update_time.desc()

        rows = (
            self.db.query(BusinessPost)
            .filter(*conditions)
            .order_by(order)
            .offset(offset)
            .limit(filters.pageSize)
            .all()
        )

        return {
            "posts": [serialize_post(row) for row in rows],
            "pagination": pagination.model_dump(),
            "appliedFilters": self._applied_filters(filters, window),
        }

    def list_posts(self, business_id: UUID, filters: PostFilters, default_days: int = 7) -> Dict[str, Any]:
        """
        Relevant posts of a business inside the date window, filtered and paginated.

        Args:
            business_id: Business UUID
            filters: UI filter state
            default_days: Length of the default trailing window

        Returns:
            {"posts", "pagination", "appliedFilters"}
        """
        filters = self._normalize(filters)
        window = resolve_window(filters.startDate, filters.endDate, default_days, self.today)
        return self._run([BusinessPost.business_id == business_id], filters, window)

    def topic_note_ids(self, business_id: UUID, topic: str) -> List[str]:
        rows = self.db.query(BusinessTopic.note_id).filter(
            BusinessTopic.business_id == business_id,
            BusinessTopic.topic == topic,
        ).all()
        return [row.note_id for row in rows]

    def list_posts_by_topic(
        self,
        business_id: UUID,
        topic: str,
        filters: PostFilters,
        default_days: int = 7,
    ) -> Dict[str, Any]:
        """Same as list_posts, restricted to the notes mapped to a topic"""
        filters = self._normalize(filters)
        window = resolve_window(filters.startDate, filters.endDate, default_days, self.today)

        note_ids = self.topic_note_ids(business_id, topic)
        logger.debug(f"Topic '{topic}' of business {business_id} maps to {len(note_ids)} notes")

        if not note_ids:
            return {
                "posts": [],
                "pagination": paginate(0, filters.page, filters.pageSize).model_dump(),
                "appliedFilters": self._applied_filters(filters, window),
            }

        return self._run([BusinessPost.note_id.in_(note_ids)], filters, window)
