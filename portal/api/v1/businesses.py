"""
Business endpoints - lookups, post listings, post statistics, topics
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from portal.core.database import get_db
from portal.core.dependencies import parse_business_id
from portal.core.exceptions import BadRequestError, require_params
from portal.schemas.business import BusinessBatchRequest, TopicStatsRequest
from portal.schemas.post import PostFilters
from portal.services.business_service import BusinessService
from portal.services.post_query_service import PostQueryService
from portal.services.topic_service import TopicService
from portal.utils.dates import parse_datetime

logger = logging.getLogger(__name__)

router = APIRouter()


def post_filters(
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    platform: str = "",
    sentiment: str = "",
    relevance: str = "",
    hasCriticism: str = "",
    search: str = "",
    sortOrder: str = "desc",
    postCategory: str = "",
    page: int = 1,
    pageSize: int = 10,
) -> PostFilters:
    """Filter state from the query string"""
    return PostFilters(
        startDate=startDate or None,
        endDate=endDate or None,
        platform=platform,
        sentiment=sentiment,
        relevance=relevance,
        hasCriticism=hasCriticism,
        search=search.strip(),
        sortOrder=sortOrder,
        postCategory=postCategory,
        page=page,
        pageSize=pageSize,
    )


@router.get("/getBusinessName")
async def get_business_name(
    business_id: Optional[str] = Query(None, alias="businessId"),
    db: Session = Depends(get_db)
):
    """Business summary by id"""
    bid = parse_business_id(business_id)
    return BusinessService(db).get_summary(bid)


@router.post("/getBusinessName/batch")
async def get_business_names(body: BusinessBatchRequest, db: Session = Depends(get_db)):
    """Business summaries for a list of ids; unknown ids are skipped"""
    if not body.businessIds:
        raise BadRequestError("Valid array of business IDs is required")
    return {"businesses": BusinessService(db).get_summaries(body.businessIds)}


@router.get("/getBusinessPosts")
async def get_business_posts(
    business_id: Optional[str] = Query(None, alias="businessId"),
    filters: PostFilters = Depends(post_filters),
    default_window_days: int = Query(7, alias="defaultWindowDays", ge=1, le=365),
    db: Session = Depends(get_db)
):
    """
    Relevant posts of a business with filtering and pagination.

    Default window: the last defaultWindowDays days (7), excluding today.
    End dates on or after today are clamped to yesterday.
    """
    bid = parse_business_id(business_id)
    return PostQueryService(db).list_posts(bid, filters, default_window_days)


@router.get("/getBusinessPostsByTopic")
async def get_business_posts_by_topic(
    business_id: Optional[str] = Query(None, alias="businessId"),
    topic: Optional[str] = None,
    filters: PostFilters = Depends(post_filters),
    default_window_days: int = Query(7, alias="defaultWindowDays", ge=1, le=365),
    db: Session = Depends(get_db)
):
    """Posts mapped to one topic, same filters as getBusinessPosts"""
    if not business_id or not topic:
        raise BadRequestError("Business ID and topic are required")
    bid = parse_business_id(business_id)
    return PostQueryService(db).list_posts_by_topic(bid, topic, filters, default_window_days)


@router.get("/getBusinessPostStats")
async def get_business_post_stats(
    business_id: Optional[str] = Query(None, alias="businessId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db)
):
    """Total relevant posts and per-platform breakdown for a range"""
    require_params(businessId=business_id, startDate=start_date, endDate=end_date)
    bid = parse_business_id(business_id)
    return BusinessService(db).post_stats(bid, parse_datetime(start_date), parse_datetime(end_date))


@router.post("/getBusinessTopicStats")
async def get_business_topic_stats(body: TopicStatsRequest, db: Session = Depends(get_db)):
    """Topic distribution of one topic type"""
    if not body.businessId or not body.topicType:
        raise BadRequestError("businessId and topicType are required")
    bid = parse_business_id(body.businessId)
    return TopicService(db, bid).topic_stats(body.topicType)


@router.get("/getNegativeFeedback")
async def get_negative_feedback(
    business_id: Optional[str] = Query(None, alias="businessId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db)
):
    """Unique criticism summaries for a range"""
    require_params(businessId=business_id, startDate=start_date, endDate=end_date)
    bid = parse_business_id(business_id)
    summaries = BusinessService(db).negative_feedback(
        bid, parse_datetime(start_date), parse_datetime(end_date)
    )
    return {"feedbackSummaries": summaries}


@router.get("/getTopicPostsTrend")
async def get_topic_posts_trend(
    business_id: Optional[str] = Query(None, alias="businessId"),
    topic: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Update times of the posts of a topic, for the trend chart"""
    if not business_id or not topic:
        raise BadRequestError("Business ID and topic are required")
    bid = parse_business_id(business_id)
    return {"postRows": TopicService(db, bid).posts_trend(topic)}
