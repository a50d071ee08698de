"""
Business logic services.
Every service takes the request's database session; queries are scoped by business.
"""
from portal.services.post_query_service import PostQueryService
from portal.services.business_service import BusinessService
from portal.services.chart_service import ChartService
from portal.services.topic_service import TopicService
from portal.services.session_service import SessionService
from portal.services.auth_service import AuthService

__all__ = [
    "PostQueryService",
    "BusinessService",
    "ChartService",
    "TopicService",
    "SessionService",
    "AuthService",
]
