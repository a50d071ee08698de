"""
Pydantic schemas for Business API
"""
from pydantic import BaseModel
from typing import Optional, List, Any, Dict
from uuid import UUID
from datetime import datetime


class BusinessSummary(BaseModel):
    """Schema for business lookup responses"""
    business_id: UUID
    business_name: str
    business_city: Optional[str] = None
    business_type: Optional[str] = None
    last_crawled_time: Optional[datetime] = None

    class Config:
        from_attributes = True


class BusinessDetail(BusinessSummary):
    """Business as listed in client details"""
    search_keywords: List[str] = []
    similar_businesses: List[str] = []


class BusinessBatchRequest(BaseModel):
    businessIds: Optional[List[str]] = None


class TopicStatsRequest(BaseModel):
    businessId: Optional[str] = None
    topicType: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None


class ClientDetails(BaseModel):
    id: UUID
    client_name: str
    registered_email: Optional[str] = None
    businesses: List[Dict[str, Any]] = []
