"""
Pydantic schemas for post listings
"""
from pydantic import BaseModel
from typing import Optional


class PostFilters(BaseModel):
    """UI filter state of a post listing, as received in the query string"""
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    platform: str = ""
    sentiment: str = ""
    relevance: str = ""
    hasCriticism: str = ""
    search: str = ""
    sortOrder: str = "desc"
    postCategory: str = ""
    page: int = 1
    pageSize: int = 10


class Pagination(BaseModel):
    totalCount: int
    totalPages: int
    currentPage: int
    pageSize: int
