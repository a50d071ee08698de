"""
Dashboard chart endpoints

All charts take business_id, start_date and end_date
("YYYY-MM-DD HH:MM:SS", "YYYY-MM-DD" or ISO 8601).
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from portal.core.database import get_db
from portal.core.dependencies import parse_business_id
from portal.core.exceptions import require_params
from portal.services.chart_service import ChartService
from portal.utils.dates import parse_datetime

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class ChartRange:
    business_id: UUID
    start: datetime
    end: datetime


def chart_range(
    business_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> ChartRange:
    require_params(business_id=business_id, start_date=start_date, end_date=end_date)
    return ChartRange(
        business_id=parse_business_id(business_id),
        start=parse_datetime(start_date),
        end=parse_datetime(end_date),
    )


@router.get("/dateRange")
async def date_range(business_id: Optional[str] = None, db: Session = Depends(get_db)):
    """First and last day with relevant posts, for the date picker bounds"""
    require_params(business_id=business_id)
    return ChartService(db, parse_business_id(business_id)).date_range()


@router.get("/piechart")
async def platform_pie(rng: ChartRange = Depends(chart_range), db: Session = Depends(get_db)):
    """Post share per platform"""
    return ChartService(db, rng.business_id).platform_pie(rng.start, rng.end)


@router.get("/getContentTypeStats")
async def content_type_stats(rng: ChartRange = Depends(chart_range), db: Session = Depends(get_db)):
    """Video vs text posts"""
    logger.debug(f"Content type stats for {rng.business_id}: {rng.start} - {rng.end}")
    return ChartService(db, rng.business_id).content_types(rng.start, rng.end)


@router.get("/getTopUsersStats")
async def top_users_stats(rng: ChartRange = Depends(chart_range), db: Session = Depends(get_db)):
    """Most active authors"""
    return ChartService(db, rng.business_id).top_users(rng.start, rng.end)


@router.get("/grouped-bar-chart")
async def grouped_bar_chart(rng: ChartRange = Depends(chart_range), db: Session = Depends(get_db)):
    """Previous vs current period post volume; the range must span an even number of days"""
    return ChartService(db, rng.business_id).period_comparison(rng.start, rng.end)


@router.get("/hashtags")
async def hashtags(rng: ChartRange = Depends(chart_range), db: Session = Depends(get_db)):
    return ChartService(db, rng.business_id).hashtags(rng.start, rng.end)


@router.get("/top-cities")
async def top_cities(rng: ChartRange = Depends(chart_range), db: Session = Depends(get_db)):
    return ChartService(db, rng.business_id).top_cities(rng.start, rng.end)


@router.get("/line-graph")
async def line_graph(
    rng: ChartRange = Depends(chart_range),
    similar_business_ids: Optional[str] = Query(None, description="Comma-separated competitor ids"),
    db: Session = Depends(get_db)
):
    """
    Daily post counts of the business next to its competitors.
    Without similar_business_ids the business's stored competitors are used.
    """
    similar_ids = None
    if similar_business_ids is not None:
        similar_ids = [s.strip() for s in similar_business_ids.split(",") if s.strip()]
    return ChartService(db, rng.business_id).competitor_trend(rng.start, rng.end, similar_ids)
