"""
Chart Service - dashboard aggregates over business_posts

Every aggregate is scoped to one business and a [start, end] range on
last_update_time. Day buckets are computed in Python so the same code runs
against PostgreSQL and SQLite.
"""
import logging
from collections import Counter
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from portal.core.exceptions import BadRequestError
from portal.models.business_post import BusinessPost
from portal.services.business_service import BusinessService, parse_uuid_list
from portal.utils.dates import DATE_FORMAT, day_keys, format_date
from portal.utils.platforms import PLATFORM_COLORS, normalize_platform
from portal.utils.text_lists import as_list, parse_tag_list

logger = logging.getLogger(__name__)

TOP_K_HASHTAGS = 6
TOP_K_CITIES = 6

# Full 14-day comparisons are paired day by day; longer ones are summed per half
DAILY_PAIRING_MAX_DAYS = 14

CONTENT_TYPE_NAMES = {
    "video": "Video",
    "note": "Text",
    "normal": "Text",
}

KNOWN_CITY_COORDINATES = {
    "bangkok": {"lat": 13.7563, "lng": 100.5018},
    "tokyo": {"lat": 35.6762, "lng": 139.6503},
    "new york": {"lat": 40.7128, "lng": -74.0060},
    "paris": {"lat": 48.8566, "lng": 2.3522},
    "london": {"lat": 51.5074, "lng": -0.1278},
    "dubai": {"lat": 25.2048, "lng": 55.2708},
    "singapore": {"lat": 1.3521, "lng": 103.8198},
    "hong kong": {"lat": 22.3193, "lng": 114.1694},
    "seoul": {"lat": 37.5665, "lng": 126.9780},
    "beijing": {"lat": 39.9042, "lng": 116.4074},
    "shanghai": {"lat": 31.2304, "lng": 121.4737},
}


def round_half_up(value: float) -> int:
    return int(value + 0.5)


def round_one_decimal(value: float) -> float:
    """Percentages to one decimal, halves rounded away from zero"""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def city_coordinates(city: str) -> Dict[str, float]:
    """Known coordinates, else a stable placeholder derived from the name"""
    name = city.strip().lower()
    if name in KNOWN_CITY_COORDINATES:
        return KNOWN_CITY_COORDINATES[name]
    code_sum = sum(ord(ch) for ch in name)
    return {"lat": (code_sum % 180) - 90, "lng": ((code_sum * 31) % 360) - 180}


def leading_hashes(tag: str) -> int:
    return len(tag) - len(tag.lstrip("#"))


def consolidate_hashtags(tags: List[str], top_k: int = TOP_K_HASHTAGS) -> List[Dict[str, Any]]:
    """
    Merge tags that differ only by case or leading '#'.

    The displayed spelling is the variant with the most leading '#'.
    Percentages are relative to the total of the returned top tags.
    """
    raw_counts = Counter(tags)
    merged: Dict[str, Dict[str, Any]] = {}

    for tag, count in raw_counts.items():
        normalized = tag.lower().lstrip("#")
        if not normalized:
            continue
        entry = merged.get(normalized)
        if entry is None:
            merged[normalized] = {"count": count, "tag": tag}
            continue
        entry["count"] += count
        if leading_hashes(tag) > leading_hashes(entry["tag"]):
            entry["tag"] = tag

    top = sorted(merged.values(), key=lambda e: e["count"], reverse=True)[:top_k]
    total = sum(e["count"] for e in top)
    return [
        {
            "tag": e["tag"],
            "count": e["count"],
            "percentage": round_one_decimal(e["count"] / total * 100),
        }
        for e in top
    ]


def compare_periods(daily_counts: List[Dict[str, Any]]) -> List[Dict[str, int]]:
    """
    Split an even-length run of daily counts into previous and current halves.

    Longer than two weeks: one pair of half totals. Otherwise one pair per day.
    """
    total_days = len(daily_counts)
    if total_days == 0:
        return []
    half = total_days // 2

    if total_days > DAILY_PAIRING_MAX_DAYS:
        return [{
            "previousValue": sum(d["count"] for d in daily_counts[:half]),
            "currentValue": sum(d["count"] for d in daily_counts[half:]),
        }]

    return [
        {
            "previousValue": daily_counts[i]["count"],
            "currentValue": daily_counts[i + half]["count"],
        }
        for i in range(half)
    ]


class ChartService:
    """Dashboard chart data for one business"""

    def __init__(self, db: Session, business_id: UUID):
        self.db = db
        self.business_id = business_id

    def _posts(self, start: datetime, end: datetime, *columns, relevant_only: bool = True):
        query = self.db.query(*columns).filter(
            BusinessPost.business_id == self.business_id,
            BusinessPost.last_update_time.between(start, end),
        )
        if relevant_only:
            query = query.filter(BusinessPost.is_relevant.is_(True))
        return query

    def date_range(self, today: Optional[date] = None) -> Dict[str, str]:
        """First and last day with relevant posts"""
        base = self.db.query(BusinessPost.last_update_time).filter(
            BusinessPost.business_id == self.business_id,
            BusinessPost.is_relevant.is_(True),
            BusinessPost.last_update_time.isnot(None),
        )
        earliest = base.order_by(BusinessPost.last_update_time.asc()).first()
        latest = base.order_by(BusinessPost.last_update_time.desc()).first()

        today = today or date.today()
        if not earliest:
            return {
                "earliest_date": format_date(today - timedelta(days=365)),
                "latest_date": format_date(today - timedelta(days=1)),
            }

        return {
            "earliest_date": earliest.last_update_time.strftime(DATE_FORMAT),
            "latest_date": latest.last_update_time.strftime(DATE_FORMAT),
        }

    def daily_counts(self, start: datetime, end: datetime, relevant_only: bool = True) -> List[Dict[str, Any]]:
        """Post count for every day of the range, zero-filled"""
        keys = day_keys(start, end)
        counts = dict.fromkeys(keys, 0)

        rows = self._posts(start, end, BusinessPost.last_update_time, relevant_only=relevant_only).all()
        for row in rows:
            key = row.last_update_time.strftime(DATE_FORMAT)
            if key in counts:
                counts[key] += 1

        return [{"date": key, "count": counts[key]} for key in keys]

    def platform_pie(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        counts = dict.fromkeys(PLATFORM_COLORS, 0)
        for row in self._posts(start, end, BusinessPost.platform).all():
            name = normalize_platform(row.platform)
            if name in counts:
                counts[name] += 1

        return [
            {"name": name, "value": value, "color": PLATFORM_COLORS[name]}
            for name, value in counts.items()
        ]

    def content_types(self, start: datetime, end: datetime) -> Dict[str, Any]:
        valid_days = set(day_keys(start, end))
        counts: Dict[str, int] = {}
        excluded = 0

        rows = self._posts(start, end, BusinessPost.type, BusinessPost.last_update_time).all()
        for row in rows:
            if row.last_update_time.strftime(DATE_FORMAT) not in valid_days:
                excluded += 1
                continue
            name = CONTENT_TYPE_NAMES.get(row.type or "normal", "Text")
            counts[name] = counts.get(name, 0) + 1

        if excluded:
            logger.debug(f"Content types: excluded {excluded} posts outside day buckets")

        total = sum(counts.values())
        stats = [
            {"type": name, "count": count, "percentage": round_half_up(count * 100 / total)}
            for name, count in counts.items()
        ]
        return {"contentTypeStats": stats, "totalCount": total}

    def top_users(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """Authors with more than one post, most active first"""
        counts = Counter(
            row.nickname for row in self._posts(start, end, BusinessPost.nickname).all()
            if row.nickname
        )
        return [
            {"nickname": nickname, "postCount": count}
            for nickname, count in counts.most_common()
            if count > 1
        ]

    def period_comparison(self, start: datetime, end: datetime) -> List[Dict[str, int]]:
        """
        Previous-vs-current comparison of post volume.

        Raises:
            BadRequestError: If the inclusive day count is odd
        """
        total_days = (end - start).days + 1
        if total_days % 2 != 0:
            raise BadRequestError("Date range must yield an even number of days (inclusive)")

        daily = self.daily_counts(start, end, relevant_only=False)
        return compare_periods(daily)

    def hashtags(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        tags: List[str] = []
        for row in self._posts(start, end, BusinessPost.english_tag_list).all():
            tags.extend(parse_tag_list(row.english_tag_list))
        if not tags:
            return []
        return consolidate_hashtags(tags)

    def top_cities(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        counts = Counter(
            row.english_ip_location.strip().lower()
            for row in self._posts(start, end, BusinessPost.english_ip_location).all()
            if row.english_ip_location and row.english_ip_location.strip()
        )
        if not counts:
            return []

        top = counts.most_common(TOP_K_CITIES)
        total = sum(count for _, count in top)
        return [
            {
                "city": city[:1].upper() + city[1:],
                "count": count,
                "percentage": round_one_decimal(count / total * 100),
                "coordinates": city_coordinates(city),
            }
            for city, count in top
        ]

    def competitor_trend(
        self,
        start: datetime,
        end: datetime,
        similar_ids: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Daily relevant post counts of the business and its competitors.

        Competitors default to the business's stored similar_businesses.
        """
        businesses = BusinessService(self.db)

        if similar_ids is None:
            business = businesses.get_business(self.business_id)
            similar_ids = [str(s) for s in as_list(business.similar_businesses)] if business else []

        def series(business_id: UUID) -> Dict[str, Any]:
            chart = ChartService(self.db, business_id)
            return {
                "business_id": str(business_id),
                "business_name": businesses.get_business_name(business_id),
                "daily_counts": chart.daily_counts(start, end),
            }

        return {
            "current": series(self.business_id),
            "similar": [series(business_id) for business_id in parse_uuid_list(similar_ids)],
        }
