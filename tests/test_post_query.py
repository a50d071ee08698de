"""
Tests for post listing helpers and PostQueryService
"""
from datetime import date, datetime

import pytest

from portal.core.exceptions import BadRequestError
from portal.schemas.post import PostFilters
from portal.services.post_query_service import PostQueryService, paginate, parse_relevance
from portal.utils.dates import format_display_date, parse_datetime, resolve_window
from portal.utils.platforms import normalize_platform, to_db_platform, to_display_platform
from portal.utils.text_lists import flatten_id_list, parse_summaries, parse_tag_list


TODAY = date(2024, 3, 10)


def test_default_window_is_last_seven_days_excluding_today():
    window = resolve_window(None, None, today=TODAY)
    assert window.as_strings() == ("2024-03-03", "2024-03-09")
    assert window.start == datetime(2024, 3, 3, 0, 0, 0)
    assert window.end == datetime(2024, 3, 9, 23, 59, 59, 999000)


def test_end_date_today_or_later_is_clamped_to_yesterday():
    window = resolve_window("2024-03-01", "2024-03-10", today=TODAY)
    assert window.as_strings() == ("2024-03-01", "2024-03-09")

    window = resolve_window("2024-03-01", "2024-04-01", today=TODAY)
    assert window.end_date == date(2024, 3, 9)


def test_invalid_date_is_rejected():
    with pytest.raises(BadRequestError) as exc:
        resolve_window("03/01/2024", None, today=TODAY)
    assert exc.value.status_code == 400
    assert exc.value.error == "Invalid date format"


def test_parse_datetime_formats():
    assert parse_datetime("2024-03-05 10:00:00") == datetime(2024, 3, 5, 10, 0)
    assert parse_datetime("2024-03-05") == datetime(2024, 3, 5)
    assert parse_datetime("2024-03-05T10:00:00Z") == datetime(2024, 3, 5, 10, 0)
    assert parse_datetime("2024-03-05T17:00:00+07:00") == datetime(2024, 3, 5, 10, 0)


def test_parse_relevance():
    assert parse_relevance("<40%") == ("lt", 40)
    assert parse_relevance("40%") == ("gte", 40)
    assert parse_relevance(">=70%") == ("gte", 70)
    with pytest.raises(BadRequestError):
        parse_relevance("high")


def test_paginate_serves_last_page_when_past_end():
    pagination = paginate(25, 9, 10)
    assert pagination.totalPages == 3
    assert pagination.currentPage == 3

    empty = paginate(0, 2, 10)
    assert empty.totalPages == 0
    assert empty.currentPage == 2


def test_platform_mapping():
    assert to_db_platform("Rednote") == "xhs"
    assert to_db_platform("Weibo") == "wb"
    assert to_db_platform("Douyin") == "dy"
    assert to_db_platform("Other") == "Other"
    assert to_display_platform("dy") == "Douyin"
    assert normalize_platform("weibo") == "Weibo"
    assert normalize_platform("XHS") == "Rednote"
    assert normalize_platform("twitter") is None


def test_text_list_parsing():
    assert parse_tag_list('["#food", " cafe "]') == ["#food", "cafe"]
    assert parse_tag_list("food, cafe,") == ["food", "cafe"]
    assert parse_summaries('["slow service", ""]') == ["slow service"]
    assert parse_summaries("too crowded") == ["too crowded"]
    assert flatten_id_list([["a", "b"], "c"]) == ["a", "b", "c"]
    assert flatten_id_list('["a"]') == ["a"]
    assert flatten_id_list("a") == ["a"]


def test_format_display_date():
    assert format_display_date(datetime(2024, 3, 5, 14, 7)) == "Mar 5, 2:07 PM"
    assert format_display_date(datetime(2024, 3, 5, 0, 30)) == "Mar 5, 12:30 AM"


def test_list_posts_filters(db_session, business, make_post):
    make_post(platform="xhs", english_sentiment="Positive", relevance_percentage=90)
    make_post(platform="wb", english_sentiment="Negative", relevance_percentage=30,
              has_negative_or_criticism=True)
    make_post(platform="dy", english_sentiment="Neutral", relevance_percentage=60,
              english_desc="great latte art")
    make_post(is_relevant=False)
    make_post(description="nan")
    make_post(last_update_time=datetime(2024, 3, 10, 9, 0))  # today

    service = PostQueryService(db_session, today=TODAY)
    bid = business.business_id

    result = service.list_posts(bid, PostFilters())
    assert result["pagination"]["totalCount"] == 3
    assert result["appliedFilters"]["startDate"] == "2024-03-03"
    assert result["appliedFilters"]["endDate"] == "2024-03-09"

    weibo = service.list_posts(bid, PostFilters(platform="Weibo"))
    assert [p["platform"] for p in weibo["posts"]] == ["Weibo"]

    low = service.list_posts(bid, PostFilters(relevance="<40%"))
    assert [p["relevance"] for p in low["posts"]] == [30]

    critical = service.list_posts(bid, PostFilters(hasCriticism="Has Criticism"))
    assert critical["pagination"]["totalCount"] == 1

    uncritical = service.list_posts(bid, PostFilters(hasCriticism="false"))
    assert uncritical["pagination"]["totalCount"] == 2

    searched = service.list_posts(bid, PostFilters(search="LATTE art"))
    assert [p["englishDesc"] for p in searched["posts"]] == ["great latte art"]


def test_list_posts_sort_and_page_size(db_session, business, make_post):
    for day in range(3, 10):
        make_post(last_update_time=datetime(2024, 3, day, 8, 0))

    service = PostQueryService(db_session, today=TODAY)
    asc = service.list_posts(business.business_id, PostFilters(sortOrder="asc", pageSize=3, page=3))
    assert asc["pagination"] == {"totalCount": 7, "totalPages": 3, "currentPage": 3, "pageSize": 3}
    assert [p["date"] for p in asc["posts"]] == ["2024-03-09T08:00:00"]

    big = service.list_posts(business.business_id, PostFilters(pageSize=1000))
    assert big["pagination"]["pageSize"] == 100


def test_post_shape(db_session, business, make_post):
    make_post(note_id="abc", english_title="Hello", english_preview_text="preview",
              note_url="https://example.com/abc")

    result = PostQueryService(db_session, today=TODAY).list_posts(business.business_id, PostFilters())
    post = result["posts"][0]
    assert post["id"] == "abc"
    assert post["displayTitle"] == "Hello"
    assert post["post"] == "preview"
    assert post["platform"] == "Rednote"
    assert post["dbPlatform"] == "xhs"
    assert post["showDate"] == "Mar 5, 2:07 PM"
    assert post["url"] == "https://example.com/abc"


def test_list_posts_by_topic(db_session, business, make_post, make_topic):
    make_post(note_id="n1")
    make_post(note_id="n2")
    make_topic("coffee", "n1")

    service = PostQueryService(db_session, today=TODAY)
    result = service.list_posts_by_topic(business.business_id, "coffee", PostFilters())
    assert [p["id"] for p in result["posts"]] == ["n1"]

    empty = service.list_posts_by_topic(business.business_id, "tea", PostFilters())
    assert empty["posts"] == []
    assert empty["pagination"]["totalCount"] == 0
