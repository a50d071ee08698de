"""
Tests for business endpoints
"""
from datetime import datetime, timedelta
from uuid import uuid4

from portal.models import Business


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["redis"]["status"] == "unavailable"


def test_get_business_name(client, business):
    response = client.get("/api/businesses/getBusinessName", params={"businessId": str(business.business_id)})
    assert response.status_code == 200
    data = response.json()
    assert data["business_name"] == "Siam Coffee"
    assert data["business_city"] == "Bangkok"


def test_get_business_name_errors(client, db_session):
    response = client.get("/api/businesses/getBusinessName")
    assert response.status_code == 400
    assert response.json() == {"error": "Business ID is required"}

    response = client.get("/api/businesses/getBusinessName", params={"businessId": "not-a-uuid"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid business ID format"

    response = client.get("/api/businesses/getBusinessName", params={"businessId": str(uuid4())})
    assert response.status_code == 404
    assert response.json()["error"] == "Business not found"


def test_get_business_names_batch(client, db_session, business):
    other = Business(business_id=uuid4(), business_name="Chiang Mai Brew", search_keywords=[])
    db_session.add(other)
    db_session.commit()

    response = client.post(
        "/api/businesses/getBusinessName/batch",
        json={"businessIds": [str(business.business_id), str(other.business_id), "garbage", str(uuid4())]},
    )
    assert response.status_code == 200
    names = sorted(b["business_name"] for b in response.json()["businesses"])
    assert names == ["Chiang Mai Brew", "Siam Coffee"]

    response = client.post("/api/businesses/getBusinessName/batch", json={"businessIds": []})
    assert response.status_code == 400


def test_get_business_posts_default_window(client, business, make_post, yesterday_noon):
    make_post(last_update_time=yesterday_noon)
    make_post(last_update_time=datetime(2020, 1, 1, 12, 0))

    response = client.get("/api/businesses/getBusinessPosts", params={"businessId": str(business.business_id)})
    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["totalCount"] == 1
    assert data["pagination"]["currentPage"] == 1
    assert data["posts"][0]["platform"] == "Rednote"


def test_get_business_posts_with_filters(client, business, make_post):
    make_post(platform="wb", english_sentiment="Negative")
    make_post(platform="xhs")

    response = client.get(
        "/api/businesses/getBusinessPosts",
        params={
            "businessId": str(business.business_id),
            "startDate": "2024-03-01",
            "endDate": "2024-03-07",
            "platform": "Weibo",
            "sentiment": "Negative",
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["totalCount"] == 1
    assert data["appliedFilters"]["platform"] == "Weibo"
    assert data["appliedFilters"]["startDate"] == "2024-03-01"


def test_get_business_posts_bad_input(client, business):
    response = client.get(
        "/api/businesses/getBusinessPosts",
        params={"businessId": str(business.business_id), "startDate": "yesterday"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid date format"

    response = client.get(
        "/api/businesses/getBusinessPosts",
        params={"businessId": str(business.business_id), "page": "first"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_get_business_posts_by_topic(client, business, make_post, make_topic):
    make_post(note_id="n1")
    make_post(note_id="n2")
    make_topic("service", "n2")

    response = client.get(
        "/api/businesses/getBusinessPostsByTopic",
        params={
            "businessId": str(business.business_id),
            "topic": "service",
            "startDate": "2024-03-01",
            "endDate": "2024-03-07",
        },
    )
    assert response.status_code == 200
    assert [p["id"] for p in response.json()["posts"]] == ["n2"]

    response = client.get(
        "/api/businesses/getBusinessPostsByTopic",
        params={"businessId": str(business.business_id)},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Business ID and topic are required"


def test_get_business_post_stats(client, business, make_post):
    make_post(platform="xhs")
    make_post(platform="xhs")
    make_post(platform="dy")
    make_post(platform="wb", is_relevant=False)

    response = client.get(
        "/api/businesses/getBusinessPostStats",
        params={
            "businessId": str(business.business_id),
            "startDate": "2024-03-01 00:00:00",
            "endDate": "2024-03-07 23:59:59",
        },
    )
    assert response.status_code == 200
    assert response.json() == {"totalPosts": 3, "platformBreakdown": {"xhs": 2, "dy": 1}}


def test_get_business_post_stats_missing_params(client, business):
    response = client.get(
        "/api/businesses/getBusinessPostStats",
        params={"businessId": str(business.business_id)},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required parameters: startDate, endDate"


def test_get_negative_feedback(client, business, make_post):
    make_post(has_negative_or_criticism=True, negative_feedback_summary='["Slow service", "Too loud"]')
    make_post(has_negative_or_criticism=True, negative_feedback_summary="Slow service")
    make_post(has_negative_or_criticism=True, negative_feedback_summary="Cold coffee")
    make_post(has_negative_or_criticism=False, negative_feedback_summary="Ignored")

    response = client.get(
        "/api/businesses/getNegativeFeedback",
        params={
            "businessId": str(business.business_id),
            "startDate": "2024-03-01",
            "endDate": "2024-03-07",
        },
    )
    assert response.status_code == 200
    summaries = response.json()["feedbackSummaries"]
    assert sorted(summaries) == ["Cold coffee", "Slow service", "Too loud"]


def test_get_business_posts_thirty_day_window(client, business, make_post, yesterday_noon):
    make_post(last_update_time=yesterday_noon - timedelta(days=20))

    params = {"businessId": str(business.business_id)}
    assert client.get("/api/businesses/getBusinessPosts", params=params).json()["pagination"]["totalCount"] == 0

    params["defaultWindowDays"] = 30
    assert client.get("/api/businesses/getBusinessPosts", params=params).json()["pagination"]["totalCount"] == 1
