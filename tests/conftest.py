"""
Shared fixtures: SQLite test database, API client and seed data
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("SESSION_POLL_INTERVAL", "1")
os.environ.setdefault("REDIS_URL", "redis://localhost:6399/0")

from datetime import date, datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from portal.main import app
from portal.core.database import Base, get_db
from portal.core.security import get_password_hash
from portal.models import Business, BusinessPost, BusinessTopic, Client, ClientUser


# Test database
SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"]
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "correct-horse-battery"


def override_get_db():
    """Override database dependency for testing"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Create test client"""
    return TestClient(app)


@pytest.fixture
def yesterday_noon():
    yesterday = date.today() - timedelta(days=1)
    return datetime.combine(yesterday, datetime.min.time()) + timedelta(hours=12)


@pytest.fixture
def business(db_session):
    """Create test business"""
    business = Business(
        business_id=uuid4(),
        business_name="Siam Coffee",
        search_keywords=["siam coffee", "暹罗咖啡"],
        business_city="Bangkok",
        business_type="Cafe",
        similar_businesses=[],
    )
    db_session.add(business)
    db_session.commit()
    return business


@pytest.fixture
def make_post(db_session, business):
    """Factory for posts of the test business"""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        values = {
            "note_id": f"note-{counter['n']}",
            "platform": "xhs",
            "business_id": business.business_id,
            "type": "normal",
            "description": f"post number {counter['n']}",
            "last_update_time": datetime(2024, 3, 5, 14, 7),
            "nickname": "traveller",
            "is_relevant": True,
            "relevance_percentage": 80,
            "english_sentiment": "Positive",
            "has_negative_or_criticism": False,
        }
        values.update(fields)
        post = BusinessPost(**values)
        db_session.add(post)
        db_session.commit()
        return post

    return _make


@pytest.fixture
def make_topic(db_session, business):
    def _make(topic, note_id, topic_type="theme", business_id=None):
        row = BusinessTopic(
            business_id=business_id or business.business_id,
            topic_type=topic_type,
            topic=topic,
            note_id=note_id,
        )
        db_session.add(row)
        db_session.commit()
        return row

    return _make


@pytest.fixture
def tenant(db_session, business):
    """Create test client owning the test business"""
    tenant = Client(
        id=uuid4(),
        client_name="Siam Group",
        registered_email="owner@siam.example",
        emails_list=["owner@siam.example"],
        business_mapping=[str(business.business_id)],
    )
    db_session.add(tenant)
    db_session.commit()
    return tenant


@pytest.fixture
def client_user(db_session, tenant):
    """Create test login user with a known password"""
    user = ClientUser(
        client_id=tenant.id,
        registered_email="owner@siam.example",
        password_hash=get_password_hash(TEST_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def test_password():
    return TEST_PASSWORD
