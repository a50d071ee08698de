"""
Health check utilities
"""
from typing import Dict, Any
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from portal.core.database import SessionLocal
from portal.core.config import settings
from portal.core.redis import cache
import logging

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


async def check_database() -> Dict[str, Any]:
    """Check database connectivity."""
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "message": "Database connection successful"
            }
        finally:
            db.close()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}"
        }


async def check_redis() -> Dict[str, Any]:
    """Check Redis connectivity. Redis is optional, so this never fails the service."""
    if cache.ping():
        return {
            "status": "healthy",
            "message": "Redis connection successful"
        }
    return {
        "status": "unavailable",
        "message": "Redis not connected, caching disabled"
    }


async def get_health_status() -> Dict[str, Any]:
    """Overall health status of all components."""
    db_status = await check_database()
    redis_status = await check_redis()

    overall_status = "healthy"
    if db_status["status"] != "healthy":
        overall_status = "unhealthy"

    return {
        "status": overall_status,
        "version": VERSION,
        "environment": settings.ENVIRONMENT,
        "components": {
            "database": db_status,
            "redis": redis_status,
        }
    }
