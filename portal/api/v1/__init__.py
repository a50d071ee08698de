"""
Portal API v1.

Modular structure:
- businesses.py: business lookups, post listings, post and topic statistics
- charts.py: dashboard chart data
- clients.py: client details for a login email
- session.py: single active session protocol (HTTP + WebSocket)
- auth.py: password login, logout, password reset
- metabase.py: signed Metabase embed URLs
"""
from fastapi import APIRouter

from .auth import limiter
from .auth import router as auth_router
from .businesses import router as businesses_router
from .charts import router as charts_router
from .clients import router as clients_router
from .metabase import router as metabase_router
from .session import router as session_router

# Mounted under /api
router = APIRouter()

router.include_router(businesses_router, prefix="/businesses", tags=["businesses"])
router.include_router(charts_router, prefix="/charts", tags=["charts"])
router.include_router(clients_router, tags=["clients"])
router.include_router(session_router, prefix="/session", tags=["session"])
router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(metabase_router, prefix="/metabase", tags=["metabase"])

__all__ = ["router", "limiter"]
