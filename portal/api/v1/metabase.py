"""
Metabase embedding endpoint
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter

from portal.core.exceptions import BadRequestError, PortalError
from portal.core.security import get_metabase_embed_url

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/embed-url")
async def embed_url(dashboardId: Optional[int] = None, params: Optional[str] = None):
    """
    Signed iframe URL for a Metabase dashboard.

    Args:
        dashboardId: Metabase dashboard id
        params: JSON object of locked dashboard parameters
    """
    if dashboardId is None:
        raise BadRequestError("Dashboard ID is required")

    locked_params = {}
    if params:
        try:
            locked_params = json.loads(params)
        except json.JSONDecodeError:
            raise BadRequestError("Invalid params", details="params must be a JSON object")
        if not isinstance(locked_params, dict):
            raise BadRequestError("Invalid params", details="params must be a JSON object")

    try:
        url = get_metabase_embed_url(dashboardId, locked_params)
    except RuntimeError as e:
        logger.error(f"Metabase embed failed: {e}")
        raise PortalError("Failed to generate embed URL", details=str(e))

    return {"url": url}
