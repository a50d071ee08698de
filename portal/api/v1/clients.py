"""
Client details endpoint - the tenant and businesses behind a login email
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.core.database import get_db
from portal.core.exceptions import BadRequestError
from portal.services.business_service import BusinessService

router = APIRouter()


@router.get("/client-details")
async def client_details(email: Optional[str] = None, db: Session = Depends(get_db)):
    if not email:
        raise BadRequestError("Email is required")
    return BusinessService(db).client_details(email)
