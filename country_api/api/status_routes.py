"""Country API - Status Routes."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from country_api.database import get_session
from country_api.models.api_models import StatusResponse
from country_api.services import query_service

router = APIRouter(tags=["System"])


@router.get("/status", response_model=StatusResponse)
def get_status(session: Session = Depends(get_session)):
    """Total cached countries and the time of the last successful refresh."""
    return query_service.get_status(session)
