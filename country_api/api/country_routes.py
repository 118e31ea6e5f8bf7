"""Country API - Country Routes."""

from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlmodel import Session

from country_api.api.dependencies import get_fetcher, get_image_path
from country_api.connectors.upstream.fetcher import DataFetcher
from country_api.database import get_session
from country_api.models.api_models import MessageResponse, RefreshResponse
from country_api.models.country_models import Country
from country_api.refresh.pipeline import run_refresh
from country_api.services import query_service
from country_api.summary.artifact import read_summary_image

router = APIRouter(prefix="/countries", tags=["Countries"])


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_countries(
    session: Session = Depends(get_session),
    fetcher: DataFetcher = Depends(get_fetcher),
    image_path: Path = Depends(get_image_path),
):
    """Fetch countries and exchange rates, then replace the cached snapshot.

    Returns 503 if either upstream fails, 500 if the write is rolled back.
    """
    return await run_refresh(session, fetcher, image_path)


@router.get("", response_model=List[Country])
def list_countries(
    region: Optional[str] = Query(None, description="Exact region, e.g. Africa"),
    currency: Optional[str] = Query(None, description="Currency code, e.g. NGN"),
    sort: Optional[str] = Query(None, description="gdp_desc | gdp_asc"),
    session: Session = Depends(get_session),
):
    """List cached countries, optionally filtered and sorted by estimated GDP."""
    filters = query_service.parse_filters(region, currency, sort)
    return query_service.list_countries(session, filters)


@router.get(
    "/image",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
def get_summary_image(image_path: Path = Depends(get_image_path)):
    """Serve the summary image produced by the last refresh."""
    return Response(content=read_summary_image(image_path), media_type="image/png")


@router.get("/{name}", response_model=Country)
def get_country(name: str, session: Session = Depends(get_session)):
    return query_service.get_country(session, name)


@router.delete("/{name}", response_model=MessageResponse)
def delete_country(name: str, session: Session = Depends(get_session)):
    query_service.delete_country(session, name)
    return MessageResponse(message="Country deleted successfully")
