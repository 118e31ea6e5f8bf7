"""Country API - Request / Response Schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class SortOrder(str, Enum):
    """Accepted values of the ``sort`` query parameter."""

    GDP_DESC = "gdp_desc"
    GDP_ASC = "gdp_asc"
    NONE = "none"


class CountryFilters(BaseModel):
    """Filters for GET /countries. All optional, exact match."""

    region: Optional[str] = None
    currency: Optional[str] = None
    sort: SortOrder = SortOrder.NONE


class StatusResponse(BaseModel):
    total_countries: int
    last_refreshed_at: Optional[datetime] = None


class RefreshResponse(BaseModel):
    """Response for POST /countries/refresh."""

    message: str = "Countries refreshed successfully"
    total_countries: int
    last_refreshed_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str


class TopCountry(BaseModel):
    """One line of the summary image."""

    name: str
    estimated_gdp: Optional[float] = None
