"""Country API - Query Service.

Read / filter / delete over the record store. Storage errors surface as
``StorageFailure``; missing names as ``NotFound``.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from country_api.core.errors import NotFound, StorageFailure, ValidationFailed
from country_api.core.logging import get_logger
from country_api.models.api_models import CountryFilters, SortOrder, StatusResponse
from country_api.models.country_models import Country, as_utc
from country_api.store import records

logger = get_logger("services.query")

COUNTRY_NOT_FOUND = "Country not found"


def parse_filters(
    region: Optional[str] = None,
    currency: Optional[str] = None,
    sort: Optional[str] = None,
) -> CountryFilters:
    """Build filters from raw query parameters; unknown sort values are rejected."""
    try:
        order = SortOrder(sort) if sort else SortOrder.NONE
    except ValueError:
        allowed = ", ".join(s.value for s in SortOrder)
        raise ValidationFailed({"sort": f"must be one of: {allowed}"}) from None
    return CountryFilters(region=region or None, currency=currency or None, sort=order)


def list_countries(session: Session, filters: CountryFilters) -> List[Country]:
    try:
        return records.find_countries(session, filters)
    except SQLAlchemyError as e:
        logger.error(f"List countries failed: {e}")
        raise StorageFailure() from e


def get_country(session: Session, name: str) -> Country:
    try:
        country = records.find_by_name(session, name)
    except SQLAlchemyError as e:
        logger.error(f"Get country failed: {e}")
        raise StorageFailure() from e
    if country is None:
        raise NotFound(COUNTRY_NOT_FOUND)
    return country


def delete_country(session: Session, name: str) -> None:
    """Remove a country. Leaves the status row and summary image untouched."""
    try:
        removed = records.delete_by_name(session, name)
        if removed:
            session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Delete country failed: {e}")
        raise StorageFailure() from e
    if not removed:
        raise NotFound(COUNTRY_NOT_FOUND)
    logger.info(f"Deleted country {name!r}")


def get_status(session: Session) -> StatusResponse:
    try:
        return StatusResponse(
            total_countries=records.count_countries(session),
            last_refreshed_at=as_utc(records.last_refreshed_at(session)),
        )
    except SQLAlchemyError as e:
        logger.error(f"Status read failed: {e}")
        raise StorageFailure() from e
