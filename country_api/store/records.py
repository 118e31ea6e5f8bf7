"""Country API - Record Store.

Statement-level helpers over the ``countries`` and ``app_status`` tables.
None of these commit; the caller owns the transaction.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from country_api.models.api_models import CountryFilters, SortOrder
from country_api.models.country_models import AppStatus, Country

# Fields overwritten when an existing record is re-ingested
UPSERT_FIELDS = (
    "capital",
    "region",
    "population",
    "currency_code",
    "exchange_rate",
    "estimated_gdp",
    "flag_url",
)


def upsert_countries(
    session: Session, records: Iterable[Country], now: datetime
) -> Dict[str, int]:
    """Insert new names, overwrite existing ones. Returns inserted/updated counts.

    A name repeated inside ``records`` updates the row staged earlier in the
    same batch, so the last occurrence wins.
    """
    existing: Dict[str, Country] = {
        c.name: c for c in session.exec(select(Country)).all()
    }
    inserted = updated = 0

    for record in records:
        current = existing.get(record.name)
        if current is None:
            record.last_refreshed_at = now
            session.add(record)
            existing[record.name] = record
            inserted += 1
        else:
            for field in UPSERT_FIELDS:
                setattr(current, field, getattr(record, field))
            current.last_refreshed_at = now
            session.add(current)
            updated += 1

    session.flush()
    return {"inserted": inserted, "updated": updated}


def mark_refreshed(session: Session, now: datetime) -> AppStatus:
    """Stamp the singleton status row, creating it if startup never did."""
    status = session.get(AppStatus, 1)
    if status is None:
        status = AppStatus(id=1)
    status.last_refreshed_at = now
    session.add(status)
    session.flush()
    return status


def last_refreshed_at(session: Session) -> Optional[datetime]:
    status = session.get(AppStatus, 1)
    return status.last_refreshed_at if status else None


def count_countries(session: Session) -> int:
    return session.exec(select(func.count()).select_from(Country)).one()


def top_by_gdp(session: Session, limit: int = 5) -> List[Country]:
    """Highest estimated GDP first, null GDP excluded, ties by name."""
    return list(
        session.exec(
            select(Country)
            .where(Country.estimated_gdp.is_not(None))  # type: ignore
            .order_by(Country.estimated_gdp.desc(), Country.name)  # type: ignore
            .limit(limit)
        ).all()
    )


def find_countries(session: Session, filters: CountryFilters) -> List[Country]:
    """Exact-match filters; insertion order unless a GDP sort is requested.

    Null GDP sorts last in both directions.
    """
    query = select(Country)
    if filters.region:
        query = query.where(Country.region == filters.region)
    if filters.currency:
        query = query.where(Country.currency_code == filters.currency)

    gdp = Country.estimated_gdp
    if filters.sort == SortOrder.GDP_DESC:
        query = query.order_by(gdp.is_(None), gdp.desc(), Country.name)  # type: ignore
    elif filters.sort == SortOrder.GDP_ASC:
        query = query.order_by(gdp.is_(None), gdp.asc(), Country.name)  # type: ignore
    else:
        query = query.order_by(Country.id)

    return list(session.exec(query).all())


def find_by_name(session: Session, name: str) -> Optional[Country]:
    """Case-insensitive exact match on name."""
    return session.exec(
        select(Country).where(func.lower(Country.name) == func.lower(name))
    ).first()


def delete_by_name(session: Session, name: str) -> int:
    """Delete case-insensitively; returns the number of rows removed."""
    matches = session.exec(
        select(Country).where(func.lower(Country.name) == func.lower(name))
    ).all()
    for country in matches:
        session.delete(country)
    session.flush()
    return len(matches)
