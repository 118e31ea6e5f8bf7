"""Country API - Persisted Models.

``Country`` holds one merged record per country name.
``AppStatus`` is a single row (id fixed to 1) tracking the last refresh.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, CheckConstraint, Text
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values read back from backends that drop the offset."""
    if ts is None or ts.tzinfo is not None:
        return ts
    return ts.replace(tzinfo=timezone.utc)


class Country(SQLModel, table=True):
    """Country metadata joined with its currency's exchange rate.

    Re-ingesting a name updates the row in place; ``name`` is unique.
    ``exchange_rate`` and ``estimated_gdp`` are null together, except for
    countries without a currency where ``estimated_gdp`` is 0.
    """

    __tablename__ = "countries"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, unique=True, nullable=False)
    capital: Optional[str] = Field(default=None, max_length=255)
    region: Optional[str] = Field(default=None, max_length=255, index=True)
    population: int = Field(default=0, ge=0, sa_type=BigInteger)
    currency_code: Optional[str] = Field(default=None, max_length=10, index=True)
    exchange_rate: Optional[float] = Field(
        default=None, description="Local currency units per 1 USD"
    )
    estimated_gdp: Optional[float] = Field(default=None, index=True)
    flag_url: Optional[str] = Field(default=None, sa_type=Text)
    last_refreshed_at: datetime = Field(default_factory=utcnow)


class AppStatus(SQLModel, table=True):
    """Singleton status row."""

    __tablename__ = "app_status"
    __table_args__ = (CheckConstraint("id = 1", name="ck_app_status_singleton"),)

    id: int = Field(default=1, primary_key=True)
    last_refreshed_at: Optional[datetime] = Field(default=None)
