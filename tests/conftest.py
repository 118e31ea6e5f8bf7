"""
Pytest configuration and fixtures for the country API tests.

Every test gets its own in-memory SQLite database and a fake fetcher, so
nothing here touches the network or the real cache directory.
"""

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine, select

from country_api.api.dependencies import get_fetcher, get_image_path
from country_api.connectors.upstream.fetcher import RawCountry
from country_api.database import get_session, init_db, register_sqlite_functions
from country_api.main import app
from country_api.models.country_models import Country


SAMPLE_COUNTRIES: List[dict] = [
    {
        "name": "Nigeria",
        "capital": "Abuja",
        "region": "Africa",
        "population": 206139589,
        "flag": "https://flagcdn.com/ng.svg",
        "currencies": [{"code": "NGN", "name": "Nigerian naira", "symbol": "₦"}],
    },
    {
        "name": "Ghana",
        "capital": "Accra",
        "region": "Africa",
        "population": 31072940,
        "flag": "https://flagcdn.com/gh.svg",
        "currencies": [{"code": "GHS", "name": "Ghanaian cedi", "symbol": "₵"}],
    },
    {
        "name": "United States of America",
        "capital": "Washington, D.C.",
        "region": "Americas",
        "population": 329484123,
        "flag": "https://flagcdn.com/us.svg",
        "currencies": [{"code": "USD", "name": "United States dollar", "symbol": "$"}],
    },
    {
        "name": "Zimbabwe",
        "capital": "Harare",
        "region": "Africa",
        "population": 14862927,
        "flag": "https://flagcdn.com/zw.svg",
        "currencies": [{"code": "ZWL", "name": "Zimbabwean dollar", "symbol": "$"}],
    },
    {
        "name": "Antarctica",
        "region": "Polar",
        "population": 1000,
        "flag": "https://flagcdn.com/aq.svg",
    },
]

SAMPLE_RATES: Dict[str, float] = {"NGN": 1600.0, "GHS": 15.3, "USD": 1.0}


class FakeFetcher:
    """Stands in for DataFetcher; set ``*_error`` to simulate an upstream outage."""

    def __init__(
        self,
        countries: Optional[List[dict]] = None,
        rates: Optional[Dict[str, float]] = None,
    ):
        self.countries = countries if countries is not None else SAMPLE_COUNTRIES
        self.rates = rates if rates is not None else SAMPLE_RATES
        self.countries_error: Optional[Exception] = None
        self.rates_error: Optional[Exception] = None
        self.calls: List[str] = []

    async def fetch_countries(self) -> List[RawCountry]:
        self.calls.append("countries")
        if self.countries_error:
            raise self.countries_error
        return [RawCountry.model_validate(c) for c in self.countries]

    async def fetch_exchange_rates(self) -> Dict[str, float]:
        self.calls.append("rates")
        if self.rates_error:
            raise self.rates_error
        return dict(self.rates)

    async def close(self) -> None:
        pass


def snapshot(engine) -> List[dict]:
    """Full contents of the countries table, in id order."""
    with Session(engine) as session:
        rows = session.exec(select(Country).order_by(Country.id)).all()
        return [row.model_dump() for row in rows]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(engine)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def image_path(tmp_path):
    return tmp_path / "cache" / "summary.png"


@pytest.fixture
def client(engine, fetcher, image_path):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_fetcher] = lambda: fetcher
    app.dependency_overrides[get_image_path] = lambda: image_path
    yield TestClient(app)
    app.dependency_overrides.clear()
