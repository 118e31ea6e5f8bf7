"""Country API - External Data Fetcher.

Retrieves the raw country list and the USD exchange-rate table. Every call
goes to the network; nothing is cached.
"""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError, field_validator

from country_api.config import settings
from country_api.connectors.upstream.client import UpstreamClient
from country_api.core.errors import UpstreamUnavailable
from country_api.core.logging import get_logger

logger = get_logger("upstream.fetcher")

COUNTRIES_SOURCE = "restcountries.com"
RATES_SOURCE = "open.er-api.com"


class RawCurrency(BaseModel):
    """Currency descriptor as listed by the country directory."""

    code: Optional[str] = None
    name: Optional[str] = None
    symbol: Optional[str] = None


class RawCountry(BaseModel):
    """One entry of the country directory (restcountries v2 shape)."""

    name: str
    capital: Optional[str] = None
    region: Optional[str] = None
    population: Optional[int] = None
    flag: Optional[str] = None
    currencies: List[RawCurrency] = []

    @field_validator("currencies", mode="before")
    @classmethod
    def _null_currencies_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def parse_countries(payload: Any) -> List[RawCountry]:
    """Validate the directory payload; entries without a usable name are skipped."""
    if not isinstance(payload, list):
        raise UpstreamUnavailable(COUNTRIES_SOURCE, "expected a JSON array")

    countries: List[RawCountry] = []
    for item in payload:
        try:
            country = RawCountry.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skipping malformed country entry: {e.error_count()} errors")
            continue
        if not country.name.strip():
            logger.warning("Skipping country entry with empty name")
            continue
        countries.append(country)
    return countries


def parse_rates(payload: Any) -> Dict[str, float]:
    """Extract the ``rates`` mapping from an open.er-api.com response."""
    if not isinstance(payload, dict):
        raise UpstreamUnavailable(RATES_SOURCE, "expected a JSON object")
    if payload.get("result", "success") != "success":
        raise UpstreamUnavailable(
            RATES_SOURCE, f"result={payload.get('result')}"
        )
    rates = payload.get("rates")
    if not isinstance(rates, dict):
        raise UpstreamUnavailable(RATES_SOURCE, "missing rates")

    parsed: Dict[str, float] = {}
    for code, value in rates.items():
        try:
            parsed[code] = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric rate for {code}")
    return parsed


class DataFetcher:
    """Fetches both upstream datasets. Each call is independent."""

    def __init__(
        self,
        countries_url: str | None = None,
        rates_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.countries = UpstreamClient(
            COUNTRIES_SOURCE,
            countries_url or settings.countries_api_url,
            timeout,
            transport,
        )
        self.rates = UpstreamClient(
            RATES_SOURCE, rates_url or settings.exchange_api_url, timeout, transport
        )

    async def fetch_countries(self) -> List[RawCountry]:
        countries = parse_countries(await self.countries.get_json())
        logger.info(
            f"Fetched {len(countries)} countries", extra={"source": COUNTRIES_SOURCE}
        )
        return countries

    async def fetch_exchange_rates(self) -> Dict[str, float]:
        rates = parse_rates(await self.rates.get_json())
        logger.info(f"Fetched {len(rates)} exchange rates", extra={"source": RATES_SOURCE})
        return rates

    async def close(self) -> None:
        await self.countries.close()
        await self.rates.close()
