"""Country API - Raw → Country Record Transformer.

Joins a directory entry with the exchange-rate table and derives
``estimated_gdp``.

The GDP multiplier is drawn uniformly from [1000, 2000) for every country on
every refresh. It stands in for a real GDP model, so two refreshes over the
same upstream data produce different ``estimated_gdp`` values.
"""

import random
from typing import Dict, List, Optional

from country_api.connectors.upstream.fetcher import RawCountry
from country_api.models.country_models import Country

GDP_MULTIPLIER_MIN = 1000.0
GDP_MULTIPLIER_MAX = 2000.0


def gdp_multiplier(rng: Optional[random.Random] = None) -> float:
    """Uniform draw in [GDP_MULTIPLIER_MIN, GDP_MULTIPLIER_MAX)."""
    r = (rng or random).random()
    return GDP_MULTIPLIER_MIN + r * (GDP_MULTIPLIER_MAX - GDP_MULTIPLIER_MIN)


def _primary_currency(raw: RawCountry) -> Optional[str]:
    """Code of the first listed currency, if it has one."""
    if not raw.currencies:
        return None
    code = raw.currencies[0].code
    return code.strip() if code and code.strip() else None


def build_country(
    raw: RawCountry,
    rates: Dict[str, float],
    rng: Optional[random.Random] = None,
) -> Country:
    """Derive one Country row from a directory entry."""
    population = max(raw.population or 0, 0)
    currency_code = _primary_currency(raw)

    exchange_rate: Optional[float] = None
    estimated_gdp: Optional[float]

    if currency_code is None:
        # No currency at all: a known, zero-GDP country
        estimated_gdp = 0.0
    else:
        rate = rates.get(currency_code)
        if rate is not None and rate > 0:
            exchange_rate = rate
            estimated_gdp = population * gdp_multiplier(rng) / rate
        else:
            estimated_gdp = None

    return Country(
        name=raw.name.strip(),
        capital=raw.capital or None,
        region=raw.region or None,
        population=population,
        currency_code=currency_code,
        exchange_rate=exchange_rate,
        estimated_gdp=estimated_gdp,
        flag_url=raw.flag or None,
    )


def build_countries(
    raws: List[RawCountry],
    rates: Dict[str, float],
    rng: Optional[random.Random] = None,
) -> List[Country]:
    return [build_country(raw, rates, rng) for raw in raws]
