"""Country API - Refresh Orchestrator.

Runs the full data flow:
  fetch countries → fetch rates → join + derive → upsert in one transaction
  → read back snapshot → render summary image

The store ends up holding either the complete prior snapshot or the complete
new one. Image rendering happens after commit and cannot fail the refresh.
"""

import asyncio
import random
import time
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from country_api.connectors.upstream.fetcher import DataFetcher, RawCountry
from country_api.core.errors import StorageFailure
from country_api.core.logging import get_logger
from country_api.models.api_models import RefreshResponse, TopCountry
from country_api.models.country_models import as_utc, utcnow
from country_api.refresh.transformer import build_countries
from country_api.store.records import (
    count_countries,
    last_refreshed_at,
    mark_refreshed,
    top_by_gdp,
    upsert_countries,
)
from country_api.summary.artifact import save_summary_image
from country_api.summary.renderer import render_summary

logger = get_logger("refresh.pipeline")

# Serializes refreshes within this process. Separate worker processes can
# still interleave their upserts.
_refresh_lock = asyncio.Lock()

TOP_N = 5


def _render(session: Session, image_path: Path) -> RefreshResponse:
    """Read back the committed snapshot and redraw the summary image."""
    try:
        total = count_countries(session)
        refreshed_at = as_utc(last_refreshed_at(session))
        top = [
            TopCountry(name=c.name, estimated_gdp=c.estimated_gdp)
            for c in top_by_gdp(session, TOP_N)
        ]
    except SQLAlchemyError as e:
        logger.error(f"Post-refresh read failed: {e}")
        raise StorageFailure() from e

    try:
        save_summary_image(render_summary(total, top, refreshed_at), image_path)
    except Exception as e:
        logger.error(f"Summary image generation failed: {e}", exc_info=True)

    return RefreshResponse(total_countries=total, last_refreshed_at=refreshed_at)


def _write_snapshot(
    session: Session,
    raw_countries: List[RawCountry],
    rates: Dict[str, float],
    image_path: Path,
    rng: Optional[random.Random],
    started: float,
) -> RefreshResponse:
    """Steps 3-9. Blocking; runs in a worker thread."""
    # ── Step 3-7: Join and write as one unit of work ──
    now = utcnow()
    records = build_countries(raw_countries, rates, rng)
    try:
        counts = upsert_countries(session, records, now)
        mark_refreshed(session, now)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Refresh rolled back: {e}", exc_info=True)
        raise StorageFailure() from e

    logger.info(
        f"Refresh committed: {counts['inserted']} inserted, {counts['updated']} updated",
        extra={"duration_ms": round((time.perf_counter() - started) * 1000, 1)},
    )

    # ── Step 8-9: Snapshot + summary image ──
    return _render(session, image_path)


async def run_refresh(
    session: Session,
    fetcher: DataFetcher,
    image_path: Path,
    rng: Optional[random.Random] = None,
) -> RefreshResponse:
    """Execute one refresh. Raises UpstreamUnavailable or StorageFailure."""
    async with _refresh_lock:
        started = time.perf_counter()
        logger.info("Starting country refresh")

        # ── Step 1-2: Fetch both upstreams before touching the store ──
        raw_countries = await fetcher.fetch_countries()
        rates = await fetcher.fetch_exchange_rates()

        # DB writes and image rendering stay off the event loop
        return await run_in_threadpool(
            _write_snapshot, session, raw_countries, rates, image_path, rng, started
        )
