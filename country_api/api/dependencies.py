"""Country API - Shared FastAPI Dependencies."""

from pathlib import Path

from country_api.config import settings
from country_api.connectors.upstream.fetcher import DataFetcher


async def get_fetcher():
    """Dependency - yields a DataFetcher and closes its HTTP clients afterwards."""
    fetcher = DataFetcher()
    try:
        yield fetcher
    finally:
        await fetcher.close()


def get_image_path() -> Path:
    return settings.summary_image_path
