"""Country API - Central Configuration via Pydantic Settings."""

import os
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Server ──
    port: int = 3000

    # ── Database ──
    database_url: str = ""
    db_host: Optional[str] = None
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_name: str = "countries_db"
    db_pool_size: int = 10
    db_pool_timeout: int = 30  # seconds a caller waits for a free connection

    # ── Upstreams ──
    countries_api_url: str = (
        "https://restcountries.com/v2/all"
        "?fields=name,capital,region,population,flag,currencies"
    )
    exchange_api_url: str = "https://open.er-api.com/v6/latest/USD"
    upstream_timeout: float = 30.0

    # ── App ──
    log_level: str = "INFO"
    cache_dir: str = "cache"

    @property
    def effective_database_url(self) -> str:
        """Return the configured URL, a MySQL URL built from DB_* parts, or SQLite."""
        if self.database_url:
            return self.database_url
        if self.db_host:
            return (
                f"mysql+pymysql://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/country_api.db"
        return "sqlite:///./country_api.db"

    @property
    def summary_image_path(self) -> Path:
        return Path(self.cache_dir) / "summary.png"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
