"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `NICHERANK_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """NicheRank settings.

    All fields are environment-configurable. Prefix is `NICHERANK_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="NICHERANK_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Search
    search_provider: Literal["google", "brave", "duckduckgo"] = Field(default="google")
    search_page_size: int = Field(default=10, ge=1, le=10)
    search_timeout_s: float = Field(default=10.0, ge=1.0, le=120.0)
    search_query_delay_s: float = Field(default=0.2, ge=0.0, le=10.0)

    google_search_api_key: str | None = Field(default=None)
    google_search_engine_id: str | None = Field(default=None)
    google_search_base_url: str = Field(default="https://www.googleapis.com/customsearch/v1")

    brave_search_api_key: str | None = Field(default=None)
    brave_search_base_url: str = Field(default="https://api.search.brave.com/res/v1/web/search")

    # Discovery
    discovery_max_candidates: int = Field(default=10, ge=1, le=50)
    discovery_max_origins: int = Field(default=15, ge=1, le=100)

    # Signals
    pagespeed_api_key: str | None = Field(default=None)
    pagespeed_base_url: str = Field(
        default="https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    )
    pagespeed_strategy: Literal["mobile", "desktop"] = Field(default="mobile")
    pagespeed_timeout_s: float = Field(default=15.0, ge=1.0, le=120.0)

    openpagerank_api_key: str | None = Field(default=None)
    openpagerank_base_url: str = Field(default="https://openpagerank.com/api/v1.0/getPageRank")
    openpagerank_timeout_s: float = Field(default=10.0, ge=1.0, le=120.0)

    site_timeout_s: float = Field(default=10.0, ge=1.0, le=120.0)
    site_user_agent: str = Field(default="NicheRank Bot 1.0 (Website Analyzer)")

    # Scoring
    score_batch_size: int = Field(default=3, ge=1, le=20)
    score_batch_pause_s: float = Field(default=1.0, ge=0.0, le=30.0)
    # Off by default: the ranked list uses a constant freshness score
    freshness_from_headers: bool = Field(default=False)

    # Run store
    store_backend: Literal["memory", "file", "redis"] = Field(default="memory")
    store_dir: Path = Field(default=Path("artifacts") / "runs")

    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_key_prefix: str = Field(default="nicherank")
    redis_ttl_s: int = Field(default=60 * 60 * 24, ge=60)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("NICHERANK_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
