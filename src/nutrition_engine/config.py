"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Settings for the catalog and substitution collaborators."""

    supabase_url: str
    supabase_service_key: str
    off_base_url: str = "https://br.openfoodfacts.org"
    off_page_size: int = 25
    off_timeout_seconds: float = 7.0
    external_search_enabled: bool = True
    catalog_cache_ttl_seconds: int = 3600
    catalog_retry_attempts: int = 1
    diet_plan_seed: int | None = None
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
