"""Application configuration.

Loads settings from environment variables (prefixed ``MODEFILTER_``)
with sensible defaults.
"""

from pydantic_settings import BaseSettings

from modefilter.domain.value_objects import GlobalMode


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Entry store
    store_backend: str = "memory"  # memory | sql
    database_url: str = "postgresql+asyncpg://modefilter:modefilter_dev_password@db:5432/modefilter"

    # Demo catalog (memory backend)
    seed: int = 42
    entries_per_category: int = 10

    # Authentication
    api_key: str = "dev-api-key-change-in-production"
    token_secret: str = "dev-token-secret-change-in-production"
    token_ttl_seconds: int = 12 * 60 * 60

    # Engine limits
    max_candidate_pool: int = 10_000
    facet_sample_size: int = 50

    # Storefront settings
    global_mode: GlobalMode = GlobalMode.SELL
    hide_prices: bool = True
    replace_button: bool = True
    button_label: str = "Enquire"
    button_url: str = ""

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_prefix = "MODEFILTER_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
