"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Database
    # ======================
    DATABASE_URL: str = "sqlite+aiosqlite:///./asset_ledger.db"
    AUTO_CREATE_TABLES: bool = True

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # ======================
    # Exchange rates (TCMB)
    # ======================
    RATE_SOURCE_URL: str = "https://www.tcmb.gov.tr/kurlar/today.xml"
    RATE_FETCH_TIMEOUT_SECONDS: float = 10.0
    RATE_CACHE_TTL_SECONDS: int = 3600

    # ======================
    # Timezone
    # ======================
    TIMEZONE: str = "Europe/Istanbul"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
