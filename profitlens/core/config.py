from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from datetime import date
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "ProfitLens"
    APP_PORT: int = 9210
    DEBUG: bool = False

    # Store calendar - ad spend dates and order dates are bucketed in this zone
    STORE_TIMEZONE: str = "Asia/Kolkata"
    CURRENCY_CODE: str = "INR"

    # Projection defaults
    WORKING_DAYS_PER_MONTH: int = 30
    PROJECTION_WINDOW_DAYS: int = 30
    PROJECTION_CUTOVER_DATE: Optional[date] = None

    # Logging
    LOGS_PATH: str = "/tmp/profitlens_logs"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False

    model_config = SettingsConfigDict(
        env_prefix="PROFITLENS_",
        env_file=".env",
        extra="ignore",
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
