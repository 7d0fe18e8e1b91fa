from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    TMDB_READ_ACCESS_TOKEN: str
    TMDB_BASE_URL: str = 'https://api.themoviedb.org/3'
    TMDB_TIMEOUT: float = 10.0
    REDIS_URL: Optional[str] = None
    LOG_LEVEL: str = 'INFO'

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Build the settings object once per process.

    Fails with a pydantic ValidationError when TMDB_READ_ACCESS_TOKEN
    is missing from both the environment and .env.
    """
    return Settings()
