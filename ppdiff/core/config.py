from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict



class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    OSU_API_KEY: str = ""
    OSU_BASE_URL: str = "https://osu.ppy.sh"
    # External service that runs the per-play performance formula
    PP_CALCULATOR_URL: str = "http://localhost:5000"
    PORT: int = 8000
    APP_ENV: Literal["development", "production"] = "production"

    HTTP_TIMEOUT: float = 10.0
    HTTP_MAX_RETRIES: int = 3

    # Beatmap definition cache. Entries are written once and never invalidated.
    BEATMAP_CACHE_BACKEND: Literal["filesystem", "redis", "memory"] = "filesystem"
    BEATMAP_CACHE_DIR: str = "cache"
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 20
    REDIS_BEATMAP_KEY: str = "ppdiff:beatmap:"

    # Optional direct access to the score database (e.g. mysql+aiomysql://...)
    DATABASE_URL: str | None = None
    DATABASE_ECHO: bool = False
    # Beatmaps known to break local evaluation; skipped by the database source
    BEATMAP_BLACKLIST: list[int] = []

    TOP_PLAYS_LIMIT: int = 100
    # Upper bound on plays resolved/evaluated at the same time
    EVALUATION_CONCURRENCY: int = 8


settings = Settings()

