"""Application configuration via environment variables."""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_PATH: str = "./data/job_board.sqlite3"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: list[str] = ["*"]

    # Auth
    JWT_SECRET: str = "your-secret-key"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24
    PASSWORD_HASH_ITERATIONS: int = 260_000

    # Rate Limiting
    RATE_LIMIT_REQUESTS_PER_MINUTE: int = 100
    RATE_LIMIT_BURST: int = 50

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("PORT")
    @classmethod
    def _valid_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError(f"PORT must be between 1 and 65535, got {value}")
        return value

    @field_validator("DATABASE_PATH")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("DATABASE_PATH must not be empty")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
